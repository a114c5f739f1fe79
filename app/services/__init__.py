"""Business logic services."""

from app.services.fatigue_service import FatigueService

__all__ = [
    "FatigueService",
]
