"""
Shared API dependencies.

Reusable FastAPI dependencies for engine configuration and services.
"""

from functools import lru_cache

from fastapi import Depends

from app.core.config import settings
from app.engine.config import EngineConfig
from app.services.fatigue_service import FatigueService


@lru_cache
def get_engine_config() -> EngineConfig:
    """Engine configuration built once from the environment."""
    return settings.engine_config()


def get_fatigue_service(config: EngineConfig = Depends(get_engine_config)) -> FatigueService:
    return FatigueService(config)
