"""Exercise catalog lookup.  Populated by the host; ships no presets."""

from app.catalog.registry import ExerciseCatalog

__all__ = ["ExerciseCatalog"]
