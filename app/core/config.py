"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).  Engine
tunables are optional overrides on top of
:data:`~app.engine.config.DEFAULT_ENGINE_CONFIG`.
"""

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from app.schemas.exercise import ExerciseType
from app.schemas.muscle import Muscle

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "LiftLog fatigue and progression engine"
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["LiftLog developers"]
    PROJECT_URL: str = ""

    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Engine overrides (None keeps the default)
    DELOAD_THRESHOLD: Optional[float] = None
    PROGRESSION_THRESHOLD: Optional[float] = None
    RIR_PROGRESSION_THRESHOLD: Optional[float] = None
    MIN_SETS_PER_WEEK: Optional[float] = None
    MAX_SETS_PER_WEEK: Optional[float] = None
    OPTIMAL_SETS_PER_WEEK: Optional[float] = None
    DEFAULT_RECOVERY_RATE: Optional[float] = None
    SYSTEMIC_RECOVERY_RATE: Optional[float] = None
    # JSON objects, e.g. MUSCLE_RECOVERY_RATES='{"Quads": 0.16}'
    MUSCLE_RECOVERY_RATES: Optional[dict[Muscle, float]] = None
    WEIGHT_INCREMENTS: Optional[dict[ExerciseType, float]] = None

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        # Shared by logging.basicConfig and uvicorn's log_level.
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level

    def engine_config(self) -> EngineConfig:
        """Build the :class:`EngineConfig` with environment overrides applied."""
        overrides = {
            "deload_threshold": self.DELOAD_THRESHOLD,
            "progression_threshold": self.PROGRESSION_THRESHOLD,
            "rir_progression_threshold": self.RIR_PROGRESSION_THRESHOLD,
            "min_sets_per_week": self.MIN_SETS_PER_WEEK,
            "max_sets_per_week": self.MAX_SETS_PER_WEEK,
            "optimal_sets_per_week": self.OPTIMAL_SETS_PER_WEEK,
            "default_recovery_rate": self.DEFAULT_RECOVERY_RATE,
            "systemic_recovery_rate": self.SYSTEMIC_RECOVERY_RATE,
        }
        values = DEFAULT_ENGINE_CONFIG.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        if self.MUSCLE_RECOVERY_RATES:
            values["muscle_recovery_rates"] = {
                **DEFAULT_ENGINE_CONFIG.muscle_recovery_rates,
                **self.MUSCLE_RECOVERY_RATES,
            }
        if self.WEIGHT_INCREMENTS:
            values["weight_increments"] = {
                **DEFAULT_ENGINE_CONFIG.weight_increments,
                **self.WEIGHT_INCREMENTS,
            }
        # Re-validate so out-of-range overrides fail at start-up.
        return EngineConfig.model_validate(values)


# Global settings instance
settings = Settings()
