"""Fatigue / progression engine — recovery, accumulation, advice, analytics."""

from app.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from app.engine.recovery import recover
from app.engine.accumulator import fold, fold_sessions
from app.engine.progression import advise

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "recover",
    "fold",
    "fold_sessions",
    "advise",
]
