"""Pydantic schemas for engine inputs, outputs and API bodies."""

from app.schemas.muscle import MUSCLE_NAMES, Muscle, MuscleRole
from app.schemas.exercise import Exercise, ExerciseType
from app.schemas.training_session import (
    PerformedSet,
    SessionExercise,
    SubjectiveRatings,
    TrainingSession,
)
from app.schemas.fatigue import DeloadCheck, FatigueState, RecoveryEstimate, RestRecommendation
from app.schemas.progression import (
    Advice,
    DeloadPrescription,
    DeloadProtocol,
    PerformanceTrend,
    ReadinessLabel,
    Recommendation,
    StagnationCheck,
    VolumeRecommendation,
)

__all__ = [
    "MUSCLE_NAMES",
    "Muscle",
    "MuscleRole",
    "Exercise",
    "ExerciseType",
    "PerformedSet",
    "SessionExercise",
    "SubjectiveRatings",
    "TrainingSession",
    "DeloadCheck",
    "FatigueState",
    "RecoveryEstimate",
    "RestRecommendation",
    "Advice",
    "DeloadPrescription",
    "DeloadProtocol",
    "PerformanceTrend",
    "ReadinessLabel",
    "Recommendation",
    "StagnationCheck",
    "VolumeRecommendation",
]
