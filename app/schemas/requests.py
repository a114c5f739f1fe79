"""
API request bodies.

The engine is stateless, so every request carries the values it needs:
the stored :class:`FatigueState`, the session history and, for advice,
the exercise catalog.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.exercise import Exercise
from app.schemas.fatigue import FatigueState
from app.schemas.muscle import Muscle
from app.schemas.training_session import SessionExercise, SubjectiveRatings, TrainingSession


class FoldRequest(BaseModel):
    state: FatigueState = Field(default_factory=FatigueState.empty)
    session: TrainingSession
    ratings: Optional[SubjectiveRatings] = None


class RecoverRequest(BaseModel):
    state: FatigueState
    as_of: datetime.date


class ReplayRequest(BaseModel):
    history: list[SessionExercise] = Field(default_factory=list)
    ratings: dict[datetime.date, SubjectiveRatings] = Field(
        default_factory=dict,
        description="Subjective ratings keyed by session date",
    )
    initial: Optional[FatigueState] = None
    as_of: Optional[datetime.date] = Field(
        None, description="Project the replayed state to this date",
    )


class AdviseRequest(BaseModel):
    exercise_id: str
    exercises: list[Exercise] = Field(..., description="Exercise catalog")
    history: list[SessionExercise] = Field(default_factory=list)
    muscle_readiness: dict[Muscle, float] = Field(default_factory=dict)
    systemic_readiness: float = Field(1.0, gt=0.0, le=1.0)
    weekly_stimulus: dict[Muscle, float] = Field(default_factory=dict)

    @field_validator("muscle_readiness")
    @classmethod
    def _readiness_in_range(cls, value: dict[Muscle, float]) -> dict[Muscle, float]:
        for muscle, readiness in value.items():
            if not 0.0 < readiness <= 1.0:
                raise ValueError(f"Readiness for {muscle.value} must be in (0, 1], got {readiness}")
        return value


class HistoryRequest(BaseModel):
    history: list[SessionExercise] = Field(default_factory=list)
    as_of: datetime.date = Field(..., description="Reference date")
    days: Optional[int] = Field(None, description="Window length (endpoint default if omitted)")
    weeks: int = Field(4, description="Weeks of volume trend")
    exercise_id: Optional[str] = Field(
        None, description="Restrict per-exercise reports to this exercise",
    )


class RestRequest(BaseModel):
    muscle_readiness: dict[Muscle, float] = Field(default_factory=dict)
    systemic_readiness: float = Field(1.0, ge=0.0, le=1.0)
    next_exercises: list[Exercise] = Field(
        default_factory=list, description="Exercises planned for the next session",
    )


class StagnationRequest(BaseModel):
    exercise: Exercise
    history: list[SessionExercise] = Field(default_factory=list)
    muscle_readiness: dict[Muscle, float] = Field(default_factory=dict)
    weekly_stimulus: dict[Muscle, float] = Field(default_factory=dict)
