"""
Training session schemas.

Session history is owned by the host and is never mutated by the
engine.  Its unit is the :class:`SessionExercise` — one exercise
performed on one date, with its logged sets in order.  The accumulator
folds whole days at a time, so flat history records are grouped into
:class:`TrainingSession` values with :func:`group_history`.
"""

from __future__ import annotations

import datetime
from collections import defaultdict
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.exercise import Exercise
from app.schemas.muscle import Muscle


class PerformedSet(BaseModel):
    """A single logged set."""

    model_config = ConfigDict(frozen=True)

    weight: float = Field(..., ge=0.0, description="Load lifted")
    reps: int = Field(..., ge=0, description="Repetitions performed")
    rir: float = Field(..., ge=0.0, description="Reps in reserve (lower = harder)")

    @property
    def volume(self) -> float:
        """Set tonnage, ``weight × reps``."""
        return self.weight * self.reps


class SessionExercise(BaseModel):
    """One exercise performed on one date."""

    exercise: Exercise
    date: datetime.date
    sets: list[PerformedSet] = Field(
        default_factory=list,
        description="Logged sets in performance order (may be empty)",
    )

    @field_validator("sets", mode="before")
    @classmethod
    def _missing_sets_are_empty(cls, value: Any) -> Any:
        # A record without a sets array contributes nothing.
        return [] if value is None else value

    @property
    def has_sets(self) -> bool:
        return len(self.sets) > 0

    @property
    def volume(self) -> float:
        return sum(s.volume for s in self.sets)

    def top_set(self) -> PerformedSet | None:
        """The set maximising ``weight × reps`` (first one on ties)."""
        if not self.sets:
            return None
        top = self.sets[0]
        for s in self.sets[1:]:
            if s.volume > top.volume:
                top = s
        return top


class TrainingSession(BaseModel):
    """All exercises performed on a single date — the unit of folding."""

    date: datetime.date
    exercises: list[SessionExercise] = Field(default_factory=list)

    @property
    def set_count(self) -> int:
        return sum(len(ex.sets) for ex in self.exercises)


class SubjectiveRatings(BaseModel):
    """Caller-supplied subjective inputs for one fold."""

    perceived_fatigue: float = Field(
        5.0, ge=0.0, le=10.0,
        description="Whole-body perceived fatigue, 0-10 (5 = neutral)",
    )
    soreness: dict[Muscle, float] = Field(
        default_factory=dict,
        description="Per-muscle soreness rating, 0+ (0 = none)",
    )

    @field_validator("soreness")
    @classmethod
    def _soreness_non_negative(cls, value: dict[Muscle, float]) -> dict[Muscle, float]:
        for muscle, rating in value.items():
            if rating < 0:
                raise ValueError(f"Soreness for {muscle.value} must be >= 0, got {rating}")
        return value


def history_for(exercise_id: str, history: Iterable[SessionExercise]) -> list[SessionExercise]:
    """Records of a single exercise, unsorted."""
    return [r for r in history if r.exercise.id == exercise_id]


def qualifying(history: Iterable[SessionExercise]) -> list[SessionExercise]:
    """Records with at least one logged set."""
    return [r for r in history if r.has_sets]


def group_history(history: Iterable[SessionExercise]) -> list[TrainingSession]:
    """Group flat records into dated sessions, oldest first.

    Record order within a day is preserved.
    """
    by_date: dict[datetime.date, list[SessionExercise]] = defaultdict(list)
    for record in history:
        by_date[record.date].append(record)
    return [
        TrainingSession(date=day, exercises=by_date[day])
        for day in sorted(by_date)
    ]
