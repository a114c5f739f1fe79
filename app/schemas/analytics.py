"""
Training analytics schemas.

Plain reporting records returned by :mod:`app.engine.analytics`.  They
are computed on demand from session history and never persisted.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.muscle import Muscle


class WeeklySummary(BaseModel):
    """Training totals for one calendar week."""

    start_date: datetime.date
    end_date: datetime.date = Field(..., description="Exclusive week end")
    sessions: int = Field(..., description="Exercise records logged in the week")
    training_days: int
    total_volume: float
    total_sets: int
    muscles_worked: list[Muscle]
    volume_per_muscle: dict[Muscle, float] = Field(
        ...,
        description="Role-weighted volume (secondary 0.6, tertiary 0.3)",
    )
    exercise_count: dict[str, int] = Field(..., description="Exercise name -> frequency")
    avg_volume_per_session: float


class WeeklyVolume(BaseModel):
    """One point of a volume trend."""

    label: str
    start_date: datetime.date
    end_date: datetime.date
    volume: float
    sets: int
    sessions: int
    muscle_volume: dict[Muscle, float]


class OverloadAnalysis(BaseModel):
    """Progressive-overload classification for one exercise."""

    trend: str = Field(
        ...,
        description="One of: increasing, decreasing, stable, insufficient_data",
    )
    message: str
    session_count: int = 0
    total_change_percent: Optional[float] = None
    time_span_days: Optional[int] = None
    starting_volume: Optional[float] = None
    current_volume: Optional[float] = None
    increase_rate_percent: Optional[float] = None


class SetRecord(BaseModel):
    """A set tagged with the date it was performed."""

    date: datetime.date
    weight: float
    reps: int
    rir: float
    volume: float


class PersonalRecords(BaseModel):
    max_weight: Optional[SetRecord] = None
    max_volume: Optional[SetRecord] = None
    max_reps: Optional[SetRecord] = None

    @property
    def best_set(self) -> Optional[SetRecord]:
        """Volume is the best single overall metric."""
        return self.max_volume


class ConsistencyScore(BaseModel):
    score: float = Field(..., ge=0.0, le=100.0)
    rating: str = Field(..., description="One of: Excellent, Good, Fair, Needs Improvement")
    workout_days: int
    total_days: int
    frequency_per_week: float


class PeriodStats(BaseModel):
    sessions: int
    volume: float
    sets: int


class PeriodChange(BaseModel):
    volume_percent: float
    sessions_diff: int
    trend: str = Field(..., description="One of: increasing, decreasing, stable")


class PeriodComparison(BaseModel):
    current: PeriodStats
    previous: PeriodStats
    change: PeriodChange


class IntensityDistribution(BaseModel):
    """Share of sets per RIR band, in percent."""

    high: float = Field(..., description="RIR 0-1")
    moderate: float = Field(..., description="RIR 2-3")
    low: float = Field(..., description="RIR 4+")
    total_sets: int


class Milestone(BaseModel):
    amount: float
    label: str


class VolumeLandmarks(BaseModel):
    total_volume: float
    achieved: list[Milestone]
    next_milestone: Optional[Milestone] = None
    progress_percent: float
