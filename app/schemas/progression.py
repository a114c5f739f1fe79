"""
Progression advisor schemas.

The advisor answers, for one exercise: *what should I do with the load
next time?*  Its answer is a :class:`Recommendation`, a value object
produced fresh on every call and never stored.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Advice(str, Enum):
    FIRST_TIME = "first_time"
    DELOAD = "deload"
    PROGRESS = "progress"
    PUSH_HARDER = "push_harder"
    MAINTAIN = "maintain"
    REDUCE = "reduce"
    ERROR = "error"


class ReadinessLabel(str, Enum):
    """Categorical readiness attached to a recommendation."""
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    DELOAD = "deload"
    UNKNOWN = "unknown"


class PerformanceTrend(str, Enum):
    IMPROVED = "improved"
    DECLINED = "declined"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


class DeloadProtocol(BaseModel):
    """How to back off for a deload."""

    set_reduction: float = Field(..., ge=0.0, le=1.0, description="Fraction of sets to drop")
    weight_reduction: float = Field(0.0, ge=0.0, le=1.0, description="Fraction of load to drop")
    rir_increase: int = Field(..., ge=0, description="Extra reps in reserve per set")
    duration: str


class Recommendation(BaseModel):
    """Load-progression advice for a single exercise."""

    advice: Advice
    suggestion: str = Field(..., description="Human-readable guidance")
    readiness: ReadinessLabel
    muscle_readiness: Optional[float] = Field(
        None, ge=0.0, le=1.0,
        description="Lowest readiness across the exercise's primary muscles",
    )
    systemic_readiness: Optional[float] = Field(None, ge=0.0, le=1.0)
    reason: Optional[str] = None
    recommended_weight: Optional[float] = Field(None, ge=0.0)
    trend: Optional[PerformanceTrend] = None
    deload_protocol: Optional[DeloadProtocol] = None


class VolumeRecommendation(BaseModel):
    """Weekly-set guidance for one muscle."""

    status: str = Field(
        ...,
        description="One of: low, high, good_can_add, optimal, moderate_high",
    )
    recommendation: str = Field(
        ...,
        description="One of: increase, decrease, increase_optional, maintain, monitor",
    )
    message: str
    target_sets: Optional[float] = None


class DeloadPrescription(BaseModel):
    """Concrete deload session for one exercise."""

    sets: int = Field(..., ge=1)
    reps: int = Field(..., ge=0)
    weight: Optional[float] = Field(None, ge=0.0)
    rir: float = Field(..., ge=0.0)
    duration: str
    severity: str = Field(..., description="One of: light, moderate, high")
    instructions: list[str] = Field(default_factory=list)


class StagnationCheck(BaseModel):
    """Plateau screen for one exercise."""

    stagnant: bool
    message: str
    recommendation: Optional[str] = Field(
        None, description="One of: add_volume, increase_intensity (None if not stagnant)",
    )
