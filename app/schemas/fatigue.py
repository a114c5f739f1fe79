"""
Fatigue state schema.

The :class:`FatigueState` is the only stateful value of the engine.  It
is created empty for a new profile, replaced wholesale by every fold of
the accumulator, and persisted verbatim by the host between folds.

Readiness
---------
Readiness is **derived**, never stored on its own::

    readiness = exp(-fatigue)

so 1.0 means fully recovered and values approach 0 as fatigue grows.
Both readiness fields are pydantic computed fields: they appear in
serialised output for display but are ignored on input, which keeps the
relationship with fatigue impossible to break.
"""

from __future__ import annotations

import datetime
import math
import sys
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from app.schemas.muscle import MUSCLE_NAMES, Muscle

# exp(-f) underflows to 0.0 for f > ~745; readiness stays in (0, 1].
_MIN_READINESS = sys.float_info.min


def readiness_from_fatigue(fatigue: float) -> float:
    """Map a non-negative fatigue value to a readiness in (0, 1]."""
    return max(math.exp(-max(fatigue, 0.0)), _MIN_READINESS)


class FatigueState(BaseModel):
    """Accumulated training fatigue for one profile."""

    local_fatigue: dict[Muscle, float] = Field(
        default_factory=dict,
        description="Per-muscle accumulated fatigue",
    )
    systemic_fatigue: float = Field(
        0.0, ge=0.0,
        description="Whole-body accumulated fatigue",
    )
    weekly_stimulus: dict[Muscle, float] = Field(
        default_factory=dict,
        description="Rolling stimulus accumulator (windowed by the caller)",
    )
    last_session_date: Optional[datetime.date] = Field(
        None,
        description="Date of the most recently folded session",
    )

    @field_validator("local_fatigue", "weekly_stimulus")
    @classmethod
    def _non_negative(cls, value: dict[Muscle, float]) -> dict[Muscle, float]:
        for muscle, amount in value.items():
            if amount < 0:
                raise ValueError(f"{muscle.value}: value must be >= 0, got {amount}")
        return value

    # ------------------------------------------------------------------
    # Derived readiness
    # ------------------------------------------------------------------

    @computed_field  # type: ignore[prop-decorator]
    @property
    def muscle_readiness(self) -> dict[Muscle, float]:
        """Readiness for every tracked muscle (1.0 when untouched)."""
        return {
            m: readiness_from_fatigue(self.local_fatigue.get(m, 0.0))
            for m in MUSCLE_NAMES
        }

    @computed_field  # type: ignore[prop-decorator]
    @property
    def systemic_readiness(self) -> float:
        return readiness_from_fatigue(self.systemic_fatigue)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls) -> FatigueState:
        """Fresh state: no fatigue, full readiness, no sessions."""
        return cls()

    def readiness_of(self, muscle: Muscle) -> float:
        return readiness_from_fatigue(self.local_fatigue.get(muscle, 0.0))

    def reset_weekly_stimulus(self) -> FatigueState:
        """Return a copy with the stimulus accumulator cleared."""
        return self.model_copy(update={"weekly_stimulus": {}})


class RecoveryEstimate(BaseModel):
    """Estimated days of rest before fatigue clears."""

    muscle_recovery_days: dict[Muscle, int]
    systemic_recovery_days: int
    recommended_rest_days: int


class DeloadCheck(BaseModel):
    """Whole-profile deload screen."""

    needed: bool
    type: Optional[str] = Field(
        None, description="One of: systemic, local (None if not needed)",
    )
    severity: str = Field(..., description="One of: none, moderate, high")
    muscles: dict[Muscle, float] = Field(
        default_factory=dict,
        description="Muscles below the deload threshold with their readiness",
    )
    message: str


class RestRecommendation(BaseModel):
    """Whether to rest before the next session."""

    recommend_rest: bool
    min_rest_days: int = Field(..., ge=0)
    optional: bool = Field(False, description="Rest is advised but not required")
    reason: str
    message: str
    affected_muscles: dict[Muscle, float] = Field(
        default_factory=dict,
        description="Target muscles below the caution threshold with their readiness",
    )
