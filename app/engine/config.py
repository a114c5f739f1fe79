"""
Engine configuration — every tunable constant in one injectable object.

Nothing in :mod:`app.engine` reads a module-level constant at call
time: the recovery model, the accumulator and the advisor all take an
optional :class:`EngineConfig` and fall back to
``DEFAULT_ENGINE_CONFIG``.  Per-user or per-test overrides are plain
copies::

    cfg = DEFAULT_ENGINE_CONFIG.model_copy(update={"deload_threshold": 0.5})

Calibration notes
-----------------
Recovery rates are per-day exponential constants::

    fatigue(t) = fatigue(0) × exp(-rate × days)

0.20/day clears ~18 % of local fatigue per day; systemic fatigue recovers
slower at 0.15/day.  Larger muscle groups get slightly slower rates.

Fatigue scales (``0.001`` local, ``0.0001`` systemic) convert raw
tonnage (weight × reps) into the same units as decayed fatigue, so that
a hard session lands readiness in the 0.5-0.9 band.  They must be kept
exactly for numeric compatibility with stored states.

Readiness thresholds follow the readiness bands:

    optimal   >= 0.85   ready to progress
    good      0.65-0.85 maintain
    moderate  0.60-0.65 reduce
    low       <  0.60   deload
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.exercise import ExerciseType
from app.schemas.muscle import Muscle, MuscleRole

# Per-muscle recovery rates (per day).  Muscles not listed use
# ``default_recovery_rate``.
_DEFAULT_MUSCLE_RECOVERY_RATES: dict[Muscle, float] = {
    Muscle.QUADS: 0.18,
    Muscle.HAMSTRINGS: 0.18,
    Muscle.GLUTES: 0.18,
    Muscle.BACK: 0.18,
    Muscle.CHEST: 0.20,
    Muscle.SHOULDERS: 0.22,
    Muscle.BICEPS: 0.25,
    Muscle.TRICEPS: 0.25,
    Muscle.CALVES: 0.25,
    Muscle.FOREARMS: 0.25,
    Muscle.ABS: 0.25,
}

_DEFAULT_ROLE_WEIGHTS: dict[MuscleRole, float] = {
    MuscleRole.PRIMARY: 1.0,
    MuscleRole.SECONDARY: 0.5,
    MuscleRole.TERTIARY: 0.25,
}

# Load increments used when recommending progression.
_DEFAULT_WEIGHT_INCREMENTS: dict[ExerciseType, float] = {
    ExerciseType.COMPOUND_UPPER: 2.5,
    ExerciseType.COMPOUND_LOWER: 5.0,
    ExerciseType.ISOLATION_UPPER: 2.5,
    ExerciseType.ISOLATION_LOWER: 5.0,
}


class EngineConfig(BaseModel):
    """Configuration for recovery, accumulation and progression."""

    # --- Recovery ---
    muscle_recovery_rates: dict[Muscle, float] = Field(
        default_factory=lambda: dict(_DEFAULT_MUSCLE_RECOVERY_RATES),
    )
    default_recovery_rate: float = Field(0.20, gt=0.0)
    systemic_recovery_rate: float = Field(0.15, gt=0.0)

    # --- Stimulus ---
    rir_decay_constant: float = Field(0.2, gt=0.0, description="effort = exp(-k × RIR)")
    role_weights: dict[MuscleRole, float] = Field(
        default_factory=lambda: dict(_DEFAULT_ROLE_WEIGHTS),
    )

    # --- Fatigue accumulation ---
    local_fatigue_scale: float = Field(0.001, gt=0.0)
    systemic_fatigue_scale: float = Field(0.0001, gt=0.0)
    axial_local_multiplier: float = Field(1.3, ge=1.0)
    axial_systemic_multiplier: float = Field(1.5, ge=1.0)

    # --- Subjective corrections ---
    neutral_perceived_fatigue: float = Field(5.0, ge=0.0, le=10.0)
    perceived_fatigue_weight: float = Field(0.1, ge=0.0)
    soreness_fatigue_weight: float = Field(0.05, ge=0.0)

    # --- Readiness thresholds ---
    deload_threshold: float = Field(0.60, gt=0.0, le=1.0)
    progression_threshold: float = Field(0.85, gt=0.0, le=1.0)
    moderate_readiness_threshold: float = Field(0.65, gt=0.0, le=1.0)

    # --- Progression ---
    rir_progression_threshold: float = Field(1.0, ge=0.0)
    high_rir_threshold: float = Field(3.0, ge=0.0)
    performance_deadband: float = Field(0.05, ge=0.0, lt=1.0)
    weight_increments: dict[ExerciseType, float] = Field(
        default_factory=lambda: dict(_DEFAULT_WEIGHT_INCREMENTS),
    )
    default_weight_increment: float = Field(2.5, ge=0.0)

    # --- Weekly volume (effective sets per muscle) ---
    min_sets_per_week: float = Field(10, ge=0)
    max_sets_per_week: float = Field(20, ge=0)
    optimal_sets_per_week: float = Field(15, ge=0)

    def recovery_rate(self, muscle: Muscle) -> float:
        return self.muscle_recovery_rates.get(muscle, self.default_recovery_rate)

    def role_weight(self, role: MuscleRole) -> float:
        return self.role_weights.get(role, 0.0)

    def weight_increment(self, exercise_type: ExerciseType) -> float:
        return self.weight_increments.get(exercise_type, self.default_weight_increment)


# Singleton default config
DEFAULT_ENGINE_CONFIG = EngineConfig()
