"""
Progression advisor — turns readiness and recent performance into load
advice for one exercise.

Architecture (four ordered checks, first match wins):
    1. **Lookup**      — unknown exercise -> ``error``
    2. **History**     — no logged sets yet -> ``first_time``
    3. **Deload**      — systemic fatigue, then local fatigue, then
                         excessive weekly volume -> ``deload``
    4. **Progression** — readiness band × RIR × trend ->
                         ``progress`` / ``push_harder`` / ``maintain`` /
                         ``reduce``

The advisor never raises for well-formed input: "cannot compute" is
reported through the ``error`` advice.

Readiness bands (defaults)::

    both >= 0.85          high      progress / push_harder / maintain
    both >= 0.65          moderate  reduce on declining trend, else maintain
    otherwise             low       reduce
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from app.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from app.schemas.exercise import Exercise, ExerciseType
from app.schemas.muscle import Muscle
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
from app.schemas.training_session import (
    PerformedSet,
    SessionExercise,
    history_for,
    qualifying,
)

logger = logging.getLogger(__name__)

# Deload protocols: axial compounds cut load and sets, others add RIR.
_AXIAL_DELOAD = DeloadProtocol(
    set_reduction=0.5, weight_reduction=0.3, rir_increase=2, duration="4-7 days",
)
_STANDARD_DELOAD = DeloadProtocol(
    set_reduction=0.35, weight_reduction=0.0, rir_increase=2, duration="1-2 sessions",
)

# Deload prescription by severity.
_PRESCRIPTIONS: dict[str, DeloadProtocol] = {
    "high": DeloadProtocol(set_reduction=0.5, weight_reduction=0.3, rir_increase=3, duration="1-2 weeks"),
    "moderate": DeloadProtocol(set_reduction=0.4, weight_reduction=0.2, rir_increase=2, duration="1 week"),
    "light": DeloadProtocol(set_reduction=0.3, weight_reduction=0.15, rir_increase=1, duration="3-5 days"),
}

# Conservative starting loads when no similar exercise has been logged.
_STARTING_WEIGHTS: dict[ExerciseType, float] = {
    ExerciseType.COMPOUND_UPPER: 45.0,
    ExerciseType.COMPOUND_LOWER: 95.0,
    ExerciseType.ISOLATION_UPPER: 15.0,
    ExerciseType.ISOLATION_LOWER: 20.0,
}
_DEFAULT_STARTING_WEIGHT = 20.0
_PLATE_STEP = 2.5

# Plateau screen over the most recent qualifying sessions.
_STAGNATION_WINDOW = 4
_STAGNATION_MIN_SESSIONS = 3
_STAGNATION_TOLERANCE = 0.15
_STAGNATION_READINESS = 0.8


# ======================================================================
# Performance analysis
# ======================================================================


@dataclass
class PerformanceAnalysis:
    """Summary of the latest qualifying sessions of one exercise."""

    trend: PerformanceTrend
    avg_rir: Optional[float] = None
    top_set: Optional[PerformedSet] = None


def _round_to_plate(weight: float) -> float:
    return round(weight / _PLATE_STEP) * _PLATE_STEP


def _clamp_readiness(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _primary_readiness(exercise: Exercise, muscle_readiness: Mapping[Muscle, float]) -> float:
    """Lowest readiness across the primary movers (1.0 if none known)."""
    if not exercise.prim:
        return 1.0
    return min(muscle_readiness.get(m, 1.0) for m in exercise.prim)


def _primary_stimulus(exercise: Exercise, weekly_stimulus: Mapping[Muscle, float]) -> float:
    """Mean weekly stimulus across the primary movers (0.0 if none)."""
    if not exercise.prim:
        return 0.0
    return sum(weekly_stimulus.get(m, 0.0) for m in exercise.prim) / len(exercise.prim)


def analyze_performance(
    sessions: list[SessionExercise],
    deadband: float = 0.05,
) -> PerformanceAnalysis:
    """Compare the two most recent qualifying sessions.

    Args:
        sessions: History of a single exercise, any order.
        deadband: Relative change in top-set volume treated as noise.
    """
    recent = sorted(qualifying(sessions), key=lambda r: r.date, reverse=True)
    if not recent:
        return PerformanceAnalysis(trend=PerformanceTrend.INSUFFICIENT_DATA)

    latest = recent[0]
    top = latest.top_set()
    assert top is not None
    avg_rir = sum(s.rir for s in latest.sets) / len(latest.sets)

    trend = PerformanceTrend.STABLE
    if len(recent) > 1:
        previous_top = recent[1].top_set()
        assert previous_top is not None
        if top.volume > previous_top.volume * (1 + deadband):
            trend = PerformanceTrend.IMPROVED
        elif top.volume < previous_top.volume * (1 - deadband):
            trend = PerformanceTrend.DECLINED

    return PerformanceAnalysis(trend=trend, avg_rir=avg_rir, top_set=top)


# ======================================================================
# Deload check
# ======================================================================


def _deload_suggestion(exercise: Exercise, protocol: DeloadProtocol) -> str:
    if exercise.is_axial_compound:
        return (
            f"Cut the load by {protocol.weight_reduction:.0%} and drop "
            f"{protocol.set_reduction:.0%} of your sets; keep "
            f"{protocol.rir_increase}+ extra reps in reserve."
        )
    return (
        f"Keep the load but add {protocol.rir_increase} RIR per set and drop "
        f"{protocol.set_reduction:.0%} of your sets."
    )


def _check_deload(
    exercise: Exercise,
    primary_readiness: float,
    systemic_readiness: float,
    weekly_stimulus: Mapping[Muscle, float],
    cfg: EngineConfig,
) -> Optional[str]:
    """Return the deload reason, or ``None`` when no deload is needed."""
    if systemic_readiness < cfg.deload_threshold:
        return "systemic fatigue high"
    if primary_readiness < cfg.deload_threshold:
        return "local fatigue high"
    if _primary_stimulus(exercise, weekly_stimulus) > cfg.max_sets_per_week:
        return "volume excessive"
    return None


# ======================================================================
# Progression decision
# ======================================================================


def _decide(
    exercise: Exercise,
    analysis: PerformanceAnalysis,
    primary_readiness: float,
    systemic_readiness: float,
    cfg: EngineConfig,
) -> Recommendation:
    common = dict(
        muscle_readiness=primary_readiness,
        systemic_readiness=systemic_readiness,
        trend=analysis.trend,
    )
    avg_rir = analysis.avg_rir if analysis.avg_rir is not None else 0.0

    # High readiness: ready for more stimulus.
    if primary_readiness >= cfg.progression_threshold and systemic_readiness >= cfg.progression_threshold:
        if avg_rir <= cfg.rir_progression_threshold and analysis.top_set is not None:
            increment = weight_increment(exercise.type, cfg)
            return Recommendation(
                advice=Advice.PROGRESS, readiness=ReadinessLabel.HIGH,
                suggestion=f"Time to progress. Increase the load by {increment:g}.",
                reason="low RIR with high readiness",
                recommended_weight=analysis.top_set.weight + increment,
                **common,
            )
        if avg_rir >= cfg.high_rir_threshold:
            return Recommendation(
                advice=Advice.PUSH_HARDER, readiness=ReadinessLabel.HIGH,
                suggestion="You have room to push harder. Reduce RIR by 1-2 before adding load.",
                reason="high RIR with high readiness",
                **common,
            )
        return Recommendation(
            advice=Advice.MAINTAIN, readiness=ReadinessLabel.HIGH,
            suggestion="Maintain the current approach - you are in the productive effort range.",
            reason="moderate RIR with high readiness",
            **common,
        )

    # Moderate readiness: hold, or back off if performance is slipping.
    if primary_readiness >= cfg.moderate_readiness_threshold and systemic_readiness >= cfg.moderate_readiness_threshold:
        if analysis.trend == PerformanceTrend.DECLINED:
            return Recommendation(
                advice=Advice.REDUCE, readiness=ReadinessLabel.MODERATE,
                suggestion="Performance is declining. Add 1 RIR and keep the load to prioritise recovery.",
                reason="recent performance decline",
                **common,
            )
        return Recommendation(
            advice=Advice.MAINTAIN, readiness=ReadinessLabel.MODERATE,
            suggestion="Maintain the current load and focus on movement quality.",
            reason="moderate readiness",
            **common,
        )

    # Low readiness (but not a deload).
    return Recommendation(
        advice=Advice.REDUCE, readiness=ReadinessLabel.LOW,
        suggestion="Add 1-2 RIR to limit further fatigue. Keep the technique focus.",
        reason="readiness below optimal",
        **common,
    )


# ======================================================================
# Main entry point
# ======================================================================


def advise(
    exercise_id: str,
    exercises: Iterable[Exercise],
    history: Iterable[SessionExercise],
    muscle_readiness: Mapping[Muscle, float],
    systemic_readiness: float,
    weekly_stimulus: Mapping[Muscle, float],
    config: Optional[EngineConfig] = None,
) -> Recommendation:
    """Recommend the next load for one exercise.

    Args:
        exercise_id: Exercise to advise on.
        exercises: Catalog (any iterable of :class:`Exercise`, including
            an :class:`~app.catalog.registry.ExerciseCatalog`).
        history: Session history (any order, any exercise).
        muscle_readiness: Current per-muscle readiness.
        systemic_readiness: Current systemic readiness.
        weekly_stimulus: Current per-muscle weekly stimulus.
        config: Optional :class:`EngineConfig` override.

    Returns:
        :class:`Recommendation`.

    Readiness values outside ``[0, 1]`` are clamped before they are
    compared or echoed.
    """
    cfg = config or DEFAULT_ENGINE_CONFIG

    # 1. Lookup.
    exercise = next((e for e in exercises if e.id == exercise_id), None)
    if exercise is None:
        logger.debug("Advice for unknown exercise %r", exercise_id)
        return Recommendation(
            advice=Advice.ERROR, readiness=ReadinessLabel.UNKNOWN,
            suggestion="Exercise not found.",
            reason=f"unknown exercise '{exercise_id}'",
        )

    # 2. First time.
    own_history = qualifying(history_for(exercise_id, history))
    if not own_history:
        return Recommendation(
            advice=Advice.FIRST_TIME, readiness=ReadinessLabel.HIGH,
            suggestion="Start conservative - focus on technique and find your working weight.",
            muscle_readiness=1.0, systemic_readiness=1.0,
        )

    primary = _clamp_readiness(_primary_readiness(exercise, muscle_readiness))
    systemic_readiness = _clamp_readiness(systemic_readiness)

    # 3. Deload.
    reason = _check_deload(exercise, primary, systemic_readiness, weekly_stimulus, cfg)
    if reason is not None:
        protocol = _AXIAL_DELOAD if exercise.is_axial_compound else _STANDARD_DELOAD
        logger.debug("Deload for %s: %s", exercise_id, reason)
        return Recommendation(
            advice=Advice.DELOAD, readiness=ReadinessLabel.DELOAD,
            suggestion=_deload_suggestion(exercise, protocol),
            reason=reason,
            muscle_readiness=primary,
            systemic_readiness=systemic_readiness,
            deload_protocol=protocol,
        )

    # 4. Progression.
    analysis = analyze_performance(own_history, cfg.performance_deadband)
    recommendation = _decide(exercise, analysis, primary, systemic_readiness, cfg)
    logger.debug(
        "Advice for %s: %s (trend=%s, avg_rir=%s)",
        exercise_id, recommendation.advice.value, analysis.trend.value, analysis.avg_rir,
    )
    return recommendation


# ======================================================================
# Supporting recommendations
# ======================================================================


def weight_increment(exercise_type: ExerciseType, config: Optional[EngineConfig] = None) -> float:
    """Load increment used when progressing an exercise of this type."""
    cfg = config or DEFAULT_ENGINE_CONFIG
    return cfg.weight_increment(exercise_type)


def volume_recommendation(
    muscle: Muscle,
    weekly_stimulus: Mapping[Muscle, float],
    muscle_readiness: Mapping[Muscle, float],
    config: Optional[EngineConfig] = None,
) -> VolumeRecommendation:
    """Compare a muscle's weekly stimulus against the set landmarks."""
    cfg = config or DEFAULT_ENGINE_CONFIG
    current = weekly_stimulus.get(muscle, 0.0)
    readiness = muscle_readiness.get(muscle, 1.0)

    if current < cfg.min_sets_per_week:
        return VolumeRecommendation(
            status="low", recommendation="increase",
            message=f"Add {math.ceil(cfg.min_sets_per_week - current)} more sets this week.",
            target_sets=cfg.min_sets_per_week,
        )
    if current > cfg.max_sets_per_week:
        return VolumeRecommendation(
            status="high", recommendation="decrease",
            message=f"Reduce volume by {math.ceil(current - cfg.max_sets_per_week)} sets.",
            target_sets=cfg.max_sets_per_week,
        )
    if current <= cfg.optimal_sets_per_week:
        if readiness > 0.9 and current < cfg.optimal_sets_per_week:
            return VolumeRecommendation(
                status="good_can_add", recommendation="increase_optional",
                message=(
                    "Volume is good, but high readiness leaves room for "
                    f"{math.ceil(cfg.optimal_sets_per_week - current)} more sets."
                ),
                target_sets=cfg.optimal_sets_per_week,
            )
        return VolumeRecommendation(
            status="optimal", recommendation="maintain",
            message="Volume is in the optimal range.",
        )
    return VolumeRecommendation(
        status="moderate_high", recommendation="monitor",
        message="Volume is on the higher end but manageable.",
    )


def check_stagnation(
    exercise: Exercise,
    history: Iterable[SessionExercise],
    muscle_readiness: Mapping[Muscle, float],
    weekly_stimulus: Mapping[Muscle, float],
    config: Optional[EngineConfig] = None,
) -> StagnationCheck:
    """Detect a volume plateau on an exercise the lifter is ready to push.

    The last few qualifying sessions are flat when every volume is within
    ±15 % of their mean.  A flat series with primary readiness above 0.8
    is a plateau: add volume while the primary movers are under the
    optimal weekly stimulus, otherwise raise intensity.
    """
    cfg = config or DEFAULT_ENGINE_CONFIG
    recent = sorted(
        qualifying(history_for(exercise.id, history)),
        key=lambda r: r.date,
        reverse=True,
    )[:_STAGNATION_WINDOW]
    if len(recent) < _STAGNATION_MIN_SESSIONS:
        return StagnationCheck(stagnant=False, message="Insufficient history to detect stagnation.")

    volumes = [r.volume for r in recent]
    mean = sum(volumes) / len(volumes)
    flat = all(abs(v - mean) < mean * _STAGNATION_TOLERANCE for v in volumes)

    if flat and _primary_readiness(exercise, muscle_readiness) > _STAGNATION_READINESS:
        if _primary_stimulus(exercise, weekly_stimulus) < cfg.optimal_sets_per_week:
            return StagnationCheck(
                stagnant=True, recommendation="add_volume",
                message="Volume has plateaued but you can handle more.",
            )
        return StagnationCheck(
            stagnant=True, recommendation="increase_intensity",
            message="Performance has plateaued at the current volume.",
        )
    return StagnationCheck(stagnant=False, message="Progressing normally.")


def deload_prescription(
    exercise: Exercise,
    last_performance: Optional[SessionExercise],
    readiness: float,
) -> DeloadPrescription:
    """Concrete deload session derived from the last performance."""
    severity = "high" if readiness < 0.5 else "moderate" if readiness < 0.65 else "light"
    protocol = _PRESCRIPTIONS[severity]

    if last_performance is None or not last_performance.has_sets:
        return DeloadPrescription(
            sets=max(1, math.ceil(3 * (1 - protocol.set_reduction))),
            reps=8, weight=None, rir=4, duration=protocol.duration, severity=severity,
        )

    sets = last_performance.sets
    avg_weight = sum(s.weight for s in sets) / len(sets)
    avg_reps = sum(s.reps for s in sets) / len(sets)
    avg_rir = sum(s.rir for s in sets) / len(sets)

    instructions = [
        f"Use {1 - protocol.weight_reduction:.0%} of normal working weight",
        f"Reduce sets by {protocol.set_reduction:.0%}",
        f"Keep {protocol.rir_increase + 2}-{protocol.rir_increase + 4} RIR on all sets",
        "Focus on movement quality and technique",
    ]
    if exercise.axial:
        instructions.append("Consider removing or significantly lightening this axial exercise")

    return DeloadPrescription(
        sets=max(1, math.ceil(len(sets) * (1 - protocol.set_reduction))),
        reps=math.ceil(avg_reps * 0.9),
        weight=_round_to_plate(avg_weight * (1 - protocol.weight_reduction)),
        rir=min(5.0, avg_rir + protocol.rir_increase),
        duration=protocol.duration,
        severity=severity,
        instructions=instructions,
    )


def suggest_starting_weight(exercise: Exercise, history: Iterable[SessionExercise]) -> float:
    """Starting load for a new exercise.

    80 % of the average load used on similar exercises (same type, at
    least one shared primary mover), else a type-based default.
    """
    similar = [
        r for r in qualifying(history)
        if r.exercise.id != exercise.id
        and r.exercise.type == exercise.type
        and set(r.exercise.prim) & set(exercise.prim)
    ]
    if not similar:
        return _STARTING_WEIGHTS.get(exercise.type, _DEFAULT_STARTING_WEIGHT)

    avg_weight = sum(
        sum(s.weight for s in r.sets) / len(r.sets) for r in similar
    ) / len(similar)
    return _round_to_plate(avg_weight * 0.8)
