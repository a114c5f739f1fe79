"""
Recovery model — continuous exponential decay of accumulated fatigue.

Between sessions every muscle sheds fatigue at its own daily rate, and
the whole body sheds systemic fatigue at a single global rate:

    local[m](d)  = local[m](0)  × exp(-rate[m] × d)
    systemic(d)  = systemic(0)  × exp(-systemic_rate × d)

where ``d`` is the number of **whole days** elapsed since the last
folded session.

Design choices
--------------
1. **Single exponent** — decay is applied once as ``exp(-rate × d)``,
   never as ``d`` successive multiplications of partially decayed state.
2. **Whole days** — sessions are dated, not timed.  Same-day and
   backdated requests (``d <= 0``) apply no recovery; that is a policy
   choice, not input validation.
3. **Projection** — :func:`recover` does not move
   ``last_session_date``.  Its output is what the state *looks like* on
   ``as_of``; only the accumulator advances the anchor date, so feeding
   a recovered state back into :func:`recover` would decay it twice.
4. **Stimulus untouched** — ``weekly_stimulus`` is windowed by the
   caller, not by elapsed days.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Iterable, Mapping, Optional

from app.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from app.schemas.exercise import Exercise
from app.schemas.fatigue import DeloadCheck, FatigueState, RecoveryEstimate, RestRecommendation
from app.schemas.muscle import Muscle

logger = logging.getLogger(__name__)

# (upper fatigue bound, days); beyond the last bound use _MAX_RECOVERY_DAYS.
_RECOVERY_DAY_BANDS: list[tuple[float, int]] = [
    (0.2, 1),
    (0.4, 2),
    (0.6, 3),
]
_MAX_RECOVERY_DAYS = 5

# More than this many fatigued muscles makes a local deload "high" severity.
_LOCAL_DELOAD_HIGH_SEVERITY_COUNT = 3

# Readiness thresholds for rest advice.
_REST_SYSTEMIC_THRESHOLD = 0.6
_REST_SYSTEMIC_DAYS = 2
_REST_TARGET_THRESHOLD = 0.6
_REST_CAUTION_THRESHOLD = 0.7
_REST_MEAN_THRESHOLD = 0.65


# ======================================================================
# Helpers
# ======================================================================


def days_between(start: datetime.date, end: datetime.date) -> int:
    """Whole days from *start* to *end* (negative when *end* is earlier)."""
    return (end - start).days


# ======================================================================
# Main entry point
# ======================================================================


def recover(
    state: FatigueState,
    as_of: datetime.date,
    config: Optional[EngineConfig] = None,
) -> FatigueState:
    """Project *state* forward to *as_of* by exponential recovery.

    Args:
        state: Current fatigue state.
        as_of: Date to recover to.
        config: Optional :class:`EngineConfig` override.

    Returns:
        A new :class:`FatigueState`, or *state* itself when no whole day
        has elapsed (or no session was ever folded).
    """
    if state.last_session_date is None:
        return state

    days = days_between(state.last_session_date, as_of)
    if days <= 0:
        return state

    cfg = config or DEFAULT_ENGINE_CONFIG

    local = {
        muscle: fatigue * math.exp(-cfg.recovery_rate(muscle) * days)
        for muscle, fatigue in state.local_fatigue.items()
    }
    systemic = state.systemic_fatigue * math.exp(-cfg.systemic_recovery_rate * days)

    logger.debug(
        "Recovered %d day(s) from %s: systemic %.4f -> %.4f",
        days, state.last_session_date, state.systemic_fatigue, systemic,
    )

    return state.model_copy(update={
        "local_fatigue": local,
        "systemic_fatigue": systemic,
    })


# ======================================================================
# Recovery timeline
# ======================================================================


def optimal_recovery_days(fatigue: float) -> int:
    """Suggested rest days to clear a given fatigue level."""
    for upper, days in _RECOVERY_DAY_BANDS:
        if fatigue < upper:
            return days
    return _MAX_RECOVERY_DAYS


def estimate_recovery_time(state: FatigueState) -> RecoveryEstimate:
    """Estimate per-muscle and systemic rest days for *state*."""
    muscle_days = {
        muscle: optimal_recovery_days(fatigue)
        for muscle, fatigue in state.local_fatigue.items()
    }
    systemic_days = optimal_recovery_days(state.systemic_fatigue)
    return RecoveryEstimate(
        muscle_recovery_days=muscle_days,
        systemic_recovery_days=systemic_days,
        recommended_rest_days=max([systemic_days, *muscle_days.values()]),
    )


# ======================================================================
# Whole-profile deload screen
# ======================================================================


def check_deload_needed(
    state: FatigueState,
    config: Optional[EngineConfig] = None,
) -> DeloadCheck:
    """Screen the whole profile for a deload.

    Systemic readiness below the threshold short-circuits the per-muscle
    check.
    """
    cfg = config or DEFAULT_ENGINE_CONFIG
    threshold = cfg.deload_threshold

    if state.systemic_readiness < threshold:
        return DeloadCheck(
            needed=True, type="systemic", severity="high",
            message="Systemic deload needed - reduce overall training volume.",
        )

    fatigued = {
        muscle: readiness
        for muscle, readiness in state.muscle_readiness.items()
        if readiness < threshold
    }
    if fatigued:
        names = ", ".join(m.value for m in fatigued)
        severity = "high" if len(fatigued) > _LOCAL_DELOAD_HIGH_SEVERITY_COUNT else "moderate"
        return DeloadCheck(
            needed=True, type="local", severity=severity, muscles=fatigued,
            message=f"Local deload needed for: {names}.",
        )

    return DeloadCheck(needed=False, severity="none", message="Recovery is adequate.")


# ======================================================================
# Rest advice
# ======================================================================


def rest_recommendation(
    muscle_readiness: Mapping[Muscle, float],
    systemic_readiness: float,
    next_exercises: Optional[Iterable[Exercise]] = None,
) -> RestRecommendation:
    """Decide whether to rest before the next session.

    Systemic readiness is checked first.  With a planned session the
    primary movers of *next_exercises* decide (muscles missing from
    *muscle_readiness* count as fully recovered); without one the mean
    readiness over *muscle_readiness* does.
    """
    if systemic_readiness < _REST_SYSTEMIC_THRESHOLD:
        return RestRecommendation(
            recommend_rest=True, min_rest_days=_REST_SYSTEMIC_DAYS,
            reason="Systemic fatigue is high",
            message=f"Take at least {_REST_SYSTEMIC_DAYS} rest days before your next session.",
        )

    targets: list[Muscle] = []
    for exercise in next_exercises or ():
        for muscle in exercise.prim:
            if muscle not in targets:
                targets.append(muscle)

    if not targets:
        values = list(muscle_readiness.values())
        mean = sum(values) / len(values) if values else 1.0
        if mean < _REST_MEAN_THRESHOLD:
            return RestRecommendation(
                recommend_rest=True, min_rest_days=1,
                reason="Overall muscle fatigue is elevated",
                message="Consider an extra rest day.",
            )
        return RestRecommendation(
            recommend_rest=False, min_rest_days=0,
            reason="Recovery is adequate", message="Ready to train.",
        )

    readiness = {m: muscle_readiness.get(m, 1.0) for m in targets}
    affected = {m: r for m, r in readiness.items() if r < _REST_CAUTION_THRESHOLD}
    names = ", ".join(m.value for m in affected)

    if min(readiness.values()) < _REST_TARGET_THRESHOLD:
        return RestRecommendation(
            recommend_rest=True, min_rest_days=1,
            reason=f"Target muscles ({names}) are not recovered",
            message="Add a rest day before training these muscles.",
            affected_muscles=affected,
        )
    if affected:
        return RestRecommendation(
            recommend_rest=True, min_rest_days=0, optional=True,
            reason=f"Target muscles ({names}) have lower readiness",
            message="Consider reducing volume or intensity for the affected muscles.",
            affected_muscles=affected,
        )
    return RestRecommendation(
        recommend_rest=False, min_rest_days=0,
        reason="Target muscles are recovered", message="Ready to train.",
    )
