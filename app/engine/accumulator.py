"""
Fatigue accumulator — folds one training session into the fatigue state.

Each fold first recovers the previous state to the session date, then
adds the contribution of every logged set, then applies the caller's
subjective corrections.

Per set, for every muscle the exercise involves::

    effort         = exp(-k × RIR)                     (k = 0.2)
    load_factor    = weight / e1RM(weight, reps, RIR)
    stimulus      += effort × load_factor × role_weight
    local_fatigue += weight × reps × role_weight × axial_mult × 0.001

and once per set for non-isolation exercises::

    systemic      += weight × reps × axial_mult × 0.0001

The e1RM projects the set to failure: with ``RPE = 10 - RIR`` the total
reps the lifter had in them are ``reps / (1.0278 - 0.0278 × RPE)``, and
``e1RM = weight × (1 + total_reps / 30)`` (Epley).  The load factor is
therefore an intensity measure in (0, 1].

After the sets::

    systemic      += (perceived_fatigue - 5) × 0.1         (floored at 0)
    local[m]      *= 1 + soreness[m] × 0.05

Ordering
--------
Sessions must be folded once each, in non-decreasing date order.  A
session dated before ``last_session_date`` gets no recovery and moves
the anchor date backwards, which corrupts later decay.  This is logged
but not rejected; serialising folds is the caller's responsibility.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Iterable, Mapping, Optional

from app.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from app.engine.recovery import recover
from app.schemas.fatigue import FatigueState
from app.schemas.muscle import Muscle
from app.schemas.training_session import (
    PerformedSet,
    SessionExercise,
    SubjectiveRatings,
    TrainingSession,
)

logger = logging.getLogger(__name__)

_NEUTRAL_RATINGS = SubjectiveRatings()


# ======================================================================
# Per-set metrics
# ======================================================================


def estimated_one_rep_max(weight: float, reps: int, rir: float) -> float:
    """RPE-adjusted Epley estimate of the one-rep max."""
    rpe = 10.0 - rir
    total_reps = reps / (1.0278 - 0.0278 * rpe)
    return weight * (1.0 + total_reps / 30.0)


def set_effort(rir: float, config: Optional[EngineConfig] = None) -> float:
    """Effort in (0, 1]; a set taken to failure scores 1.0."""
    cfg = config or DEFAULT_ENGINE_CONFIG
    return math.exp(-cfg.rir_decay_constant * rir)


def load_factor(performed: PerformedSet) -> float:
    """Relative intensity of a set, ``weight / e1RM`` (0 for empty sets)."""
    e1rm = estimated_one_rep_max(performed.weight, performed.reps, performed.rir)
    if e1rm <= 0:
        return 0.0
    return performed.weight / e1rm


def set_stimulus(
    performed: PerformedSet,
    role_weight: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Stimulus one set delivers to a muscle with the given role weight."""
    return set_effort(performed.rir, config) * load_factor(performed) * role_weight


def session_stimulus(
    session: TrainingSession,
    config: Optional[EngineConfig] = None,
) -> dict[Muscle, float]:
    """Per-muscle stimulus contributed by *session* alone."""
    cfg = config or DEFAULT_ENGINE_CONFIG
    stimulus: dict[Muscle, float] = {}
    for record in session.exercises:
        roles = record.exercise.muscle_roles()
        for performed in record.sets:
            for muscle, role in roles.items():
                stimulus[muscle] = stimulus.get(muscle, 0.0) + set_stimulus(
                    performed, cfg.role_weight(role), cfg,
                )
    return stimulus


# ======================================================================
# Exercise contribution
# ======================================================================


def _accumulate_exercise(
    record: SessionExercise,
    local: dict[Muscle, float],
    stimulus: dict[Muscle, float],
    cfg: EngineConfig,
) -> float:
    """Add one exercise's sets into *local* / *stimulus* in place.

    Returns:
        The systemic fatigue contributed by the exercise.
    """
    exercise = record.exercise
    roles = exercise.muscle_roles()
    local_mult = cfg.axial_local_multiplier if exercise.axial else 1.0
    systemic_mult = cfg.axial_systemic_multiplier if exercise.axial else 1.0
    loads_system = not exercise.type.is_isolation

    systemic = 0.0
    for performed in record.sets:
        tonnage = performed.weight * performed.reps
        for muscle, role in roles.items():
            weight = cfg.role_weight(role)
            stimulus[muscle] = stimulus.get(muscle, 0.0) + set_stimulus(performed, weight, cfg)
            local[muscle] = local.get(muscle, 0.0) + (
                tonnage * weight * local_mult * cfg.local_fatigue_scale
            )
        if loads_system:
            systemic += tonnage * systemic_mult * cfg.systemic_fatigue_scale
    return systemic


# ======================================================================
# Main entry point
# ======================================================================


def fold(
    state: FatigueState,
    session: TrainingSession,
    ratings: Optional[SubjectiveRatings] = None,
    config: Optional[EngineConfig] = None,
) -> FatigueState:
    """Fold one session into *state* and return the new state.

    Args:
        state: State after the previous fold (not mutated).
        session: The dated session to fold.
        ratings: Perceived fatigue and soreness for this session
            (neutral when ``None``).
        config: Optional :class:`EngineConfig` override.

    Returns:
        New :class:`FatigueState` dated ``session.date``.
    """
    cfg = config or DEFAULT_ENGINE_CONFIG
    rated = ratings or _NEUTRAL_RATINGS

    if state.last_session_date is not None and session.date < state.last_session_date:
        logger.warning(
            "Folding session dated %s before last session %s; recovery is skipped",
            session.date, state.last_session_date,
        )

    # 1. Recovery baseline.
    baseline = recover(state, session.date, cfg)

    local = dict(baseline.local_fatigue)
    stimulus = dict(baseline.weekly_stimulus)
    systemic = baseline.systemic_fatigue

    # 2. Sets.
    for record in session.exercises:
        systemic += _accumulate_exercise(record, local, stimulus, cfg)

    # 3. Perceived exertion.
    systemic += (rated.perceived_fatigue - cfg.neutral_perceived_fatigue) * cfg.perceived_fatigue_weight
    systemic = max(systemic, 0.0)

    # 4. Soreness.
    for muscle, soreness in rated.soreness.items():
        if muscle in local:
            local[muscle] *= 1.0 + soreness * cfg.soreness_fatigue_weight

    logger.debug(
        "Folded session %s: %d exercise(s), %d set(s), systemic %.4f",
        session.date, len(session.exercises), session.set_count, systemic,
    )

    # 5-6. Readiness is derived; advance the anchor date.
    return FatigueState(
        local_fatigue=local,
        systemic_fatigue=systemic,
        weekly_stimulus=stimulus,
        last_session_date=session.date,
    )


def fold_sessions(
    state: FatigueState,
    sessions: Iterable[TrainingSession],
    ratings_by_date: Optional[Mapping[datetime.date, SubjectiveRatings]] = None,
    config: Optional[EngineConfig] = None,
) -> FatigueState:
    """Fold *sessions* in the order given (caller-sorted)."""
    ratings_by_date = ratings_by_date or {}
    for session in sessions:
        state = fold(state, session, ratings_by_date.get(session.date), config)
    return state
