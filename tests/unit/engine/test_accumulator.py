"""
Unit tests for the fatigue accumulator.

Tests per-set metrics, the fold pipeline (recovery -> sets -> subjective
corrections) and the documented scenarios.
"""

import datetime
import math

import pytest

from app.engine.accumulator import (
    estimated_one_rep_max,
    fold,
    fold_sessions,
    load_factor,
    session_stimulus,
    set_effort,
    set_stimulus,
)
from app.schemas.exercise import Exercise, ExerciseType
from app.schemas.fatigue import FatigueState
from app.schemas.muscle import Muscle
from app.schemas.training_session import (
    PerformedSet,
    SessionExercise,
    SubjectiveRatings,
    TrainingSession,
)

DAY0 = datetime.date(2026, 3, 2)

SQUAT_MACHINE = Exercise(
    id="hack_squat", name="Hack Squat", type=ExerciseType.COMPOUND_LOWER,
    prim=[Muscle.QUADS],
)
BACK_SQUAT = Exercise(
    id="back_squat", name="Back Squat", type=ExerciseType.COMPOUND_LOWER, axial=True,
    prim=[Muscle.QUADS], sec=[Muscle.GLUTES], ter=[Muscle.ABS],
)
CURL = Exercise(
    id="curl", name="Curl", type=ExerciseType.ISOLATION_UPPER,
    prim=[Muscle.BICEPS], ter=[Muscle.FOREARMS],
)


# ======================================================================
# Helpers
# ======================================================================


def _session(
    exercise: Exercise,
    sets: list[tuple[float, int, float]],
    date: datetime.date = DAY0,
) -> TrainingSession:
    return TrainingSession(
        date=date,
        exercises=[SessionExercise(
            exercise=exercise,
            date=date,
            sets=[PerformedSet(weight=w, reps=r, rir=rir) for w, r, rir in sets],
        )],
    )


# ======================================================================
# Per-set metrics
# ======================================================================


class TestSetMetrics:
    """Test e1RM, effort and stimulus helpers."""

    def test_e1rm_at_failure(self):
        # RPE 10: divisor is 1.0278 - 0.278 = 0.7498, not 1.0
        assert estimated_one_rep_max(100, 5, 0) == pytest.approx(100 * (1 + (5 / 0.7498) / 30))

    def test_e1rm_with_reps_in_reserve(self):
        total_reps = 5 / (1.0278 - 0.0278 * 8)
        assert estimated_one_rep_max(100, 5, 2) == pytest.approx(100 * (1 + total_reps / 30))

    @pytest.mark.parametrize("rir,expected", [
        (0, 1.0),
        (1, math.exp(-0.2)),
        (5, math.exp(-1.0)),
    ])
    def test_effort(self, rir, expected):
        assert set_effort(rir) == pytest.approx(expected)

    def test_load_factor_bounded(self):
        factor = load_factor(PerformedSet(weight=100, reps=5, rir=2))
        assert 0 < factor <= 1

    def test_load_factor_empty_set(self):
        assert load_factor(PerformedSet(weight=0, reps=0, rir=0)) == 0.0

    def test_stimulus_scales_with_role(self):
        performed = PerformedSet(weight=80, reps=8, rir=1)
        assert set_stimulus(performed, 0.5) == pytest.approx(set_stimulus(performed, 1.0) / 2)

    def test_session_stimulus_uses_role_weights(self):
        session = _session(BACK_SQUAT, [(100, 5, 2)])
        stim = session_stimulus(session)
        assert stim[Muscle.GLUTES] == pytest.approx(stim[Muscle.QUADS] * 0.5)
        assert stim[Muscle.ABS] == pytest.approx(stim[Muscle.QUADS] * 0.25)
        assert Muscle.CHEST not in stim


# ======================================================================
# fold
# ======================================================================


class TestFold:
    """Test folding a session into the fatigue state."""

    def test_single_quads_set(self):
        out = fold(FatigueState.empty(), _session(SQUAT_MACHINE, [(100, 5, 2)]))

        assert out.local_fatigue[Muscle.QUADS] == pytest.approx(100 * 5 * 0.001)
        assert out.systemic_fatigue == pytest.approx(100 * 5 * 0.0001)
        assert out.muscle_readiness[Muscle.QUADS] == pytest.approx(
            math.exp(-out.local_fatigue[Muscle.QUADS])
        )
        assert out.weekly_stimulus[Muscle.QUADS] == pytest.approx(
            set_effort(2) * load_factor(PerformedSet(weight=100, reps=5, rir=2))
        )
        assert out.last_session_date == DAY0

    def test_axial_multipliers(self):
        out = fold(FatigueState.empty(), _session(BACK_SQUAT, [(100, 5, 2)]))
        assert out.local_fatigue[Muscle.QUADS] == pytest.approx(500 * 1.3 * 0.001)
        assert out.local_fatigue[Muscle.GLUTES] == pytest.approx(500 * 0.5 * 1.3 * 0.001)
        assert out.local_fatigue[Muscle.ABS] == pytest.approx(500 * 0.25 * 1.3 * 0.001)
        assert out.systemic_fatigue == pytest.approx(500 * 1.5 * 0.0001)

    def test_isolation_adds_no_systemic_fatigue(self):
        out = fold(FatigueState.empty(), _session(CURL, [(15, 12, 1), (15, 10, 0)]))
        assert out.systemic_fatigue == 0.0
        assert out.local_fatigue[Muscle.BICEPS] > 0

    def test_recovers_before_adding(self):
        prior = FatigueState(
            local_fatigue={Muscle.QUADS: 1.0},
            systemic_fatigue=0.5,
            last_session_date=DAY0,
        )
        later = DAY0 + datetime.timedelta(days=3)
        out = fold(prior, _session(SQUAT_MACHINE, [(100, 5, 2)], date=later))
        assert out.local_fatigue[Muscle.QUADS] == pytest.approx(math.exp(-0.18 * 3) + 0.5)
        assert out.systemic_fatigue == pytest.approx(0.5 * math.exp(-0.15 * 3) + 0.05)
        assert out.last_session_date == later

    def test_stimulus_never_decreases(self):
        prior = fold(FatigueState.empty(), _session(BACK_SQUAT, [(100, 5, 2)]))
        later = DAY0 + datetime.timedelta(days=2)
        out = fold(prior, _session(BACK_SQUAT, [(60, 3, 4)], date=later))
        for muscle in BACK_SQUAT.muscle_roles():
            assert out.weekly_stimulus[muscle] > prior.weekly_stimulus[muscle]

    def test_perceived_fatigue_adjusts_systemic(self):
        session = _session(SQUAT_MACHINE, [(100, 5, 2)])
        neutral = fold(FatigueState.empty(), session)
        tired = fold(FatigueState.empty(), session, SubjectiveRatings(perceived_fatigue=8))
        assert tired.systemic_fatigue == pytest.approx(neutral.systemic_fatigue + 0.3)

    def test_low_perceived_fatigue_floors_at_zero(self):
        session = _session(CURL, [(15, 12, 1)])
        out = fold(FatigueState.empty(), session, SubjectiveRatings(perceived_fatigue=0))
        assert out.systemic_fatigue == 0.0

    def test_soreness_scales_local_fatigue(self):
        session = _session(SQUAT_MACHINE, [(100, 5, 2)])
        ratings = SubjectiveRatings(soreness={Muscle.QUADS: 4, Muscle.CHEST: 10})
        out = fold(FatigueState.empty(), session, ratings)
        assert out.local_fatigue[Muscle.QUADS] == pytest.approx(0.5 * 1.2)
        assert out.local_fatigue.get(Muscle.CHEST, 0.0) == 0.0

    def test_missing_sets_contribute_nothing(self):
        session = TrainingSession(
            date=DAY0,
            exercises=[SessionExercise(exercise=SQUAT_MACHINE, date=DAY0, sets=None)],
        )
        out = fold(FatigueState.empty(), session)
        assert out.local_fatigue == {}
        assert out.systemic_fatigue == 0.0
        assert out.last_session_date == DAY0

    def test_same_day_empty_session_is_identity(self):
        prior = fold(FatigueState.empty(), _session(BACK_SQUAT, [(100, 5, 2)]))
        out = fold(prior, TrainingSession(date=DAY0, exercises=[]))
        assert out.local_fatigue == pytest.approx(prior.local_fatigue)
        assert out.systemic_fatigue == pytest.approx(prior.systemic_fatigue)
        assert out.weekly_stimulus == pytest.approx(prior.weekly_stimulus)
        assert out.last_session_date == prior.last_session_date

    def test_backdated_session_logs_warning(self, caplog):
        prior = fold(FatigueState.empty(), _session(SQUAT_MACHINE, [(100, 5, 2)]))
        earlier = DAY0 - datetime.timedelta(days=2)
        with caplog.at_level("WARNING", logger="app.engine.accumulator"):
            out = fold(prior, _session(SQUAT_MACHINE, [(100, 5, 2)], date=earlier))
        assert "before last session" in caplog.text
        # No recovery applied, fatigue simply adds up
        assert out.local_fatigue[Muscle.QUADS] == pytest.approx(1.0)
        assert out.last_session_date == earlier

    def test_readiness_stays_positive_under_extreme_load(self):
        session = _session(BACK_SQUAT, [(500, 1000, 0)] * 3)
        out = fold(FatigueState.empty(), session)
        assert 0 < out.muscle_readiness[Muscle.QUADS] <= 1
        assert 0 < out.systemic_readiness <= 1


# ======================================================================
# fold_sessions
# ======================================================================


class TestFoldSessions:
    """Test folding several sessions."""

    def test_zero_sessions_is_identity(self):
        prior = fold(FatigueState.empty(), _session(SQUAT_MACHINE, [(100, 5, 2)]))
        assert fold_sessions(prior, []) is prior

    def test_matches_sequential_folds(self):
        s1 = _session(SQUAT_MACHINE, [(100, 5, 2)])
        s2 = _session(CURL, [(15, 10, 1)], date=DAY0 + datetime.timedelta(days=1))
        ratings = {s2.date: SubjectiveRatings(perceived_fatigue=7)}

        expected = fold(fold(FatigueState.empty(), s1), s2, ratings[s2.date])
        out = fold_sessions(FatigueState.empty(), [s1, s2], ratings)
        assert out == expected
