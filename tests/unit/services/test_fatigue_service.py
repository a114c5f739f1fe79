"""
Unit tests for the fatigue service.
"""

import datetime
import math

import pytest

from app.engine.accumulator import fold
from app.engine.config import DEFAULT_ENGINE_CONFIG
from app.schemas.exercise import Exercise, ExerciseType
from app.schemas.fatigue import FatigueState
from app.schemas.muscle import Muscle
from app.schemas.progression import Advice
from app.schemas.training_session import (
    PerformedSet,
    SessionExercise,
    SubjectiveRatings,
    TrainingSession,
)
from app.services.fatigue_service import FatigueService

DAY0 = datetime.date(2026, 3, 2)

SQUAT = Exercise(
    id="squat", name="Squat", type=ExerciseType.COMPOUND_LOWER, prim=[Muscle.QUADS],
)
BENCH = Exercise(
    id="bench", name="Bench", type=ExerciseType.COMPOUND_UPPER, prim=[Muscle.CHEST],
)


# ======================================================================
# Helpers
# ======================================================================


def _record(exercise: Exercise, days: int, weight: float = 100, reps: int = 5) -> SessionExercise:
    return SessionExercise(
        exercise=exercise,
        date=DAY0 + datetime.timedelta(days=days),
        sets=[PerformedSet(weight=weight, reps=reps, rir=2)],
    )


HISTORY = [_record(BENCH, 2), _record(SQUAT, 0), _record(SQUAT, 2), _record(BENCH, 0)]


# ======================================================================
# replay
# ======================================================================


class TestReplay:
    """Test rebuilding state from history."""

    def test_matches_manual_folds(self):
        day0 = TrainingSession(date=DAY0, exercises=[HISTORY[1], HISTORY[3]])
        day2 = TrainingSession(date=DAY0 + datetime.timedelta(days=2), exercises=[HISTORY[0], HISTORY[2]])
        expected = fold(fold(FatigueState.empty(), day0), day2)

        state = FatigueService().replay(HISTORY)
        assert state.local_fatigue == pytest.approx(expected.local_fatigue)
        assert state.systemic_fatigue == pytest.approx(expected.systemic_fatigue)
        assert state.last_session_date == DAY0 + datetime.timedelta(days=2)

    def test_order_independent(self):
        service = FatigueService()
        assert service.replay(HISTORY) == service.replay(list(reversed(HISTORY)))

    def test_empty_history(self):
        assert FatigueService().replay([]) == FatigueState.empty()

    def test_ratings_by_date(self):
        ratings = {DAY0: SubjectiveRatings(perceived_fatigue=9)}
        plain = FatigueService().replay(HISTORY[1:2])
        rated = FatigueService().replay(HISTORY[1:2], ratings)
        assert rated.systemic_fatigue == pytest.approx(plain.systemic_fatigue + 0.4)

    def test_initial_state_skips_folded_sessions(self):
        service = FatigueService()
        first_day = service.replay([r for r in HISTORY if r.date == DAY0])
        resumed = service.replay(HISTORY, initial=first_day)
        assert resumed == service.replay(HISTORY)

    def test_uses_config(self):
        cfg = DEFAULT_ENGINE_CONFIG.model_copy(update={"local_fatigue_scale": 0.002})
        state = FatigueService(cfg).replay([_record(SQUAT, 0)])
        assert state.local_fatigue[Muscle.QUADS] == pytest.approx(1.0)


class TestCurrentState:

    def test_projects_to_date(self):
        service = FatigueService()
        as_of = DAY0 + datetime.timedelta(days=14)
        state = service.current_state([_record(SQUAT, 0)], as_of)
        assert state.local_fatigue[Muscle.QUADS] == pytest.approx(0.5 * math.exp(-0.18 * 14))
        assert state.last_session_date == DAY0


class TestStimulusHistory:

    def test_one_entry_per_day(self):
        history = FatigueService().stimulus_history(HISTORY)
        assert [day for day, _ in history] == [DAY0, DAY0 + datetime.timedelta(days=2)]
        assert set(history[0][1]) == {Muscle.QUADS, Muscle.CHEST}


class TestServiceAdvise:

    def test_first_time(self):
        rec = FatigueService().advise("bench", [SQUAT, BENCH], [_record(SQUAT, 0)], DAY0)
        assert rec.advice == Advice.FIRST_TIME

    def test_after_rest(self):
        history = [_record(SQUAT, 0, reps=5), _record(SQUAT, 3, reps=6)]
        rec = FatigueService().advise("squat", [SQUAT], history, DAY0 + datetime.timedelta(days=20))
        assert rec.advice != Advice.ERROR
        assert rec.muscle_readiness > 0.85
