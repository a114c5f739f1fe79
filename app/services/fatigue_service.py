"""
Fatigue service.

Host-side orchestration around the pure engine: turns a flat session
history into a :class:`FatigueState` by grouping records into dated
sessions, sorting them chronologically and folding each exactly once.

The service holds no per-user state; it only binds an
:class:`EngineConfig` so the API layer can build one per request.
"""

import datetime
import logging
from typing import Iterable, Mapping, Optional

from app.engine.accumulator import fold, session_stimulus
from app.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from app.engine.progression import advise
from app.engine.recovery import recover
from app.schemas.exercise import Exercise
from app.schemas.fatigue import FatigueState
from app.schemas.muscle import Muscle
from app.schemas.progression import Recommendation
from app.schemas.training_session import (
    SessionExercise,
    SubjectiveRatings,
    group_history,
)

logger = logging.getLogger(__name__)


class FatigueService:
    """Replays training history through the fatigue engine."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_ENGINE_CONFIG

    def replay(
        self,
        history: Iterable[SessionExercise],
        ratings_by_date: Optional[Mapping[datetime.date, SubjectiveRatings]] = None,
        initial: Optional[FatigueState] = None,
    ) -> FatigueState:
        """Fold every session of *history* into *initial* (empty by default).

        Sessions already covered by *initial* (dated on or before its
        ``last_session_date``) are skipped so a stored state can be
        brought up to date with the full history.
        """
        state = initial or FatigueState.empty()
        ratings_by_date = ratings_by_date or {}

        sessions = group_history(history)
        if state.last_session_date is not None:
            sessions = [s for s in sessions if s.date > state.last_session_date]

        for session in sessions:
            state = fold(state, session, ratings_by_date.get(session.date), self.config)

        logger.info(
            "Replayed %d session(s); last session %s",
            len(sessions), state.last_session_date,
        )
        return state

    def current_state(
        self,
        history: Iterable[SessionExercise],
        as_of: datetime.date,
        ratings_by_date: Optional[Mapping[datetime.date, SubjectiveRatings]] = None,
    ) -> FatigueState:
        """Replay *history* and project the result to *as_of*."""
        return recover(self.replay(history, ratings_by_date), as_of, self.config)

    def stimulus_history(
        self,
        history: Iterable[SessionExercise],
    ) -> list[tuple[datetime.date, dict[Muscle, float]]]:
        """Per-session stimulus, oldest first."""
        return [
            (session.date, session_stimulus(session, self.config))
            for session in group_history(history)
        ]

    def advise(
        self,
        exercise_id: str,
        exercises: Iterable[Exercise],
        history: list[SessionExercise],
        as_of: datetime.date,
    ) -> Recommendation:
        """Advice for *exercise_id* from the readiness the history implies on *as_of*."""
        state = self.current_state(history, as_of)
        return advise(
            exercise_id,
            exercises,
            history,
            state.muscle_readiness,
            state.systemic_readiness,
            state.weekly_stimulus,
            self.config,
        )
