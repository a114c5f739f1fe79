"""
Exercise catalog.

Lookup of :class:`~app.schemas.exercise.Exercise` definitions by ``id``.
The host owns the catalog contents and registers them at start-up (or
per request, see :meth:`ExerciseCatalog.from_exercises`); no exercises
are built in.

Unlike a process-wide registry, a catalog is a plain instance so that
each user's custom exercises can live in their own catalog.  Iterating
a catalog yields its exercises in registration order, which is what
:func:`app.engine.progression.advise` consumes.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from app.schemas.exercise import Exercise


class ExerciseCatalog:
    """Registry of exercises keyed by ``id``."""

    def __init__(self) -> None:
        self._exercises: dict[str, Exercise] = {}

    @classmethod
    def from_exercises(cls, exercises: Iterable[Exercise]) -> "ExerciseCatalog":
        """Build a catalog from *exercises*.

        Raises :class:`ValueError` on a duplicate ``id``.
        """
        catalog = cls()
        for exercise in exercises:
            catalog.register(exercise)
        return catalog

    def register(self, exercise: Exercise) -> None:
        """Register an exercise.

        Raises :class:`ValueError` if ``id`` is already taken.
        """
        if exercise.id in self._exercises:
            raise ValueError(f"Exercise '{exercise.id}' already registered")
        self._exercises[exercise.id] = exercise

    def get(self, exercise_id: str) -> Optional[Exercise]:
        """Get an exercise by *exercise_id*.  Returns ``None`` if not found."""
        return self._exercises.get(exercise_id)

    def get_or_raise(self, exercise_id: str) -> Exercise:
        """Get an exercise by *exercise_id*.

        Raises :class:`KeyError` if not found.
        """
        exercise = self._exercises.get(exercise_id)
        if exercise is None:
            raise KeyError(
                f"Exercise '{exercise_id}' not registered. "
                f"Available: {self.ids()}"
            )
        return exercise

    def all(self) -> dict[str, Exercise]:
        """Return all exercises as ``{id: exercise}``."""
        return dict(self._exercises)

    def ids(self) -> list[str]:
        """Return sorted list of all registered ids."""
        return sorted(self._exercises)

    def clear(self) -> None:
        """Remove all exercises."""
        self._exercises.clear()

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._exercises

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._exercises.values())

    def __len__(self) -> int:
        return len(self._exercises)
