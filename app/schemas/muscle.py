"""
Muscle identifiers.

The engine tracks fatigue, stimulus and readiness per muscle over a
**closed set** of twelve groups.  Every map keyed by muscle in the
engine uses :class:`Muscle` as its key type.

Muscle roles
------------
An exercise involves a muscle in one of three roles, weighted for
fatigue and stimulus accounting:

- ``primary``   — 1.0
- ``secondary`` — 0.5
- ``tertiary``  — 0.25

``none`` marks a muscle the exercise does not involve.
"""

from enum import Enum


class Muscle(str, Enum):
    """Tracked muscle group."""
    CHEST = "Chest"
    BACK = "Back"
    SHOULDERS = "Shoulders"
    BICEPS = "Biceps"
    TRICEPS = "Triceps"
    QUADS = "Quads"
    HAMSTRINGS = "Hamstrings"
    GLUTES = "Glutes"
    CALVES = "Calves"
    ABS = "Abs"
    FOREARMS = "Forearms"
    TRAPS = "Traps"


MUSCLE_NAMES: list[Muscle] = list(Muscle)


class MuscleRole(str, Enum):
    """Role a muscle plays in a given exercise."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    NONE = "none"


# Ordered by priority: when a muscle is listed under several roles the
# first match wins.
ROLE_PRIORITY: list[MuscleRole] = [
    MuscleRole.PRIMARY,
    MuscleRole.SECONDARY,
    MuscleRole.TERTIARY,
]

