"""
Exercise schema.

An :class:`Exercise` is owned by the host's catalog and is immutable
once defined.  Besides its identity it carries the two properties the
fatigue model cares about:

* **type** — compound vs isolation, upper vs lower body.  Isolation
  movements add no systemic fatigue; the type also selects the weight
  increment used for progression.
* **axial** — whether the movement loads the spine directly (squat,
  deadlift).  Axial sets accrue extra local and systemic fatigue.

Muscle involvement is given as three lists (``prim``, ``sec``, ``ter``).
:meth:`Exercise.muscle_roles` collapses them into a single
``Muscle -> MuscleRole`` map where a primary listing always wins.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.muscle import ROLE_PRIORITY, Muscle, MuscleRole


class ExerciseType(str, Enum):
    """Movement classification."""
    COMPOUND_LOWER = "compound_lower"
    COMPOUND_UPPER = "compound_upper"
    ISOLATION_LOWER = "isolation_lower"
    ISOLATION_UPPER = "isolation_upper"
    OTHER = "other"

    @property
    def is_isolation(self) -> bool:
        return self in (ExerciseType.ISOLATION_LOWER, ExerciseType.ISOLATION_UPPER)


class Exercise(BaseModel):
    """Catalog entry for a single exercise."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique exercise identifier")
    name: str = Field(..., description="Human-readable name")
    type: ExerciseType = Field(ExerciseType.OTHER, description="Movement classification")
    axial: bool = Field(False, description="Whether the movement loads the spine")
    prim: list[Muscle] = Field(default_factory=list, description="Primary movers")
    sec: list[Muscle] = Field(default_factory=list, description="Secondary movers")
    ter: list[Muscle] = Field(default_factory=list, description="Tertiary / stabilising muscles")

    @property
    def is_axial_compound(self) -> bool:
        return self.axial and not self.type.is_isolation

    def muscle_roles(self) -> dict[Muscle, MuscleRole]:
        """Classify every involved muscle exactly once.

        Primary beats secondary beats tertiary, so the returned map is
        mutually exclusive even if the catalog lists a muscle twice.
        """
        listed = {
            MuscleRole.PRIMARY: self.prim,
            MuscleRole.SECONDARY: self.sec,
            MuscleRole.TERTIARY: self.ter,
        }
        roles: dict[Muscle, MuscleRole] = {}
        for role in ROLE_PRIORITY:
            for muscle in listed[role]:
                roles.setdefault(muscle, role)
        return roles

    def role_of(self, muscle: Muscle) -> MuscleRole:
        """Return the role *muscle* plays in this exercise."""
        return self.muscle_roles().get(muscle, MuscleRole.NONE)
