"""Simulate fatigue, readiness and load advice over a four-week training block."""

import datetime

from app.catalog.registry import ExerciseCatalog
from app.engine.accumulator import fold
from app.engine.progression import advise
from app.engine.recovery import check_deload_needed, recover
from app.schemas.exercise import Exercise, ExerciseType
from app.schemas.fatigue import FatigueState
from app.schemas.muscle import Muscle
from app.schemas.training_session import (
    PerformedSet,
    SessionExercise,
    SubjectiveRatings,
    group_history,
)

CATALOG = ExerciseCatalog.from_exercises([
    Exercise(
        id="back_squat", name="Barbell Back Squat", type=ExerciseType.COMPOUND_LOWER, axial=True,
        prim=[Muscle.QUADS, Muscle.GLUTES], sec=[Muscle.HAMSTRINGS], ter=[Muscle.ABS],
    ),
    Exercise(
        id="deadlift", name="Conventional Deadlift", type=ExerciseType.COMPOUND_LOWER, axial=True,
        prim=[Muscle.HAMSTRINGS, Muscle.GLUTES, Muscle.BACK], sec=[Muscle.QUADS, Muscle.TRAPS],
        ter=[Muscle.FOREARMS],
    ),
    Exercise(
        id="bench_press", name="Barbell Bench Press", type=ExerciseType.COMPOUND_UPPER,
        prim=[Muscle.CHEST], sec=[Muscle.TRICEPS, Muscle.SHOULDERS],
    ),
    Exercise(
        id="overhead_press", name="Barbell Overhead Press", type=ExerciseType.COMPOUND_UPPER,
        prim=[Muscle.SHOULDERS], sec=[Muscle.TRICEPS], ter=[Muscle.ABS],
    ),
    Exercise(
        id="barbell_row", name="Barbell Row", type=ExerciseType.COMPOUND_UPPER,
        prim=[Muscle.BACK], sec=[Muscle.BICEPS], ter=[Muscle.FOREARMS],
    ),
    Exercise(
        id="biceps_curl", name="Dumbbell Curl", type=ExerciseType.ISOLATION_UPPER,
        prim=[Muscle.BICEPS], ter=[Muscle.FOREARMS],
    ),
])

# (date, exercise id, weight, reps, rir), one row per set
RAW_DATA = [
    # Week 1
    ("2026-03-02", "back_squat", 100, 5, 3),
    ("2026-03-02", "back_squat", 100, 5, 2),
    ("2026-03-02", "back_squat", 100, 5, 2),
    ("2026-03-02", "bench_press", 70, 8, 2),
    ("2026-03-02", "bench_press", 70, 8, 1),
    ("2026-03-02", "bench_press", 70, 7, 1),
    ("2026-03-04", "deadlift", 130, 5, 2),
    ("2026-03-04", "deadlift", 130, 5, 2),
    ("2026-03-04", "barbell_row", 60, 10, 2),
    ("2026-03-04", "barbell_row", 60, 10, 1),
    ("2026-03-04", "biceps_curl", 14, 12, 1),
    ("2026-03-04", "biceps_curl", 14, 12, 0),
    ("2026-03-06", "overhead_press", 45, 6, 2),
    ("2026-03-06", "overhead_press", 45, 6, 2),
    ("2026-03-06", "back_squat", 105, 5, 2),
    ("2026-03-06", "back_squat", 105, 5, 1),
    # Week 2
    ("2026-03-09", "back_squat", 105, 5, 2),
    ("2026-03-09", "back_squat", 105, 5, 1),
    ("2026-03-09", "back_squat", 105, 5, 1),
    ("2026-03-09", "bench_press", 72.5, 8, 1),
    ("2026-03-09", "bench_press", 72.5, 7, 1),
    ("2026-03-09", "bench_press", 72.5, 7, 0),
    ("2026-03-11", "deadlift", 135, 5, 1),
    ("2026-03-11", "deadlift", 135, 5, 1),
    ("2026-03-11", "barbell_row", 62.5, 10, 1),
    ("2026-03-11", "barbell_row", 62.5, 9, 1),
    ("2026-03-11", "biceps_curl", 16, 10, 1),
    ("2026-03-11", "biceps_curl", 16, 10, 0),
    ("2026-03-13", "overhead_press", 47.5, 6, 1),
    ("2026-03-13", "overhead_press", 47.5, 5, 1),
    ("2026-03-13", "back_squat", 110, 5, 1),
    ("2026-03-13", "back_squat", 110, 4, 0),
    # Week 3: overreaching
    ("2026-03-16", "back_squat", 110, 5, 1),
    ("2026-03-16", "back_squat", 110, 5, 0),
    ("2026-03-16", "back_squat", 110, 4, 0),
    ("2026-03-16", "back_squat", 110, 4, 0),
    ("2026-03-16", "bench_press", 75, 6, 0),
    ("2026-03-16", "bench_press", 75, 6, 0),
    ("2026-03-17", "deadlift", 140, 4, 0),
    ("2026-03-17", "deadlift", 140, 4, 0),
    ("2026-03-17", "deadlift", 140, 3, 0),
    ("2026-03-17", "barbell_row", 65, 8, 0),
    ("2026-03-17", "barbell_row", 65, 8, 0),
    ("2026-03-18", "back_squat", 110, 4, 0),
    ("2026-03-18", "back_squat", 110, 3, 0),
    ("2026-03-18", "overhead_press", 47.5, 4, 0),
    ("2026-03-18", "overhead_press", 47.5, 4, 0),
    # Week 4: back off
    ("2026-03-23", "back_squat", 90, 5, 3),
    ("2026-03-23", "back_squat", 90, 5, 3),
    ("2026-03-23", "bench_press", 65, 8, 3),
    ("2026-03-23", "bench_press", 65, 8, 3),
    ("2026-03-26", "deadlift", 120, 5, 3),
    ("2026-03-26", "barbell_row", 55, 10, 3),
    ("2026-03-26", "biceps_curl", 12, 12, 3),
]

# Perceived fatigue (0-10) and soreness per session date; others are neutral
RATINGS = {
    "2026-03-13": SubjectiveRatings(perceived_fatigue=7, soreness={Muscle.QUADS: 2}),
    "2026-03-16": SubjectiveRatings(perceived_fatigue=8, soreness={Muscle.QUADS: 4, Muscle.GLUTES: 3}),
    "2026-03-17": SubjectiveRatings(perceived_fatigue=9, soreness={Muscle.BACK: 4, Muscle.HAMSTRINGS: 4}),
    "2026-03-18": SubjectiveRatings(perceived_fatigue=9, soreness={Muscle.QUADS: 5}),
    "2026-03-23": SubjectiveRatings(perceived_fatigue=4),
}

TRACKED = [Muscle.QUADS, Muscle.GLUTES, Muscle.HAMSTRINGS, Muscle.BACK, Muscle.CHEST, Muscle.SHOULDERS]


def build_history() -> list[SessionExercise]:
    records: dict[tuple[str, str], list[PerformedSet]] = {}
    for date, exercise_id, weight, reps, rir in RAW_DATA:
        records.setdefault((date, exercise_id), []).append(
            PerformedSet(weight=weight, reps=reps, rir=rir)
        )
    return [
        SessionExercise(
            exercise=CATALOG.get_or_raise(exercise_id),
            date=datetime.date.fromisoformat(date),
            sets=sets,
        )
        for (date, exercise_id), sets in records.items()
    ]


def main():
    history = build_history()
    state = FatigueState.empty()

    # ── Fold sessions ───────────────────────────────────────────────
    print()
    print("=" * 100)
    print(
        f"{'Date':<12} {'Sets':>5} {'Sys':>7}"
        + "".join(f" {m.value[:6]:>7}" for m in TRACKED)
        + "  Deload"
    )
    print("=" * 100)

    for session in group_history(history):
        ratings = RATINGS.get(session.date.isoformat())
        state = fold(state, session, ratings)
        deload = check_deload_needed(state)

        readiness = "".join(f" {state.readiness_of(m):>7.2f}" for m in TRACKED)
        flag = f"  {deload.type} ({deload.severity})" if deload.needed else ""
        print(
            f"{session.date.isoformat():<12} {session.set_count:>5} "
            f"{state.systemic_readiness:>7.2f}{readiness}{flag}"
        )

    # ── Advice after the block ─────────────────────────────────────
    as_of = state.last_session_date + datetime.timedelta(days=2)
    current = recover(state, as_of)

    print()
    print("=" * 100)
    print(f"Advice for {as_of.isoformat()}")
    print("=" * 100)

    for exercise in CATALOG:
        rec = advise(
            exercise.id,
            CATALOG,
            history,
            current.muscle_readiness,
            current.systemic_readiness,
            current.weekly_stimulus,
        )
        weight = f" -> {rec.recommended_weight:g}" if rec.recommended_weight else ""
        print(f"{exercise.name:<26} {rec.advice.value:<12} {rec.readiness.value:<9}{weight}")
        print(f"{'':<26} {rec.suggestion}")


if __name__ == "__main__":
    main()
