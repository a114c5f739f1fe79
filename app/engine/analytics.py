"""
Training analytics — reporting over session history.

Every function here is a pure read over a list of
:class:`~app.schemas.training_session.SessionExercise` records.  Nothing
reads the wall clock: the caller passes ``as_of`` (or a reference date)
explicitly so reports are reproducible.

Windows
-------
* Calendar weeks are half-open ``[start, start + 7 days)`` and start on
  ``first_weekday`` (``datetime.date.weekday()`` numbering, default 6 =
  Sunday).
* Trailing windows used by :func:`compare_periods` are half-open on the
  left, ``(as_of - days, as_of]``, so consecutive periods never share a
  day.
* :func:`consistency_score` counts the closed window
  ``[as_of - days, as_of]``.

Degenerate input (no records, records without sets, zero-length windows)
yields zero / ``insufficient_data`` results, never an exception.
"""

from __future__ import annotations

import datetime
from typing import Iterable, Optional

from app.schemas.analytics import (
    ConsistencyScore,
    IntensityDistribution,
    Milestone,
    OverloadAnalysis,
    PeriodChange,
    PeriodComparison,
    PeriodStats,
    PersonalRecords,
    SetRecord,
    VolumeLandmarks,
    WeeklySummary,
    WeeklyVolume,
)
from app.schemas.muscle import MUSCLE_NAMES, Muscle, MuscleRole
from app.schemas.training_session import SessionExercise, qualifying

# Share of an exercise's volume credited to each muscle role.
_ROLE_VOLUME_SHARE: dict[MuscleRole, float] = {
    MuscleRole.PRIMARY: 1.0,
    MuscleRole.SECONDARY: 0.6,
    MuscleRole.TERTIARY: 0.3,
}

# Session-to-session change treated as flat by the overload analysis.
_OVERLOAD_DEADBAND = 0.02
_OVERLOAD_INCREASING_RATE = 0.6
_OVERLOAD_DECREASING_RATE = 0.3

# Period-over-period volume change treated as stable (percent).
_PERIOD_DEADBAND_PERCENT = 5.0

_CONSISTENCY_RATINGS: list[tuple[float, str]] = [
    (80.0, "Excellent"),
    (60.0, "Good"),
    (40.0, "Fair"),
]

_MILESTONES: list[Milestone] = [
    Milestone(amount=10_000, label="10K Club"),
    Milestone(amount=50_000, label="50K Club"),
    Milestone(amount=100_000, label="100K Club"),
    Milestone(amount=250_000, label="Quarter Million"),
    Milestone(amount=500_000, label="Half Million"),
    Milestone(amount=1_000_000, label="Million Pound Club"),
]


# ======================================================================
# Helpers
# ======================================================================


def week_bounds(
    day: datetime.date,
    first_weekday: int = 6,
) -> tuple[datetime.date, datetime.date]:
    """Half-open ``(start, end)`` of the calendar week containing *day*."""
    offset = (day.weekday() - first_weekday) % 7
    start = day - datetime.timedelta(days=offset)
    return start, start + datetime.timedelta(days=7)


def _in_range(
    history: Iterable[SessionExercise],
    start: datetime.date,
    end: datetime.date,
) -> list[SessionExercise]:
    """Records with sets dated in ``[start, end)``."""
    return [r for r in qualifying(history) if start <= r.date < end]


def _muscle_volume(records: Iterable[SessionExercise]) -> dict[Muscle, float]:
    volume: dict[Muscle, float] = {}
    for record in records:
        exercise_volume = record.volume
        for muscle, role in record.exercise.muscle_roles().items():
            share = _ROLE_VOLUME_SHARE.get(role, 0.0)
            volume[muscle] = volume.get(muscle, 0.0) + exercise_volume * share
    return volume


def _period_stats(records: list[SessionExercise]) -> PeriodStats:
    return PeriodStats(
        sessions=len(records),
        volume=sum(r.volume for r in records),
        sets=sum(len(r.sets) for r in records),
    )


def _percent(part: float, whole: float) -> float:
    return round(part / whole * 100, 1) if whole > 0 else 0.0


# ======================================================================
# Weekly reports
# ======================================================================


def weekly_summary(
    history: Iterable[SessionExercise],
    reference_date: datetime.date,
    first_weekday: int = 6,
) -> WeeklySummary:
    """Totals for the calendar week containing *reference_date*."""
    start, end = week_bounds(reference_date, first_weekday)
    records = _in_range(history, start, end)

    total_volume = sum(r.volume for r in records)
    muscles: list[Muscle] = []
    exercise_count: dict[str, int] = {}
    for record in records:
        for muscle in record.exercise.muscle_roles():
            if muscle not in muscles:
                muscles.append(muscle)
        name = record.exercise.name or "Unknown"
        exercise_count[name] = exercise_count.get(name, 0) + 1

    return WeeklySummary(
        start_date=start,
        end_date=end,
        sessions=len(records),
        training_days=len({r.date for r in records}),
        total_volume=total_volume,
        total_sets=sum(len(r.sets) for r in records),
        muscles_worked=muscles,
        volume_per_muscle=_muscle_volume(records),
        exercise_count=exercise_count,
        avg_volume_per_session=total_volume / len(records) if records else 0.0,
    )


def volume_trend(
    history: Iterable[SessionExercise],
    as_of: datetime.date,
    weeks: int = 4,
    first_weekday: int = 6,
) -> list[WeeklyVolume]:
    """Per-week volume for the *weeks* calendar weeks ending with *as_of*.

    Returned oldest first; the last entry is the week containing *as_of*.
    """
    if weeks <= 0:
        return []
    history = list(history)

    trend: list[WeeklyVolume] = []
    for index in range(weeks):
        weeks_back = weeks - 1 - index
        start, end = week_bounds(as_of - datetime.timedelta(weeks=weeks_back), first_weekday)
        records = _in_range(history, start, end)
        stats = _period_stats(records)
        trend.append(WeeklyVolume(
            label=f"Week {index + 1}",
            start_date=start,
            end_date=end,
            volume=stats.volume,
            sets=stats.sets,
            sessions=stats.sessions,
            muscle_volume=_muscle_volume(records),
        ))
    return trend


# ======================================================================
# Per-exercise analysis
# ======================================================================


def _overload_message(trend: str, change_percent: float) -> str:
    if trend == "increasing":
        return f"Great! Volume increasing by {change_percent:.1f}%"
    if trend == "decreasing":
        return f"Volume declining by {abs(change_percent):.1f}% - consider deload or recovery"
    return "Volume is stable - ready to push for progression"


def progressive_overload(history: Iterable[SessionExercise]) -> OverloadAnalysis:
    """Classify the volume trend of one exercise's history.

    Consecutive qualifying sessions are compared with a ±2 % deadband;
    the series is ``increasing`` when more than 60 % of transitions
    increase, ``decreasing`` when fewer than 30 % increase and decreases
    outnumber increases, otherwise ``stable``.
    """
    sessions = sorted(qualifying(history), key=lambda r: r.date)
    if len(sessions) < 2:
        return OverloadAnalysis(
            trend="insufficient_data",
            message="Need at least 2 logged sessions to analyze progression",
            session_count=len(sessions),
        )

    volumes = [s.volume for s in sessions]
    increases = decreases = 0
    for previous, current in zip(volumes, volumes[1:]):
        if current > previous * (1 + _OVERLOAD_DEADBAND):
            increases += 1
        elif current < previous * (1 - _OVERLOAD_DEADBAND):
            decreases += 1

    increase_rate = increases / (len(volumes) - 1)
    if increase_rate > _OVERLOAD_INCREASING_RATE:
        trend = "increasing"
    elif increase_rate < _OVERLOAD_DECREASING_RATE and decreases > increases:
        trend = "decreasing"
    else:
        trend = "stable"

    first, last = volumes[0], volumes[-1]
    total_change = (last - first) / first * 100 if first > 0 else 0.0

    return OverloadAnalysis(
        trend=trend,
        message=_overload_message(trend, total_change),
        session_count=len(sessions),
        total_change_percent=round(total_change, 1),
        time_span_days=(sessions[-1].date - sessions[0].date).days,
        starting_volume=first,
        current_volume=last,
        increase_rate_percent=round(increase_rate * 100),
    )


def personal_records(history: Iterable[SessionExercise]) -> PersonalRecords:
    """Heaviest, highest-volume and highest-rep sets, first occurrence wins."""
    max_weight: Optional[SetRecord] = None
    max_volume: Optional[SetRecord] = None
    max_reps: Optional[SetRecord] = None

    for record in history:
        for performed in record.sets:
            tagged = SetRecord(
                date=record.date,
                weight=performed.weight,
                reps=performed.reps,
                rir=performed.rir,
                volume=performed.volume,
            )
            if performed.weight > (max_weight.weight if max_weight else 0):
                max_weight = tagged
            if performed.volume > (max_volume.volume if max_volume else 0):
                max_volume = tagged
            if performed.reps > (max_reps.reps if max_reps else 0):
                max_reps = tagged

    return PersonalRecords(max_weight=max_weight, max_volume=max_volume, max_reps=max_reps)


# ======================================================================
# Habits
# ======================================================================


def consistency_score(
    history: Iterable[SessionExercise],
    as_of: datetime.date,
    days: int = 30,
) -> ConsistencyScore:
    """Training days in ``[as_of - days, as_of]`` against ~every other day."""
    if days <= 0:
        return ConsistencyScore(
            score=0.0, rating="Needs Improvement",
            workout_days=0, total_days=0, frequency_per_week=0.0,
        )

    cutoff = as_of - datetime.timedelta(days=days)
    workout_days = len({r.date for r in qualifying(history) if cutoff <= r.date <= as_of})
    expected = max(1, days // 2)
    score = min(100.0, workout_days / expected * 100)

    rating = next(
        (label for floor, label in _CONSISTENCY_RATINGS if score >= floor),
        "Needs Improvement",
    )
    return ConsistencyScore(
        score=round(score),
        rating=rating,
        workout_days=workout_days,
        total_days=days,
        frequency_per_week=round(workout_days / days * 7, 1),
    )


def compare_periods(
    history: Iterable[SessionExercise],
    as_of: datetime.date,
    days: int = 7,
) -> PeriodComparison:
    """Compare ``(as_of - days, as_of]`` with the *days* before it."""
    history = list(history)
    one_day = datetime.timedelta(days=1)
    period = datetime.timedelta(days=max(days, 0))

    current = _period_stats(_in_range(history, as_of - period + one_day, as_of + one_day))
    previous = _period_stats(
        _in_range(history, as_of - 2 * period + one_day, as_of - period + one_day),
    )

    if previous.volume > 0:
        change = round((current.volume - previous.volume) / previous.volume * 100, 1)
    else:
        change = 0.0

    if change > _PERIOD_DEADBAND_PERCENT:
        trend = "increasing"
    elif change < -_PERIOD_DEADBAND_PERCENT:
        trend = "decreasing"
    else:
        trend = "stable"

    return PeriodComparison(
        current=current,
        previous=previous,
        change=PeriodChange(
            volume_percent=change,
            sessions_diff=current.sessions - previous.sessions,
            trend=trend,
        ),
    )


def muscle_frequency(
    history: Iterable[SessionExercise],
    as_of: datetime.date,
    days: int = 7,
) -> dict[Muscle, int]:
    """How many records trained each muscle as a primary mover recently."""
    cutoff = as_of - datetime.timedelta(days=days)
    frequency = {muscle: 0 for muscle in MUSCLE_NAMES}
    for record in qualifying(history):
        if cutoff <= record.date <= as_of:
            for muscle in record.exercise.prim:
                frequency[muscle] += 1
    return frequency


def intensity_distribution(history: Iterable[SessionExercise]) -> IntensityDistribution:
    """Share of sets per RIR band: 0-1 high, 2-3 moderate, 4+ low."""
    high = moderate = low = 0
    for record in history:
        for performed in record.sets:
            if performed.rir <= 1:
                high += 1
            elif performed.rir <= 3:
                moderate += 1
            else:
                low += 1

    total = high + moderate + low
    return IntensityDistribution(
        high=_percent(high, total),
        moderate=_percent(moderate, total),
        low=_percent(low, total),
        total_sets=total,
    )


def volume_landmarks(history: Iterable[SessionExercise]) -> VolumeLandmarks:
    """Lifetime tonnage against the milestone clubs."""
    total = sum(r.volume for r in history)
    achieved = [m for m in _MILESTONES if total >= m.amount]
    upcoming = next((m for m in _MILESTONES if total < m.amount), None)
    progress = _percent(total, upcoming.amount) if upcoming else 100.0
    return VolumeLandmarks(
        total_volume=total,
        achieved=achieved,
        next_milestone=upcoming,
        progress_percent=progress,
    )


def workout_streak(history: Iterable[SessionExercise], as_of: datetime.date) -> int:
    """Consecutive training days ending today or yesterday (0 otherwise)."""
    dates = sorted({r.date for r in qualifying(history) if r.date <= as_of}, reverse=True)
    if not dates or (as_of - dates[0]).days > 1:
        return 0

    streak = 1
    for later, earlier in zip(dates, dates[1:]):
        if (later - earlier).days != 1:
            break
        streak += 1
    return streak
