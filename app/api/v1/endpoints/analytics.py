"""
Analytics endpoints — weekly volume, overload, records, consistency.
"""

from fastapi import APIRouter

from app.engine import analytics
from app.schemas.analytics import (
    ConsistencyScore,
    OverloadAnalysis,
    PeriodComparison,
    PersonalRecords,
    WeeklySummary,
    WeeklyVolume,
)
from app.schemas.requests import HistoryRequest
from app.schemas.training_session import SessionExercise, history_for

router = APIRouter()


def _exercise_history(data: HistoryRequest) -> list[SessionExercise]:
    if data.exercise_id is None:
        return data.history
    return history_for(data.exercise_id, data.history)


@router.post(
    "/weekly-summary",
    summary="Totals for the calendar week containing as_of.",
    response_model=WeeklySummary,
)
def weekly_summary(data: HistoryRequest):
    return analytics.weekly_summary(data.history, data.as_of)


@router.post(
    "/volume-trend",
    summary="Week-by-week volume, oldest first.",
    response_model=list[WeeklyVolume],
)
def volume_trend(data: HistoryRequest):
    return analytics.volume_trend(data.history, data.as_of, weeks=data.weeks)


@router.post(
    "/overload",
    summary="Progressive-overload trend of one exercise.",
    response_model=OverloadAnalysis,
)
def overload(data: HistoryRequest):
    return analytics.progressive_overload(_exercise_history(data))


@router.post(
    "/records",
    summary="Personal records.",
    response_model=PersonalRecords,
)
def records(data: HistoryRequest):
    return analytics.personal_records(_exercise_history(data))


@router.post(
    "/consistency",
    summary="Training consistency over a trailing window.",
    response_model=ConsistencyScore,
)
def consistency(data: HistoryRequest):
    days = data.days if data.days is not None else 30
    return analytics.consistency_score(data.history, data.as_of, days=days)


@router.post(
    "/compare",
    summary="Compare the current period with the previous one.",
    response_model=PeriodComparison,
)
def compare(data: HistoryRequest):
    days = data.days if data.days is not None else 7
    return analytics.compare_periods(data.history, data.as_of, days=days)
