"""
Progression endpoints — per-exercise load advice and plateau checks.
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_engine_config
from app.engine.config import EngineConfig
from app.engine.progression import advise, check_stagnation
from app.schemas.progression import Recommendation, StagnationCheck
from app.schemas.requests import AdviseRequest, StagnationRequest

router = APIRouter()


@router.post(
    "/advise",
    summary="Recommend the next load for an exercise.",
    response_model=Recommendation,
)
def advise_exercise(
    data: AdviseRequest,
    config: EngineConfig = Depends(get_engine_config),
):
    return advise(
        data.exercise_id,
        data.exercises,
        data.history,
        data.muscle_readiness,
        data.systemic_readiness,
        data.weekly_stimulus,
        config,
    )


@router.post(
    "/stagnation",
    summary="Check an exercise for a volume plateau.",
    response_model=StagnationCheck,
)
def stagnation(
    data: StagnationRequest,
    config: EngineConfig = Depends(get_engine_config),
):
    return check_stagnation(
        data.exercise, data.history, data.muscle_readiness, data.weekly_stimulus, config,
    )
