"""
Fatigue endpoints — fold, recover, replay and rest advice.
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_engine_config, get_fatigue_service
from app.engine.accumulator import fold
from app.engine.config import EngineConfig
from app.engine.recovery import recover, rest_recommendation
from app.schemas.fatigue import FatigueState, RestRecommendation
from app.schemas.requests import FoldRequest, RecoverRequest, ReplayRequest, RestRequest
from app.services.fatigue_service import FatigueService

router = APIRouter()


@router.post(
    "/fold",
    summary="Fold one training session into a fatigue state.",
    response_model=FatigueState,
)
def fold_session(
    data: FoldRequest,
    config: EngineConfig = Depends(get_engine_config),
):
    return fold(data.state, data.session, data.ratings, config)


@router.post(
    "/recover",
    summary="Project a fatigue state forward to a date.",
    response_model=FatigueState,
)
def recover_state(
    data: RecoverRequest,
    config: EngineConfig = Depends(get_engine_config),
):
    return recover(data.state, data.as_of, config)


@router.post(
    "/replay",
    summary="Rebuild a fatigue state from session history.",
    response_model=FatigueState,
)
def replay_history(
    data: ReplayRequest,
    service: FatigueService = Depends(get_fatigue_service),
):
    state = service.replay(data.history, data.ratings, data.initial)
    if data.as_of is not None:
        state = recover(state, data.as_of, service.config)
    return state


@router.post(
    "/rest",
    summary="Advise whether to rest before the next session.",
    response_model=RestRecommendation,
)
def advise_rest(data: RestRequest):
    return rest_recommendation(data.muscle_readiness, data.systemic_readiness, data.next_exercises)
