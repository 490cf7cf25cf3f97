from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.play_arena.app.command.submit_final_scores_use_case import (
    SubmitFinalScoresUseCase,
)
from src.service.play_arena.app.query.aggregate_user_scores_use_case import (
    AggregateUserScoresUseCase,
)
from src.service.play_arena.app.query.get_booking_scores_use_case import (
    GetBookingScoresUseCase,
)
from src.service.play_arena.domain.entity.score_entity import FinalScore
from src.service.play_arena.driving_adapter.http_controller.auth.caller_identity import (
    get_caller_identity,
)
from src.service.play_arena.driving_adapter.http_controller.schema.api_response import (
    ApiResponse,
)
from src.service.play_arena.driving_adapter.http_controller.schema.score_schema import (
    FinalScoresRequest,
    ScoreRecordResponse,
    UserScoreResponse,
)


router = APIRouter()


@router.post('/bookings/{booking_id}/scores', status_code=status.HTTP_201_CREATED)
@Logger.io
async def submit_final_scores(
    booking_id: UtilsUUID7,
    request: FinalScoresRequest,
    identity: str = Depends(get_caller_identity),
    use_case: SubmitFinalScoresUseCase = Depends(SubmitFinalScoresUseCase.depends),
) -> ApiResponse[ScoreRecordResponse]:
    record = await use_case.submit(
        booking_id=booking_id,
        identity=identity,
        scores=[FinalScore(identity=s.identity, score=s.score) for s in request.scores],
    )
    return ApiResponse(
        message='Final scores submitted', data=ScoreRecordResponse.from_record(record)
    )


@router.get('/bookings/{booking_id}/scores')
@Logger.io
async def get_booking_scores(
    booking_id: UtilsUUID7,
    identity: str = Depends(get_caller_identity),
    use_case: GetBookingScoresUseCase = Depends(GetBookingScoresUseCase.depends),
) -> ApiResponse[ScoreRecordResponse]:
    record = await use_case.get_scores(booking_id=booking_id)
    return ApiResponse(message='Scores fetched', data=ScoreRecordResponse.from_record(record))


@router.get('/scores/aggregate')
@Logger.io
async def aggregate_user_scores(
    resource_type: Optional[str] = None,
    identity: str = Depends(get_caller_identity),
    use_case: AggregateUserScoresUseCase = Depends(AggregateUserScoresUseCase.depends),
) -> ApiResponse[List[UserScoreResponse]]:
    aggregates = await use_case.aggregate(resource_type=resource_type)
    return ApiResponse(
        message='Scores aggregated',
        data=[UserScoreResponse.from_aggregate(a) for a in aggregates],
    )
