from typing import List

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.query.get_available_slots_use_case import (
    GetAvailableSlotsUseCase,
)
from src.service.play_arena.driving_adapter.http_controller.auth.caller_identity import (
    get_caller_identity,
)
from src.service.play_arena.driving_adapter.http_controller.schema.api_response import (
    ApiResponse,
)
from src.service.play_arena.driving_adapter.http_controller.schema.booking_schema import (
    AvailableSlotResponse,
)


router = APIRouter()


@router.get('/available')
@Logger.io
async def get_available_slots(
    resource_type: str,
    slot_date: str = Query(..., alias='date'),
    identity: str = Depends(get_caller_identity),
    use_case: GetAvailableSlotsUseCase = Depends(GetAvailableSlotsUseCase.depends),
) -> ApiResponse[List[AvailableSlotResponse]]:
    slots = await use_case.get_available_slots(resource_type=resource_type, slot_date=slot_date)
    return ApiResponse(
        message='Available slots fetched', data=[AvailableSlotResponse(**s) for s in slots]
    )
