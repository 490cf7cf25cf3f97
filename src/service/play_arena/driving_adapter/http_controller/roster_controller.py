from typing import Any

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.query.list_roster_users_use_case import ListRosterUsersUseCase
from src.service.play_arena.driving_adapter.http_controller.auth.caller_identity import (
    get_caller_identity,
)
from src.service.play_arena.driving_adapter.http_controller.schema.api_response import (
    ApiResponse,
)


router = APIRouter()


@router.get('/users')
@Logger.io
async def list_users(
    identity: str = Depends(get_caller_identity),
    use_case: ListRosterUsersUseCase = Depends(ListRosterUsersUseCase.depends),
) -> ApiResponse[list[dict[str, Any]]]:
    users = await use_case.list_users()
    return ApiResponse(message='Users fetched', data=users)
