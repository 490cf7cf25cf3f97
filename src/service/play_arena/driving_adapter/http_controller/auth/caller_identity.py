from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends, Header

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.service.play_arena.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@inject
async def get_caller_identity(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    cookie_token: Optional[str] = Cookie(None, alias=settings.AUTH_COOKIE_NAME),
    authorization: Optional[str] = Header(None),
) -> str:
    """Verified caller identity (attuid) from the auth cookie or a Bearer header"""
    token = cookie_token
    if not token and authorization:
        scheme, _, credentials = authorization.partition(' ')
        if scheme.lower() == 'bearer' and credentials:
            token = credentials.strip()
    return await jwt_auth.get_caller_identity(token)
