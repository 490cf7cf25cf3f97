"""
Caller identity verification.

Tokens are issued by the authentication service. This side only verifies the
signature, checks the revocation list and reads the 'attuid' claim.
"""

from typing import Dict, Optional

import jwt
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError, DependencyUnavailableError
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.driven_adapter.state.key_str_generator import (
    make_token_blacklist_key,
)


class JwtAuth:
    def __init__(self, *, redis_client: AsyncRedis) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self._redis = redis_client

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise AuthenticationError('Unauthorized: invalid or expired token.')

    async def is_blacklisted(self, token: str) -> bool:
        key = make_token_blacklist_key(prefix=settings.TOKEN_BLACKLIST_PREFIX, token=token)
        try:
            return bool(await self._redis.get(key))
        except RedisError as e:
            Logger.base.error(f'❌ [AUTH] Blacklist lookup failed: {e}')
            raise DependencyUnavailableError('Token revocation list is unavailable') from e

    async def get_caller_identity(self, token: Optional[str]) -> str:
        if not token:
            raise AuthenticationError('Unauthorized: missing authentication token.')

        if await self.is_blacklisted(token):
            raise AuthenticationError('Unauthorized: token has been revoked.')

        payload = self.decode_jwt_token(token)
        attuid = payload.get('attuid')
        if not attuid or not isinstance(attuid, str):
            raise AuthenticationError('Unauthorized: invalid or expired token.')
        return attuid
