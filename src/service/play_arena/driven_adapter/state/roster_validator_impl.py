"""
Roster Validator Implementation

The roster is a JSON array written to Kvrocks by the external directory sync
job, either user objects carrying 'attuid' or plain identity strings.
"""

from typing import Any, Iterable

import orjson
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import (
    DependencyUnavailableError,
    DomainError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_roster_validator import IRosterValidator
from src.service.play_arena.driven_adapter.state.key_str_generator import make_roster_key


class RosterValidatorImpl(IRosterValidator):
    def __init__(
        self, *, redis_client: AsyncRedis, roster_key: str = settings.ROSTER_CACHE_KEY
    ) -> None:
        self._redis = redis_client
        self._roster_key = roster_key

    async def _load_roster(self) -> list[Any] | None:
        key = make_roster_key(roster_key=self._roster_key)
        try:
            raw = await self._redis.get(key)
        except RedisError as e:
            Logger.base.error(f'❌ [ROSTER] Failed to read roster {key}: {e}')
            raise DependencyUnavailableError('User roster is unavailable') from e

        if raw is None:
            return None

        try:
            roster = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            Logger.base.error(f'❌ [ROSTER] Roster {key} is not valid JSON: {e}')
            raise DependencyUnavailableError('User roster is unavailable') from e

        return roster if isinstance(roster, list) else []

    @staticmethod
    def _identity_of(user: Any) -> str | None:
        if isinstance(user, str):
            return user
        if isinstance(user, dict):
            return user.get('attuid')
        return None

    @Logger.io
    async def validate(self, *, identities: Iterable[str]) -> bool:
        wanted = set(identities)
        if not wanted:
            raise DomainError('At least one participant is required')

        roster = await self._load_roster()
        if roster is None:
            # Absent roster fails closed
            Logger.base.warning('⚠️ [ROSTER] Roster not cached, rejecting validation')
            raise DependencyUnavailableError('User roster is unavailable')

        known = {identity for identity in map(self._identity_of, roster) if identity}
        return wanted <= known

    @Logger.io
    async def list_users(self) -> list[dict[str, Any]]:
        roster = await self._load_roster()
        if roster is None:
            raise NotFoundError('No users found in cache')
        return [
            user if isinstance(user, dict) else {'attuid': user}
            for user in roster
            if self._identity_of(user)
        ]
