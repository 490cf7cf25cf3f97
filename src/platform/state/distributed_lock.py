"""
Distributed Lock using Kvrocks (Redis)

Expiring, non-blocking lease built on ``SET key token NX EX ttl``.
Release is ownership-checked so a holder whose lease already expired
cannot delete a lease that another request has since acquired.
"""

from typing import Optional
from uuid import uuid4

from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from src.platform.exception.exceptions import DependencyUnavailableError
from src.platform.logging.loguru_io import Logger


RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class DistributedLock:
    """
    分散式鎖實作

    Single-attempt acquisition: the caller gets a token or ``None`` and decides
    what to do about contention. Nothing here waits or retries.
    """

    def __init__(self, *, redis_client: AsyncRedis) -> None:
        self._redis = redis_client

    async def acquire(self, *, key: str, ttl: int) -> Optional[str]:
        """
        Args:
            key: Lock key (e.g., "play_arena:lease:booking:0193...")
            ttl: Time-to-live in seconds

        Returns:
            Ownership token if acquired, None if another holder has it

        Raises:
            DependencyUnavailableError: lease store unreachable
        """
        token = str(uuid4())
        try:
            # NX + EX in one command: acquisition and expiry are atomic
            result = await self._redis.set(key, token, nx=True, ex=ttl)
        except RedisError as e:
            Logger.base.error(f'❌ [LOCK] Error acquiring lock {key}: {e}')
            raise DependencyUnavailableError('Reservation lock service is unavailable') from e

        if result:
            Logger.base.debug(f'🔒 [LOCK] Acquired lock: {key} (ttl={ttl}s)')
            return token

        Logger.base.debug(f'⏳ [LOCK] Failed to acquire lock: {key} (already locked)')
        return None

    async def release(self, *, key: str, token: str) -> bool:
        """
        Returns:
            True if the lock was ours and got deleted, False otherwise.
            Errors are logged, not raised: the TTL bounds a missed release.
        """
        try:
            result = await self._redis.eval(RELEASE_SCRIPT, 1, key, token)  # type: ignore
        except RedisError as e:
            Logger.base.warning(f'⚠️ [LOCK] Error releasing lock {key}, left to TTL: {e}')
            return False

        if result:
            Logger.base.debug(f'🔓 [LOCK] Released lock: {key}')
            return True

        Logger.base.warning(f'⚠️ [LOCK] Failed to release lock: {key} (ownership mismatch or expired)')
        return False
