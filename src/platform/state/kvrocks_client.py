from typing import Optional

from redis.asyncio import ConnectionPool as AsyncConnectionPool, Redis as AsyncRedis

from src.platform.config.core_setting import Settings, settings as default_settings
from src.platform.logging.loguru_io import Logger


class KvrocksClient:
    """
    Async Kvrocks Client with connection pool.

    One instance per process. It backs the reservation leases, the
    availability/listing caches and the roster lookup.

    Usage:
        await kvrocks_client.initialize()  # In startup
        client = kvrocks_client.get_client()  # Injected by the DI container
    """

    def __init__(self, *, settings: Settings = default_settings) -> None:
        self._settings = settings
        self._client: Optional[AsyncRedis] = None

    async def initialize(self) -> AsyncRedis:
        """Initialize connection pool (idempotent)"""
        if self._client is not None:
            return self._client

        s = self._settings
        pool = AsyncConnectionPool.from_url(
            f'redis://{s.KVROCKS_HOST}:{s.KVROCKS_PORT}/{s.KVROCKS_DB}',
            password=s.KVROCKS_PASSWORD if s.KVROCKS_PASSWORD else None,
            decode_responses=s.REDIS_DECODE_RESPONSES,
            max_connections=s.KVROCKS_POOL_MAX_CONNECTIONS,
            socket_timeout=s.KVROCKS_POOL_SOCKET_TIMEOUT,
            socket_connect_timeout=s.KVROCKS_POOL_SOCKET_CONNECT_TIMEOUT,
            socket_keepalive=s.KVROCKS_POOL_SOCKET_KEEPALIVE,
            health_check_interval=s.KVROCKS_POOL_HEALTH_CHECK_INTERVAL,
        )
        client = AsyncRedis.from_pool(pool)
        await client.ping()  # Fail-fast
        Logger.base.info(f'✅ Kvrocks connected at {s.KVROCKS_HOST}:{s.KVROCKS_PORT}')
        self._client = client
        return client

    def get_client(self) -> AsyncRedis:
        if self._client is None:
            raise RuntimeError(
                'Kvrocks client not initialized. '
                'Call await kvrocks_client.initialize() during startup.'
            )
        return self._client

    async def disconnect(self) -> None:
        """Close connection pool"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Global singleton
kvrocks_client = KvrocksClient()
