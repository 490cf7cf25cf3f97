import asyncio

import asyncpg
import orjson
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.constant.path import SCHEMA_SQL_PATH
from src.platform.logging.loguru_io import Logger


# Global connection pools per event loop
asyncpg_pools: dict[int, asyncpg.Pool] = {}


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Register UUID7 and JSONB codecs on every new connection"""

    def _uuid_decoder(value: bytes) -> UUID:
        return UUID(bytes=value)

    def _uuid_encoder(value: UUID) -> bytes:
        return value.bytes

    await conn.set_type_codec(
        'uuid',
        encoder=_uuid_encoder,
        decoder=_uuid_decoder,
        schema='pg_catalog',
        format='binary',
    )
    await conn.set_type_codec(
        'jsonb',
        encoder=lambda value: orjson.dumps(value).decode(),
        decoder=orjson.loads,
        schema='pg_catalog',
    )


async def get_asyncpg_pool() -> asyncpg.Pool:
    current_loop = asyncio.get_running_loop()
    loop_id = id(current_loop)

    # Fast path: pool already exists for this loop
    if loop_id in asyncpg_pools:
        return asyncpg_pools[loop_id]

    # Slow path: create new pool (should only happen at startup)
    dsn = settings.DATABASE_URL_ASYNC.replace('postgresql+asyncpg://', 'postgresql://')
    pool = await asyncpg.create_pool(
        dsn,
        min_size=settings.ASYNCPG_POOL_MIN_SIZE,
        max_size=settings.ASYNCPG_POOL_MAX_SIZE,
        command_timeout=settings.ASYNCPG_POOL_COMMAND_TIMEOUT,
        max_inactive_connection_lifetime=settings.ASYNCPG_POOL_MAX_INACTIVE_LIFETIME,
        timeout=settings.ASYNCPG_POOL_TIMEOUT,
        max_queries=settings.ASYNCPG_POOL_MAX_QUERIES,
        init=_init_connection,
    )

    asyncpg_pools[loop_id] = pool
    Logger.base.info(
        f'🏊 [Pool] Created asyncpg pool (min={settings.ASYNCPG_POOL_MIN_SIZE}, '
        f'max={settings.ASYNCPG_POOL_MAX_SIZE})'
    )
    return pool


async def ensure_schema() -> None:
    """Apply the idempotent DDL (CREATE ... IF NOT EXISTS) at startup"""
    ddl = SCHEMA_SQL_PATH.read_text()
    async with (await get_asyncpg_pool()).acquire() as conn:
        await conn.execute(ddl)
    Logger.base.info('🗄️  [Schema] play arena tables ensured')


async def close_all_asyncpg_pools() -> None:
    """
    Close all asyncpg connection pools across all event loops

    Warning: Only call this during application shutdown.
    """
    for loop_id, pool in list(asyncpg_pools.items()):
        try:
            await pool.close()
        except Exception as e:
            Logger.base.warning(f'⚠️ [Pool] Error closing pool for loop {loop_id}: {e}')
    asyncpg_pools.clear()
