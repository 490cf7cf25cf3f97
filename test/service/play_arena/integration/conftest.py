"""
Conftest for play arena repository integration tests - real PostgreSQL.

Runs against POSTGRES_DB (play_arena_test by default, created on first use).
Every test starts from empty tables; the per-loop asyncpg pool is closed after
each test because pytest-asyncio gives every test its own event loop.
Tests are skipped when PostgreSQL is not reachable.
"""

from collections.abc import AsyncGenerator

import asyncpg
import pytest
import pytest_asyncio

from src.platform.config.core_setting import settings
from src.platform.database.asyncpg_setting import (
    close_all_asyncpg_pools,
    ensure_schema,
    get_asyncpg_pool,
)


async def _ensure_test_database() -> None:
    conn = await asyncpg.connect(
        host=settings.POSTGRES_SERVER,
        port=settings.POSTGRES_PORT,
        user=settings.POSTGRES_USER,
        password=settings.POSTGRES_PASSWORD.get_secret_value(),
        database='postgres',
        timeout=5,
    )
    try:
        exists = await conn.fetchval(
            'SELECT 1 FROM pg_database WHERE datname = $1', settings.POSTGRES_DB
        )
        if not exists:
            await conn.execute(f'CREATE DATABASE "{settings.POSTGRES_DB}"')
    finally:
        await conn.close()


@pytest_asyncio.fixture(autouse=True)
async def clean_database() -> AsyncGenerator[None, None]:
    try:
        await _ensure_test_database()
        await ensure_schema()
    except (OSError, asyncpg.PostgresError) as e:
        await close_all_asyncpg_pools()
        pytest.skip(f'PostgreSQL unavailable: {e}')

    async with (await get_asyncpg_pool()).acquire() as conn:
        await conn.execute(
            'TRUNCATE booking, booking_slot_claim, score_record, score_entry CASCADE'
        )

    yield

    await close_all_asyncpg_pools()

