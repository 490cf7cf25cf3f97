from collections.abc import Awaitable, Callable
from datetime import date
from typing import List, Optional

import asyncpg
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.database.asyncpg_setting import get_asyncpg_pool
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.play_arena.domain.entity.booking_entity import Booking
from src.service.play_arena.domain.enum.booking_mode import BookingMode
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.driven_adapter.repo.booking_row_mapper import (
    BOOKING_COLUMNS,
    row_to_booking,
)


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(
        self, *, pool_factory: Callable[[], Awaitable[asyncpg.Pool]] = get_asyncpg_pool
    ) -> None:
        self._pool_factory = pool_factory

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        async with (await self._pool_factory()).acquire() as conn:
            row = await conn.fetchrow(
                f'SELECT {BOOKING_COLUMNS} FROM booking WHERE id = $1', booking_id
            )
        return row_to_booking(row) if row else None

    @Logger.io
    async def list_by_participant(self, *, identity: str) -> List[Booking]:
        async with (await self._pool_factory()).acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {BOOKING_COLUMNS}
                FROM booking
                WHERE participants @> $1::jsonb
                ORDER BY slot_date, start_time
                """,
                [{'identity': identity}],
            )
        return [row_to_booking(row) for row in rows]

    @Logger.io
    async def list_open(
        self,
        *,
        slot_date: Optional[date],
        resource_type: Optional[ResourceType],
        from_date: date,
    ) -> List[Booking]:
        async with (await self._pool_factory()).acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {BOOKING_COLUMNS}
                FROM booking
                WHERE mode = $1
                  AND jsonb_array_length(participants) < $2
                  AND slot_date >= $3
                  AND ($4::date IS NULL OR slot_date = $4)
                  AND ($5::varchar IS NULL OR resource_type = $5)
                ORDER BY slot_date, start_time
                """,
                BookingMode.OPEN.value,
                settings.MAX_PARTICIPANTS,
                from_date,
                slot_date,
                resource_type.value if resource_type else None,
            )
        return [row_to_booking(row) for row in rows]

    async def list_claimed_windows(
        self,
        *,
        resource_type: ResourceType,
        slot_date: date,
        exclude_booking_id: Optional[UUID] = None,
    ) -> set[str]:
        async with (await self._pool_factory()).acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT window_start
                FROM booking_slot_claim
                WHERE resource_type = $1
                  AND slot_date = $2
                  AND ($3::uuid IS NULL OR booking_id <> $3)
                """,
                resource_type.value,
                slot_date,
                exclude_booking_id,
            )
        return {row['window_start'] for row in rows}
