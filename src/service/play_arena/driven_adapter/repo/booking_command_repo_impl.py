"""
Booking Command Repository Implementation

Raw SQL over asyncpg. The booking row and its booking_slot_claim rows are
written in one transaction; the claim primary key
(resource_type, slot_date, window_start) rejects a second live booking of the
same window even if two creates both got past the slot lease.
"""

from collections.abc import Awaitable, Callable

import asyncpg
from uuid_utils import UUID

from src.platform.database.asyncpg_setting import get_asyncpg_pool
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.play_arena.domain.entity.booking_entity import Booking


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(
        self, *, pool_factory: Callable[[], Awaitable[asyncpg.Pool]] = get_asyncpg_pool
    ) -> None:
        self._pool_factory = pool_factory

    @staticmethod
    async def _insert_claims(conn: asyncpg.Connection, booking: Booking) -> None:
        await conn.executemany(
            """
            INSERT INTO booking_slot_claim (resource_type, slot_date, window_start, booking_id)
            VALUES ($1, $2, $3, $4)
            """,
            [
                (booking.resource_type.value, booking.slot.date, window, booking.id)
                for window in booking.slot.windows()
            ],
        )

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        async with (await self._pool_factory()).acquire() as conn:
            try:
                async with conn.transaction():
                    await conn.execute(
                        """
                        INSERT INTO booking (
                            id, resource_type, mode, slot_date, start_time, end_time,
                            location, created_by, participants, created_at, updated_at
                        )
                        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
                        """,
                        booking.id,
                        booking.resource_type.value,
                        booking.mode.value,
                        booking.slot.date,
                        booking.slot.start_time,
                        booking.slot.end_time,
                        booking.location,
                        booking.created_by,
                        [p.to_dict() for p in booking.participants],
                        booking.created_at,
                        booking.updated_at,
                    )
                    await self._insert_claims(conn, booking)
            except asyncpg.UniqueViolationError as e:
                Logger.base.warning(f'⚠️ [BOOKING-REPO] Claim rejected for {booking.id}: {e}')
                raise ConflictError('This slot is already booked')

        Logger.base.info(
            f'💾 [BOOKING-REPO] Created {booking.id} '
            f'({booking.resource_type.value} {booking.slot.date} {booking.slot.start_time})'
        )
        return booking

    @Logger.io
    async def update(self, *, booking: Booking, rewrite_claims: bool) -> Booking:
        async with (await self._pool_factory()).acquire() as conn:
            try:
                async with conn.transaction():
                    status = await conn.execute(
                        """
                        UPDATE booking
                        SET resource_type = $2,
                            slot_date = $3,
                            start_time = $4,
                            end_time = $5,
                            location = $6,
                            participants = $7,
                            updated_at = $8
                        WHERE id = $1
                        """,
                        booking.id,
                        booking.resource_type.value,
                        booking.slot.date,
                        booking.slot.start_time,
                        booking.slot.end_time,
                        booking.location,
                        [p.to_dict() for p in booking.participants],
                        booking.updated_at,
                    )
                    if status == 'UPDATE 0':
                        raise NotFoundError('Booking not found')

                    if rewrite_claims:
                        await conn.execute(
                            'DELETE FROM booking_slot_claim WHERE booking_id = $1', booking.id
                        )
                        await self._insert_claims(conn, booking)
            except asyncpg.UniqueViolationError as e:
                Logger.base.warning(f'⚠️ [BOOKING-REPO] Claim rejected for {booking.id}: {e}')
                raise ConflictError('The new slot is already booked')

        return booking

    @Logger.io
    async def delete(self, *, booking_id: UUID) -> bool:
        async with (await self._pool_factory()).acquire() as conn:
            status = await conn.execute('DELETE FROM booking WHERE id = $1', booking_id)
        return status != 'DELETE 0'
