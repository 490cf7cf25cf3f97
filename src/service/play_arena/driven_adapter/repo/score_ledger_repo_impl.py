"""
Score Ledger Repository Implementation

score_record holds one row per booking; score_entry one row per participant
with check-in points and final score kept apart (total = sum).
A check-in point is committed together with the participant's checked-in flag.
Finalisation is a single conditional UPDATE, so a second submission never
touches the ledger.
"""

from collections.abc import Awaitable, Callable
from typing import List, Optional

import asyncpg
from uuid_utils import UUID

from src.platform.database.asyncpg_setting import get_asyncpg_pool
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_score_ledger_repo import IScoreLedgerRepo
from src.service.play_arena.domain.entity.booking_entity import Booking
from src.service.play_arena.domain.entity.score_entity import (
    ScoreEntry,
    ScoreRecord,
    UserScoreAggregate,
)
from src.service.play_arena.domain.enum.resource_type import ResourceType


class ScoreLedgerRepoImpl(IScoreLedgerRepo):
    def __init__(
        self, *, pool_factory: Callable[[], Awaitable[asyncpg.Pool]] = get_asyncpg_pool
    ) -> None:
        self._pool_factory = pool_factory

    @staticmethod
    async def _ensure_record(
        conn: asyncpg.Connection, *, booking_id: UUID, resource_type: ResourceType
    ) -> None:
        await conn.execute(
            """
            INSERT INTO score_record (booking_id, resource_type)
            VALUES ($1, $2)
            ON CONFLICT (booking_id) DO NOTHING
            """,
            booking_id,
            resource_type.value,
        )

    @staticmethod
    async def _fetch_record(
        conn: asyncpg.Connection, *, booking_id: UUID
    ) -> Optional[ScoreRecord]:
        record = await conn.fetchrow(
            """
            SELECT booking_id, resource_type, finalized_at, created_at
            FROM score_record
            WHERE booking_id = $1
            """,
            booking_id,
        )
        if not record:
            return None

        entries = await conn.fetch(
            """
            SELECT identity, checkin_score, final_score
            FROM score_entry
            WHERE booking_id = $1
            ORDER BY identity
            """,
            booking_id,
        )
        return ScoreRecord(
            booking_id=UUID(str(record['booking_id'])),
            resource_type=ResourceType(record['resource_type']),
            finalized_at=record['finalized_at'],
            created_at=record['created_at'],
            entries=[
                ScoreEntry(
                    identity=row['identity'],
                    checkin_score=row['checkin_score'],
                    final_score=row['final_score'],
                )
                for row in entries
            ],
        )

    @Logger.io
    async def record_checkin_score(self, *, booking: Booking, identity: str) -> ScoreRecord:
        async with (await self._pool_factory()).acquire() as conn:
            async with conn.transaction():
                status = await conn.execute(
                    """
                    UPDATE booking
                    SET participants = $2, updated_at = $3
                    WHERE id = $1
                    """,
                    booking.id,
                    [p.to_dict() for p in booking.participants],
                    booking.updated_at,
                )
                if status == 'UPDATE 0':
                    raise NotFoundError('Booking not found')

                await self._ensure_record(
                    conn, booking_id=booking.id, resource_type=booking.resource_type
                )
                await conn.execute(
                    """
                    INSERT INTO score_entry (booking_id, identity, checkin_score)
                    VALUES ($1, $2, 1)
                    ON CONFLICT (booking_id, identity)
                    DO UPDATE SET checkin_score = score_entry.checkin_score + 1
                    """,
                    booking.id,
                    identity,
                )
            record = await self._fetch_record(conn, booking_id=booking.id)

        if record is None:
            raise NotFoundError('Score record not found')
        return record

    @Logger.io
    async def finalize(
        self, *, booking_id: UUID, resource_type: ResourceType, final_scores: dict[str, int]
    ) -> Optional[ScoreRecord]:
        async with (await self._pool_factory()).acquire() as conn:
            async with conn.transaction():
                await self._ensure_record(
                    conn, booking_id=booking_id, resource_type=resource_type
                )
                flipped = await conn.fetchval(
                    """
                    UPDATE score_record
                    SET finalized_at = now()
                    WHERE booking_id = $1 AND finalized_at IS NULL
                    RETURNING booking_id
                    """,
                    booking_id,
                )
                if flipped is None:
                    return None

                await conn.executemany(
                    """
                    INSERT INTO score_entry (booking_id, identity, final_score)
                    VALUES ($1, $2, $3)
                    ON CONFLICT (booking_id, identity)
                    DO UPDATE SET final_score = EXCLUDED.final_score
                    """,
                    [(booking_id, identity, score) for identity, score in final_scores.items()],
                )
            return await self._fetch_record(conn, booking_id=booking_id)

    @Logger.io
    async def get_by_booking_id(self, *, booking_id: UUID) -> Optional[ScoreRecord]:
        async with (await self._pool_factory()).acquire() as conn:
            return await self._fetch_record(conn, booking_id=booking_id)

    @Logger.io
    async def aggregate_by_user(
        self, *, resource_type: Optional[ResourceType] = None
    ) -> List[UserScoreAggregate]:
        async with (await self._pool_factory()).acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT e.identity,
                       r.resource_type,
                       SUM(e.checkin_score + e.final_score)::bigint AS total
                FROM score_entry e
                JOIN score_record r ON r.booking_id = e.booking_id
                WHERE ($1::varchar IS NULL OR r.resource_type = $1)
                GROUP BY e.identity, r.resource_type
                ORDER BY e.identity, r.resource_type
                """,
                resource_type.value if resource_type else None,
            )
        return [
            UserScoreAggregate(
                identity=row['identity'],
                resource_type=ResourceType(row['resource_type']),
                total=row['total'],
            )
            for row in rows
        ]
