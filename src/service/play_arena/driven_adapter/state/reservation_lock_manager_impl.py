"""
Reservation Lock Manager Implementation

Slot leases guard the window between "slot looks free" and "booking persisted".
Booking leases guard every read-modify-write on one booking.
Both are single-attempt SET NX EX leases on Kvrocks with ownership-checked release.
The ownership token travels with the returned LeaseHandle, never in shared state.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from typing import Iterable, Optional

from redis.asyncio import Redis as AsyncRedis
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import LeaseNotAcquiredError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.play_arena_metrics import metrics
from src.platform.state.distributed_lock import DistributedLock
from src.service.play_arena.app.interface.i_reservation_lock_manager import (
    IReservationLockManager,
    LeaseHandle,
)
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import TimeSlot
from src.service.play_arena.driven_adapter.state.key_str_generator import (
    make_booking_lease_key,
    make_slot_lease_key,
)


class ReservationLockManagerImpl(IReservationLockManager):
    def __init__(
        self,
        *,
        redis_client: AsyncRedis,
        slot_lease_ttl: int = settings.SLOT_LEASE_TTL_SECONDS,
        booking_lease_ttl: int = settings.BOOKING_LEASE_TTL_SECONDS,
    ) -> None:
        self._lock = DistributedLock(redis_client=redis_client)
        self._slot_lease_ttl = slot_lease_ttl
        self._booking_lease_ttl = booking_lease_ttl

    async def _acquire(self, *, key: str, ttl: int, scope: str) -> Optional[LeaseHandle]:
        token = await self._lock.acquire(key=key, ttl=ttl)
        metrics.record_lease_attempt(scope=scope, acquired=token is not None)
        if token is None:
            return None
        return LeaseHandle(key=key, token=token)

    async def acquire_slot_lease(
        self, *, resource_type: ResourceType, slot_date: date, start_time: str
    ) -> Optional[LeaseHandle]:
        key = make_slot_lease_key(
            resource_type=resource_type.value, slot_date=slot_date, start_time=start_time
        )
        return await self._acquire(key=key, ttl=self._slot_lease_ttl, scope='slot')

    @Logger.io
    async def acquire_slot_leases(
        self,
        *,
        resource_type: ResourceType,
        slot: TimeSlot,
        windows: Optional[Iterable[str]] = None,
    ) -> list[LeaseHandle]:
        acquired: list[LeaseHandle] = []
        try:
            for start_time in windows if windows is not None else slot.windows():
                lease = await self.acquire_slot_lease(
                    resource_type=resource_type, slot_date=slot.date, start_time=start_time
                )
                if lease is None:
                    raise LeaseNotAcquiredError(
                        f'Slot {start_time} on {slot.date.isoformat()} is being reserved '
                        f'by another request, please try again later'
                    )
                acquired.append(lease)
        except BaseException:
            await self.release_all(leases=acquired)
            raise
        return acquired

    async def acquire_booking_lease(self, *, booking_id: UUID) -> Optional[LeaseHandle]:
        key = make_booking_lease_key(booking_id=str(booking_id))
        return await self._acquire(key=key, ttl=self._booking_lease_ttl, scope='booking')

    async def release(self, *, lease: LeaseHandle) -> bool:
        return await self._lock.release(key=lease.key, token=lease.token)

    async def release_all(self, *, leases: Iterable[LeaseHandle]) -> None:
        for lease in leases:
            await self.release(lease=lease)

    @asynccontextmanager
    async def booking_lease(self, *, booking_id: UUID) -> AsyncIterator[None]:
        lease = await self.acquire_booking_lease(booking_id=booking_id)
        if lease is None:
            raise LeaseNotAcquiredError(
                'Booking is being modified by another request, please try again later'
            )
        try:
            yield
        finally:
            await self.release(lease=lease)
