from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import date
from typing import Iterable, Optional

import attrs
from uuid_utils import UUID

from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import TimeSlot


@attrs.define(frozen=True)
class LeaseHandle:
    """Proof of one acquisition; only its holder can release the lease."""

    key: str
    token: str


class IReservationLockManager(ABC):
    """
    Non-blocking, auto-expiring leases. A failed acquisition is reported to the
    caller immediately; nothing waits or retries.
    """

    @abstractmethod
    async def acquire_slot_lease(
        self, *, resource_type: ResourceType, slot_date: date, start_time: str
    ) -> Optional[LeaseHandle]:
        pass

    @abstractmethod
    async def acquire_slot_leases(
        self,
        *,
        resource_type: ResourceType,
        slot: TimeSlot,
        windows: Optional[Iterable[str]] = None,
    ) -> list[LeaseHandle]:
        """
        Lease every window of the slot (or only the given window starts)

        Returns:
            Handles of the acquired leases

        Raises:
            LeaseNotAcquiredError: any window is leased elsewhere; partial
                acquisitions are released first
        """
        pass

    @abstractmethod
    async def acquire_booking_lease(self, *, booking_id: UUID) -> Optional[LeaseHandle]:
        pass

    @abstractmethod
    async def release(self, *, lease: LeaseHandle) -> bool:
        """Early, ownership-checked release. False if no longer ours or already expired."""
        pass

    @abstractmethod
    async def release_all(self, *, leases: Iterable[LeaseHandle]) -> None:
        pass

    @abstractmethod
    def booking_lease(self, *, booking_id: UUID) -> AbstractAsyncContextManager[None]:
        """
        Hold the booking lease for the duration of the block

        Raises:
            LeaseNotAcquiredError: another mutation holds the lease
        """
        pass
