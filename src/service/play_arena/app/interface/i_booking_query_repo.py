from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from uuid_utils import UUID

from src.service.play_arena.domain.entity.booking_entity import Booking
from src.service.play_arena.domain.enum.resource_type import ResourceType


class IBookingQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_by_participant(self, *, identity: str) -> List[Booking]:
        """Bookings the identity participates in, ordered by date then start time"""
        pass

    @abstractmethod
    async def list_open(
        self,
        *,
        slot_date: Optional[date],
        resource_type: Optional[ResourceType],
        from_date: date,
    ) -> List[Booking]:
        """
        Open-mode bookings that are not full, on or after from_date

        Args:
            slot_date: Restrict to one date (None = all dates)
            resource_type: Restrict to one resource type (None = all)
            from_date: Lower bound for the slot date (today)
        """
        pass

    @abstractmethod
    async def list_claimed_windows(
        self,
        *,
        resource_type: ResourceType,
        slot_date: date,
        exclude_booking_id: Optional[UUID] = None,
    ) -> set[str]:
        """
        Window start times claimed by live bookings (direct store read)

        Args:
            exclude_booking_id: Ignore claims held by this booking (update re-check)
        """
        pass
