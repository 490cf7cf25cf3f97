from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any, Optional

from src.service.play_arena.domain.enum.resource_type import ResourceType


class IOpenBookingListingCache(ABC):
    @abstractmethod
    async def get_or_compute(
        self,
        *,
        slot_date: Optional[date],
        resource_type: Optional[ResourceType],
        compute: Callable[[], Awaitable[list[dict[str, Any]]]],
    ) -> list[dict[str, Any]]:
        """Cached listing for (date or 'all', resource type or 'all'); compute on miss"""
        pass

    @abstractmethod
    async def invalidate(self, *, slot_date: date, resource_type: ResourceType) -> None:
        """Drop every listing key that can contain bookings of this date and type"""
        pass
