from abc import ABC, abstractmethod
from datetime import date

from src.service.play_arena.domain.enum.resource_type import ResourceType


class ISlotAvailabilityIndex(ABC):
    """
    Derived, disposable view of free grid windows per (resource type, date).

    Reads may be stale up to the cache TTL. Never consult this to grant
    exclusive access to a slot.
    """

    @abstractmethod
    async def compute_slots(
        self, *, resource_type: ResourceType, slot_date: date
    ) -> list[dict[str, str]]:
        """
        Returns:
            Ordered free windows as [{'start_time': 'HH:MM', 'end_time': 'HH:MM'}]
        """
        pass

    @abstractmethod
    async def invalidate(self, *, resource_type: ResourceType, slot_date: date) -> None:
        """Drop the cached entry. Idempotent, safe to call speculatively."""
        pass
