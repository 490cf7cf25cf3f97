from datetime import datetime
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_slot_availability_index import (
    ISlotAvailabilityIndex,
)
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import parse_slot_date, to_minutes


class GetAvailableSlotsUseCase:
    def __init__(
        self, *, availability_index: ISlotAvailabilityIndex, clock: Callable[[], datetime]
    ) -> None:
        self.availability_index = availability_index
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        availability_index: ISlotAvailabilityIndex = Depends(
            Provide[Container.slot_availability_index]
        ),
        clock: Callable[[], datetime] = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(availability_index=availability_index, clock=clock)

    @Logger.io
    async def get_available_slots(
        self, *, resource_type: str, slot_date: str
    ) -> list[dict[str, str]]:
        """
        Free windows for the resource type and date. For today, windows whose
        start has passed are hidden.

        Raises:
            DomainError: unknown resource type, malformed or past date
        """
        parsed_type = ResourceType.parse(resource_type)
        parsed_date = parse_slot_date(slot_date)
        now = self.clock()

        if parsed_date < now.date():
            raise DomainError('Slot date cannot be in the past')

        slots = await self.availability_index.compute_slots(
            resource_type=parsed_type, slot_date=parsed_date
        )

        if parsed_date == now.date():
            now_minutes = now.hour * 60 + now.minute
            slots = [s for s in slots if to_minutes(s['start_time']) > now_minutes]

        return slots
