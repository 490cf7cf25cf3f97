from datetime import datetime
from typing import Callable, List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.play_arena.app.interface.i_open_booking_listing_cache import (
    IOpenBookingListingCache,
)
from src.service.play_arena.domain.entity.booking_entity import Booking
from src.service.play_arena.domain.enum.booking_mode import BookingMode
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import parse_slot_date


class ListOpenBookingsUseCase:
    """
    Joinable open bookings, cached per (date or 'all', resource type or 'all').

    Cached entries may lag by up to the TTL, so every read re-filters out
    bookings that have filled up or started since they were cached.
    """

    def __init__(
        self,
        *,
        booking_query_repo: IBookingQueryRepo,
        listing_cache: IOpenBookingListingCache,
        clock: Callable[[], datetime],
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.listing_cache = listing_cache
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        listing_cache: IOpenBookingListingCache = Depends(
            Provide[Container.open_booking_listing_cache]
        ),
        clock: Callable[[], datetime] = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo, listing_cache=listing_cache, clock=clock)

    @Logger.io
    async def list_open_bookings(
        self, *, slot_date: Optional[str] = None, resource_type: Optional[str] = None
    ) -> List[Booking]:
        parsed_date = parse_slot_date(slot_date) if slot_date else None
        parsed_type = ResourceType.parse(resource_type) if resource_type else None
        now = self.clock()

        async def compute() -> list[dict]:
            bookings = await self.booking_query_repo.list_open(
                slot_date=parsed_date, resource_type=parsed_type, from_date=now.date()
            )
            return [b.to_dict() for b in bookings]

        cached = await self.listing_cache.get_or_compute(
            slot_date=parsed_date, resource_type=parsed_type, compute=compute
        )

        bookings = [Booking.from_dict(data) for data in cached]
        return [
            b
            for b in bookings
            if b.mode == BookingMode.OPEN and not b.is_full and not b.slot.has_started(now)
        ]
