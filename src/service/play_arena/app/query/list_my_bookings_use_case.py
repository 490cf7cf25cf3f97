from datetime import datetime
from typing import Callable, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.dto.booking_view import BookingView
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo


class ListMyBookingsUseCase:
    def __init__(
        self, *, booking_query_repo: IBookingQueryRepo, clock: Callable[[], datetime]
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        clock: Callable[[], datetime] = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo, clock=clock)

    @Logger.io
    async def list_my_bookings(self, *, identity: str) -> List[BookingView]:
        """Bookings the caller participates in, ordered by date and start time"""
        now = self.clock()
        bookings = await self.booking_query_repo.list_by_participant(identity=identity)
        return [BookingView(booking=b, phase=b.phase(now)) for b in bookings]
