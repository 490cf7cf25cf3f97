from datetime import datetime
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.dto.booking_view import BookingView
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo


class GetBookingUseCase:
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
    async def get_booking(self, *, booking_id: UUID) -> BookingView:
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)

        if not booking:
            raise NotFoundError('Booking not found')

        return BookingView(booking=booking, phase=booking.phase(self.clock()))
