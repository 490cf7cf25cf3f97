from datetime import datetime
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.play_arena_metrics import metrics
from src.service.play_arena.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.play_arena.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.play_arena.app.interface.i_open_booking_listing_cache import (
    IOpenBookingListingCache,
)
from src.service.play_arena.app.interface.i_reservation_lock_manager import (
    IReservationLockManager,
)
from src.service.play_arena.app.interface.i_slot_availability_index import (
    ISlotAvailabilityIndex,
)
from src.service.play_arena.domain.domain_event import notification_message
from src.service.play_arena.domain.entity.booking_entity import Booking


class CancelBookingUseCase:
    """
    Creator-only hard delete. Slot claims cascade with the booking row, so the
    freed windows show up again once the availability entry is invalidated.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_query_repo: IBookingQueryRepo,
        lock_manager: IReservationLockManager,
        availability_index: ISlotAvailabilityIndex,
        listing_cache: IOpenBookingListingCache,
        notification_dispatcher: INotificationDispatcher,
        clock: Callable[[], datetime],
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_query_repo = booking_query_repo
        self.lock_manager = lock_manager
        self.availability_index = availability_index
        self.listing_cache = listing_cache
        self.notification_dispatcher = notification_dispatcher
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        lock_manager: IReservationLockManager = Depends(
            Provide[Container.reservation_lock_manager]
        ),
        availability_index: ISlotAvailabilityIndex = Depends(
            Provide[Container.slot_availability_index]
        ),
        listing_cache: IOpenBookingListingCache = Depends(
            Provide[Container.open_booking_listing_cache]
        ),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
        clock: Callable[[], datetime] = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            booking_command_repo=booking_command_repo,
            booking_query_repo=booking_query_repo,
            lock_manager=lock_manager,
            availability_index=availability_index,
            listing_cache=listing_cache,
            notification_dispatcher=notification_dispatcher,
            clock=clock,
        )

    @Logger.io
    async def cancel(self, *, booking_id: UUID, identity: str) -> Booking:
        """
        Returns:
            The booking as it was before deletion

        Raises:
            NotFoundError: booking absent
            ForbiddenError: caller is not the creator
            DomainError: slot already started
            ConflictError: lease busy
        """
        with (
            self.tracer.start_as_current_span(
                'use_case.cancel_booking', attributes={'booking.id': str(booking_id)}
            ),
            metrics.track_booking_operation(operation='cancel'),
        ):
            async with self.lock_manager.booking_lease(booking_id=booking_id):
                booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
                if not booking:
                    raise NotFoundError('Booking not found')

                booking.ensure_creator(identity, action='cancel this booking')
                booking.ensure_not_started(self.clock(), action='cancel')

                if not await self.booking_command_repo.delete(booking_id=booking_id):
                    raise NotFoundError('Booking not found')

            Logger.base.info(f'🗑️ [CANCEL-BOOKING] {booking_id} cancelled by {identity}')

            await self.availability_index.invalidate(
                resource_type=booking.resource_type, slot_date=booking.slot.date
            )
            await self.listing_cache.invalidate(
                slot_date=booking.slot.date, resource_type=booking.resource_type
            )

            message = notification_message.booking_cancelled(booking)
            self.notification_dispatcher.notify_many(
                identities=booking.participant_ids, title=message.title, body=message.body
            )

            return booking
