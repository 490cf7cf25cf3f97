from datetime import datetime
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
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
from src.service.play_arena.app.interface.i_roster_validator import IRosterValidator
from src.service.play_arena.domain.domain_event import notification_message
from src.service.play_arena.domain.entity.booking_entity import Booking


class JoinBookingUseCase:
    """
    Join an open booking under the booking lease.

    A second concurrent join of the same booking gets LeaseNotAcquiredError
    rather than waiting; the client retries.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_query_repo: IBookingQueryRepo,
        roster_validator: IRosterValidator,
        lock_manager: IReservationLockManager,
        listing_cache: IOpenBookingListingCache,
        notification_dispatcher: INotificationDispatcher,
        clock: Callable[[], datetime],
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_query_repo = booking_query_repo
        self.roster_validator = roster_validator
        self.lock_manager = lock_manager
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
        roster_validator: IRosterValidator = Depends(Provide[Container.roster_validator]),
        lock_manager: IReservationLockManager = Depends(
            Provide[Container.reservation_lock_manager]
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
            roster_validator=roster_validator,
            lock_manager=lock_manager,
            listing_cache=listing_cache,
            notification_dispatcher=notification_dispatcher,
            clock=clock,
        )

    @Logger.io
    async def join(self, *, booking_id: UUID, identity: str) -> Booking:
        """
        Raises:
            NotFoundError: booking absent
            DomainError: private booking, slot started, caller not on the roster
            ConflictError: already a participant, booking full, lease busy
        """
        with (
            self.tracer.start_as_current_span(
                'use_case.join_booking', attributes={'booking.id': str(booking_id)}
            ),
            metrics.track_booking_operation(operation='join'),
        ):
            async with self.lock_manager.booking_lease(booking_id=booking_id):
                booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
                if not booking:
                    raise NotFoundError('Booking not found')

                joined = booking.join(identity=identity, now=self.clock())

                if not await self.roster_validator.validate(identities=[identity]):
                    raise DomainError('You are not a valid user')

                await self.booking_command_repo.update(booking=joined, rewrite_claims=False)

            Logger.base.info(
                f'🙋 [JOIN-BOOKING] {identity} joined {booking_id} '
                f'({len(joined.participants)} participants)'
            )

            await self.listing_cache.invalidate(
                slot_date=joined.slot.date, resource_type=joined.resource_type
            )

            confirmation = notification_message.joined_confirmation(joined)
            self.notification_dispatcher.notify(
                identity=identity, title=confirmation.title, body=confirmation.body
            )
            announcement = notification_message.participant_joined(joined, identity=identity)
            self.notification_dispatcher.notify(
                identity=joined.created_by, title=announcement.title, body=announcement.body
            )

            return joined
