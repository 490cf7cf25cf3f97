from datetime import datetime
from typing import Callable, List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, DomainError
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
from src.service.play_arena.app.interface.i_slot_availability_index import (
    ISlotAvailabilityIndex,
)
from src.service.play_arena.domain.domain_event import notification_message
from src.service.play_arena.domain.entity.booking_entity import Booking
from src.service.play_arena.domain.enum.booking_mode import BookingMode
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import TimeSlot


class CreateBookingUseCase:
    """
    Create booking use case

    Flow:
    1. Validate input and build the Booking (no side effects on failure)
    2. Validate creator + invitees against the roster
    3. Acquire slot leases for every covered window (conflict, never retry)
    4. Re-check claims in PostgreSQL, persist booking + claims in one transaction
    5. Invalidate availability and open-listing caches
    6. Notify every participant (fire-and-forget)

    Slot leases are released on any failure after acquisition. On success they
    are left to expire and keep guarding against a double submit.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_query_repo: IBookingQueryRepo,
        roster_validator: IRosterValidator,
        lock_manager: IReservationLockManager,
        availability_index: ISlotAvailabilityIndex,
        listing_cache: IOpenBookingListingCache,
        notification_dispatcher: INotificationDispatcher,
        clock: Callable[[], datetime],
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_query_repo = booking_query_repo
        self.roster_validator = roster_validator
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
        roster_validator: IRosterValidator = Depends(Provide[Container.roster_validator]),
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
            roster_validator=roster_validator,
            lock_manager=lock_manager,
            availability_index=availability_index,
            listing_cache=listing_cache,
            notification_dispatcher=notification_dispatcher,
            clock=clock,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        creator: str,
        mode: str,
        resource_type: str,
        slot_date: str,
        start_time: str,
        end_time: str,
        location: str,
        invitees: Optional[List[str]] = None,
    ) -> Booking:
        """
        Raises:
            DomainError: malformed input or invalid participants
            LeaseNotAcquiredError: another request is reserving the slot
            ConflictError: slot already booked
            DependencyUnavailableError: roster or lease store unreachable
        """
        booking_id = uuid_utils.uuid7()

        with (
            self.tracer.start_as_current_span(
                'use_case.create_booking',
                attributes={'booking.id': str(booking_id), 'resource_type': resource_type},
            ),
            metrics.track_booking_operation(operation='create'),
        ):
            # Step 1: Validate before any side effect
            booking = Booking.create(
                id=booking_id,
                mode=BookingMode.parse(mode),
                resource_type=ResourceType.parse(resource_type),
                slot=TimeSlot.parse(slot_date=slot_date, start_time=start_time, end_time=end_time),
                location=location,
                created_by=creator,
                invitees=invitees or [],
                now=self.clock(),
            )

            # Step 2: Roster check for everyone on the booking
            if not await self.roster_validator.validate(identities=booking.participant_ids):
                raise DomainError('One or more participants are not valid users')

            # Step 3: Slot leases (raises LeaseNotAcquiredError on contention)
            leases = await self.lock_manager.acquire_slot_leases(
                resource_type=booking.resource_type, slot=booking.slot
            )

            # Step 4: Authoritative re-check and persist
            try:
                claimed = await self.booking_query_repo.list_claimed_windows(
                    resource_type=booking.resource_type, slot_date=booking.slot.date
                )
                if claimed.intersection(booking.slot.windows()):
                    raise ConflictError('This slot is already booked')

                await self.booking_command_repo.create(booking=booking)
            except BaseException:
                await self.lock_manager.release_all(leases=leases)
                raise

            Logger.base.info(
                f'📝 [CREATE-BOOKING] {booking.id} {booking.resource_type.value} '
                f'{booking.slot.date} {booking.slot.start_time}-{booking.slot.end_time} '
                f'by {creator}'
            )

            # Step 5: Derived caches
            await self.availability_index.invalidate(
                resource_type=booking.resource_type, slot_date=booking.slot.date
            )
            await self.listing_cache.invalidate(
                slot_date=booking.slot.date, resource_type=booking.resource_type
            )

            # Step 6: Notify (not awaited)
            message = notification_message.booking_created(booking)
            self.notification_dispatcher.notify_many(
                identities=booking.participant_ids, title=message.title, body=message.body
            )

            return booking
