from datetime import datetime
from typing import Callable, List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
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
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import TimeSlot


class UpdateBookingUseCase:
    """
    Creator-only change of resource type, slot, location or (private only)
    participants.

    Flow when the slot key changes:
    1. Booking lease held for the whole mutation
    2. Slot leases for the windows this booking does not already claim
    3. Re-check claims in PostgreSQL excluding this booking
    4. Commit booking + rewritten claims in one transaction
    5. Release the new slot leases (finally)
    6. Invalidate availability and open listing for both the old and new keys
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

    def _build_slot(
        self,
        booking: Booking,
        *,
        slot_date: Optional[str],
        start_time: Optional[str],
        end_time: Optional[str],
    ) -> Optional[TimeSlot]:
        if slot_date is None and start_time is None and end_time is None:
            return None
        current = booking.slot
        return TimeSlot.parse(
            slot_date=slot_date if slot_date is not None else current.date,
            start_time=start_time if start_time is not None else current.start_time,
            end_time=end_time if end_time is not None else current.end_time,
        )

    @Logger.io
    async def update(
        self,
        *,
        booking_id: UUID,
        identity: str,
        resource_type: Optional[str] = None,
        slot_date: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        location: Optional[str] = None,
        invitees: Optional[List[str]] = None,
    ) -> Booking:
        """
        Raises:
            NotFoundError: booking absent
            ForbiddenError: caller is not the creator
            DomainError: slot started, malformed changes, invalid participants
            LeaseNotAcquiredError: booking or new slot leased elsewhere
            ConflictError: new slot already booked
        """
        with (
            self.tracer.start_as_current_span(
                'use_case.update_booking', attributes={'booking.id': str(booking_id)}
            ),
            metrics.track_booking_operation(operation='update'),
        ):
            async with self.lock_manager.booking_lease(booking_id=booking_id):
                booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
                if not booking:
                    raise NotFoundError('Booking not found')

                now = self.clock()
                booking.ensure_creator(identity, action='update this booking')
                booking.ensure_not_started(now, action='update')

                updated = booking.update(
                    now=now,
                    resource_type=ResourceType.parse(resource_type) if resource_type else None,
                    slot=self._build_slot(
                        booking, slot_date=slot_date, start_time=start_time, end_time=end_time
                    ),
                    location=location,
                    invitees=invitees,
                )

                if invitees is not None and not await self.roster_validator.validate(
                    identities=updated.participant_ids
                ):
                    raise DomainError('One or more participants are not valid users')

                slot_key_changed = (
                    updated.resource_type != booking.resource_type or updated.slot != booking.slot
                )
                if slot_key_changed:
                    await self._move_slot(old=booking, new=updated)
                else:
                    await self.booking_command_repo.update(booking=updated, rewrite_claims=False)

            Logger.base.info(f'✏️ [UPDATE-BOOKING] {booking_id} updated by {identity}')

            for affected in (booking, updated) if slot_key_changed else (updated,):
                await self.availability_index.invalidate(
                    resource_type=affected.resource_type, slot_date=affected.slot.date
                )
                await self.listing_cache.invalidate(
                    slot_date=affected.slot.date, resource_type=affected.resource_type
                )

            message = notification_message.booking_updated(updated)
            self.notification_dispatcher.notify_many(
                identities=[*booking.participant_ids, *updated.participant_ids],
                title=message.title,
                body=message.body,
            )

            return updated

    async def _move_slot(self, *, old: Booking, new: Booking) -> None:
        already_claimed = (
            set(old.slot.windows())
            if old.resource_type == new.resource_type and old.slot.date == new.slot.date
            else set()
        )
        new_windows = [w for w in new.slot.windows() if w not in already_claimed]

        leases = await self.lock_manager.acquire_slot_leases(
            resource_type=new.resource_type, slot=new.slot, windows=new_windows
        )
        try:
            claimed = await self.booking_query_repo.list_claimed_windows(
                resource_type=new.resource_type,
                slot_date=new.slot.date,
                exclude_booking_id=new.id,
            )
            if claimed.intersection(new.slot.windows()):
                raise ConflictError('The new slot is already booked')

            await self.booking_command_repo.update(booking=new, rewrite_claims=True)
        finally:
            await self.lock_manager.release_all(leases=leases)
