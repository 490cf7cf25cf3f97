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
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.play_arena.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.play_arena.app.interface.i_reservation_lock_manager import (
    IReservationLockManager,
)
from src.service.play_arena.app.interface.i_score_ledger_repo import IScoreLedgerRepo
from src.service.play_arena.domain.domain_event import notification_message
from src.service.play_arena.domain.entity.booking_entity import Booking


class CheckInUseCase:
    def __init__(
        self,
        *,
        booking_query_repo: IBookingQueryRepo,
        score_ledger_repo: IScoreLedgerRepo,
        lock_manager: IReservationLockManager,
        notification_dispatcher: INotificationDispatcher,
        clock: Callable[[], datetime],
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.score_ledger_repo = score_ledger_repo
        self.lock_manager = lock_manager
        self.notification_dispatcher = notification_dispatcher
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        score_ledger_repo: IScoreLedgerRepo = Depends(Provide[Container.score_ledger_repo]),
        lock_manager: IReservationLockManager = Depends(
            Provide[Container.reservation_lock_manager]
        ),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
        clock: Callable[[], datetime] = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            booking_query_repo=booking_query_repo,
            score_ledger_repo=score_ledger_repo,
            lock_manager=lock_manager,
            notification_dispatcher=notification_dispatcher,
            clock=clock,
        )

    @Logger.io
    async def check_in(self, *, booking_id: UUID, identity: str) -> Booking:
        """
        Flip the caller's check-in flag and add 1 check-in point to the ledger.

        Raises:
            NotFoundError: booking absent
            DomainError: slot not started yet or already ended
            ForbiddenError: caller is not a participant
            ConflictError: already checked in, lease busy
        """
        with (
            self.tracer.start_as_current_span(
                'use_case.check_in', attributes={'booking.id': str(booking_id)}
            ),
            metrics.track_booking_operation(operation='check_in'),
        ):
            async with self.lock_manager.booking_lease(booking_id=booking_id):
                booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
                if not booking:
                    raise NotFoundError('Booking not found')

                checked_in = booking.check_in(identity=identity, now=self.clock())
                # Flag and point commit together, under the lease
                await self.score_ledger_repo.record_checkin_score(
                    booking=checked_in, identity=identity
                )

            Logger.base.info(f'✅ [CHECK-IN] {identity} checked in to {booking_id}')

            message = notification_message.checked_in(checked_in)
            self.notification_dispatcher.notify(
                identity=identity, title=message.title, body=message.body
            )

            return checked_in
