from datetime import datetime
from typing import Callable, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.play_arena_metrics import metrics
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.play_arena.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.play_arena.app.interface.i_score_ledger_repo import IScoreLedgerRepo
from src.service.play_arena.domain.domain_event import notification_message
from src.service.play_arena.domain.entity.score_entity import FinalScore, ScoreRecord


class SubmitFinalScoresUseCase:
    def __init__(
        self,
        *,
        booking_query_repo: IBookingQueryRepo,
        score_ledger_repo: IScoreLedgerRepo,
        notification_dispatcher: INotificationDispatcher,
        clock: Callable[[], datetime],
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.score_ledger_repo = score_ledger_repo
        self.notification_dispatcher = notification_dispatcher
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        score_ledger_repo: IScoreLedgerRepo = Depends(Provide[Container.score_ledger_repo]),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
        clock: Callable[[], datetime] = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            booking_query_repo=booking_query_repo,
            score_ledger_repo=score_ledger_repo,
            notification_dispatcher=notification_dispatcher,
            clock=clock,
        )

    @Logger.io
    async def submit(
        self, *, booking_id: UUID, identity: str, scores: List[FinalScore]
    ) -> ScoreRecord:
        """
        Single submission per booking; final scores add to the check-in points.

        Raises:
            NotFoundError: booking absent
            ForbiddenError: caller is not the creator
            DomainError: slot not ended, invalid entries
            ConflictError: final scores already submitted (ledger unchanged)
        """
        with (
            self.tracer.start_as_current_span(
                'use_case.submit_final_scores', attributes={'booking.id': str(booking_id)}
            ),
            metrics.track_booking_operation(operation='submit_final_scores'),
        ):
            booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')

            booking.ensure_creator(identity, action='submit final scores')
            final_scores = ScoreRecord.validate_final_submission(
                booking=booking, scores=scores, now=self.clock()
            )

            record = await self.score_ledger_repo.finalize(
                booking_id=booking_id,
                resource_type=booking.resource_type,
                final_scores=final_scores,
            )
            if record is None:
                raise ConflictError('Final scores have already been submitted for this booking')

            Logger.base.info(f'🏆 [SCORES] Final scores recorded for {booking_id}')

            message = notification_message.final_scores_submitted(booking)
            self.notification_dispatcher.notify_many(
                identities=booking.participant_ids, title=message.title, body=message.body
            )

            return record
