from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_score_ledger_repo import IScoreLedgerRepo
from src.service.play_arena.domain.entity.score_entity import ScoreRecord


class GetBookingScoresUseCase:
    def __init__(self, *, score_ledger_repo: IScoreLedgerRepo) -> None:
        self.score_ledger_repo = score_ledger_repo

    @classmethod
    @inject
    def depends(
        cls,
        score_ledger_repo: IScoreLedgerRepo = Depends(Provide[Container.score_ledger_repo]),
    ) -> Self:
        return cls(score_ledger_repo=score_ledger_repo)

    @Logger.io
    async def get_scores(self, *, booking_id: UUID) -> ScoreRecord:
        record = await self.score_ledger_repo.get_by_booking_id(booking_id=booking_id)
        if not record:
            raise NotFoundError('No scores recorded for this booking')
        return record
