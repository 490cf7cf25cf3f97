from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.app.interface.i_score_ledger_repo import IScoreLedgerRepo
from src.service.play_arena.domain.entity.score_entity import UserScoreAggregate
from src.service.play_arena.domain.enum.resource_type import ResourceType


class AggregateUserScoresUseCase:
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
    async def aggregate(self, *, resource_type: Optional[str] = None) -> List[UserScoreAggregate]:
        """Total per identity and resource type (check-in + final), sorted by identity"""
        parsed_type = ResourceType.parse(resource_type) if resource_type else None
        return await self.score_ledger_repo.aggregate_by_user(resource_type=parsed_type)
