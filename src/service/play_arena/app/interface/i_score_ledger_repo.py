from abc import ABC, abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.play_arena.domain.entity.booking_entity import Booking
from src.service.play_arena.domain.entity.score_entity import ScoreRecord, UserScoreAggregate
from src.service.play_arena.domain.enum.resource_type import ResourceType


class IScoreLedgerRepo(ABC):
    @abstractmethod
    async def record_checkin_score(self, *, booking: Booking, identity: str) -> ScoreRecord:
        """
        Persist the checked-in booking and upsert +1 into identity's check-in score
        in one transaction, creating the record on first call

        Returns:
            Score record after the increment

        Raises:
            NotFoundError: booking was deleted meanwhile (nothing written)
        """
        pass

    @abstractmethod
    async def finalize(
        self, *, booking_id: UUID, resource_type: ResourceType, final_scores: dict[str, int]
    ) -> Optional[ScoreRecord]:
        """
        Write final scores and set finalized_at, atomically and only once

        Returns:
            Score record, or None if it was already finalized (ledger unchanged)
        """
        pass

    @abstractmethod
    async def get_by_booking_id(self, *, booking_id: UUID) -> Optional[ScoreRecord]:
        pass

    @abstractmethod
    async def aggregate_by_user(
        self, *, resource_type: Optional[ResourceType] = None
    ) -> List[UserScoreAggregate]:
        """Total per (identity, resource type), sorted by identity then resource type"""
        pass
