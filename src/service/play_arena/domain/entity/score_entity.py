from datetime import datetime
from typing import Any, List, Optional

import attrs
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DomainError
from src.service.play_arena.domain.entity.booking_entity import Booking
from src.service.play_arena.domain.enum.resource_type import ResourceType


@attrs.define(frozen=True)
class FinalScore:
    """One line of a creator's final score submission"""

    identity: str
    score: Any


@attrs.define(frozen=True)
class ScoreEntry:
    identity: str
    checkin_score: int = 0
    final_score: int = 0

    @property
    def total(self) -> int:
        # Final scores are added on top of the check-in points
        return self.checkin_score + self.final_score

    def to_dict(self) -> dict[str, Any]:
        return {
            'identity': self.identity,
            'checkin_score': self.checkin_score,
            'final_score': self.final_score,
            'total': self.total,
        }


@attrs.define
class ScoreRecord:
    booking_id: UUID
    resource_type: ResourceType
    entries: List[ScoreEntry] = attrs.field(factory=list)
    finalized_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_finalized(self) -> bool:
        return self.finalized_at is not None

    @staticmethod
    def validate_final_submission(
        *, booking: Booking, scores: List[FinalScore], now: datetime
    ) -> dict[str, int]:
        """
        Returns:
            identity -> final score, in submission order

        Raises:
            DomainError: slot not ended, empty/duplicate/unknown entries,
                more entries than participants, negative, too large or non-whole scores
        """
        if not booking.slot.has_ended(now):
            raise DomainError('Final scores can only be submitted after the slot has ended')
        if not scores:
            raise DomainError('At least one score entry is required')
        if len(scores) > len(booking.participants):
            raise DomainError('More score entries than participants')

        result: dict[str, int] = {}
        for entry in scores:
            if entry.identity in result:
                raise DomainError(f'Duplicate score entry for {entry.identity}')
            if not booking.is_participant(entry.identity):
                raise DomainError(f'{entry.identity} is not a participant of this booking')
            if isinstance(entry.score, bool) or not isinstance(entry.score, int):
                raise DomainError('Scores must be whole numbers')
            if entry.score < 0:
                raise DomainError('Scores cannot be negative')
            if entry.score > settings.MAX_FINAL_SCORE:
                raise DomainError(f'Scores cannot exceed {settings.MAX_FINAL_SCORE}')
            result[entry.identity] = entry.score
        return result


@attrs.define(frozen=True)
class UserScoreAggregate:
    identity: str
    resource_type: ResourceType
    total: int
