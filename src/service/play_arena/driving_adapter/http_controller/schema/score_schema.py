from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from src.platform.types import UtilsUUID7
from src.service.play_arena.domain.entity.score_entity import ScoreRecord, UserScoreAggregate


class FinalScoreItem(BaseModel):
    identity: str
    score: Any  # Whole number >= 0, checked by the score ledger


class FinalScoresRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'scores': [
                    {'identity': 'aa111a', 'score': 10},
                    {'identity': 'bb222b', 'score': 7},
                ]
            }
        }
    )

    scores: List[FinalScoreItem]


class ScoreEntryResponse(BaseModel):
    identity: str
    checkin_score: int
    final_score: int
    total: int


class ScoreRecordResponse(BaseModel):
    booking_id: UtilsUUID7
    resource_type: str
    entries: List[ScoreEntryResponse]
    finalized_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: ScoreRecord) -> 'ScoreRecordResponse':
        return cls(
            booking_id=record.booking_id,
            resource_type=record.resource_type.value,
            entries=[
                ScoreEntryResponse(
                    identity=e.identity,
                    checkin_score=e.checkin_score,
                    final_score=e.final_score,
                    total=e.total,
                )
                for e in record.entries
            ],
            finalized_at=record.finalized_at,
        )


class UserScoreResponse(BaseModel):
    identity: str
    resource_type: str
    total: int

    @classmethod
    def from_aggregate(cls, aggregate: UserScoreAggregate) -> 'UserScoreResponse':
        return cls(
            identity=aggregate.identity,
            resource_type=aggregate.resource_type.value,
            total=aggregate.total,
        )
