from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.platform.types import UtilsUUID7
from src.service.play_arena.app.dto.booking_view import BookingView
from src.service.play_arena.domain.entity.booking_entity import Booking


class BookingCreateRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            'examples': [
                {
                    'mode': 'private',
                    'resource_type': 'chess',
                    'date': '2025-06-02',
                    'start_time': '10:00',
                    'end_time': '11:00',
                    'location': 'Floor 3 lounge',
                    'invitees': ['bb222b'],
                },
                {
                    'mode': 'open',
                    'resource_type': 'foosball',
                    'date': '2025-06-02',
                    'start_time': '17:30',
                    'end_time': '18:00',
                    'location': 'Cafeteria',
                },
            ]
        },
    )

    mode: str
    resource_type: str
    slot_date: str = Field(alias='date')
    start_time: str
    end_time: str
    location: str
    invitees: List[str] = []  # Private only: 1..3 colleagues, creator excluded


class BookingUpdateRequest(BaseModel):
    """Every field is optional; omitted fields keep their current value"""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            'example': {'start_time': '11:00', 'end_time': '12:00', 'location': 'Floor 5'}
        },
    )

    resource_type: Optional[str] = None
    slot_date: Optional[str] = Field(default=None, alias='date')
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    invitees: Optional[List[str]] = None


class SlotResponse(BaseModel):
    date: str
    start_time: str
    end_time: str


class ParticipantResponse(BaseModel):
    identity: str
    checked_in: bool


class BookingResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'id': '01234567-89ab-7def-0123-456789abcdef',
                'resource_type': 'chess',
                'mode': 'private',
                'slot': {'date': '2025-06-02', 'start_time': '10:00', 'end_time': '11:00'},
                'location': 'Floor 3 lounge',
                'created_by': 'aa111a',
                'participants': [
                    {'identity': 'aa111a', 'checked_in': False},
                    {'identity': 'bb222b', 'checked_in': False},
                ],
                'phase': 'upcoming',
                'created_at': '2025-06-01T09:00:00+05:30',
                'updated_at': '2025-06-01T09:00:00+05:30',
            }
        }
    )

    id: UtilsUUID7
    resource_type: str
    mode: str
    slot: SlotResponse
    location: str
    created_by: str
    participants: List[ParticipantResponse]
    phase: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking: Booking, *, phase: Optional[str] = None) -> 'BookingResponse':
        return cls(
            id=booking.id,
            resource_type=booking.resource_type.value,
            mode=booking.mode.value,
            slot=SlotResponse(**booking.slot.to_dict()),
            location=booking.location,
            created_by=booking.created_by,
            participants=[ParticipantResponse(**p.to_dict()) for p in booking.participants],
            phase=phase,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )

    @classmethod
    def from_view(cls, view: BookingView) -> 'BookingResponse':
        return cls.from_booking(view.booking, phase=view.phase.value)


class AvailableSlotResponse(BaseModel):
    start_time: str
    end_time: str
