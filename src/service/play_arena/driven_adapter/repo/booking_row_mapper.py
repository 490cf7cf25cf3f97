import asyncpg
from uuid_utils import UUID

from src.service.play_arena.domain.entity.booking_entity import Booking, Participant
from src.service.play_arena.domain.enum.booking_mode import BookingMode
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import TimeSlot


BOOKING_COLUMNS = """
    id, resource_type, mode, slot_date, start_time, end_time, location,
    created_by, participants, created_at, updated_at
"""


def row_to_booking(row: asyncpg.Record) -> Booking:
    """Convert asyncpg Record to Booking entity"""
    return Booking(
        id=UUID(str(row['id'])),
        resource_type=ResourceType(row['resource_type']),
        mode=BookingMode(row['mode']),
        slot=TimeSlot(
            date=row['slot_date'], start_time=row['start_time'], end_time=row['end_time']
        ),
        location=row['location'],
        created_by=row['created_by'],
        participants=[
            Participant(identity=p['identity'], checked_in=p['checked_in'])
            for p in row['participants']
        ],
        created_at=row['created_at'],
        updated_at=row['updated_at'],
    )
