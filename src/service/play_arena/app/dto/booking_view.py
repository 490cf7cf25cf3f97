import attrs

from src.service.play_arena.domain.entity.booking_entity import Booking
from src.service.play_arena.domain.enum.booking_phase import BookingPhase


@attrs.define(frozen=True)
class BookingView:
    """Booking plus its phase at read time"""

    booking: Booking
    phase: BookingPhase
