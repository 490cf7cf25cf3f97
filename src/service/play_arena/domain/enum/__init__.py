"""Play Arena Domain Enums"""

from src.service.play_arena.domain.enum.booking_mode import BookingMode
from src.service.play_arena.domain.enum.booking_phase import BookingPhase
from src.service.play_arena.domain.enum.resource_type import ResourceType

__all__ = ['BookingMode', 'BookingPhase', 'ResourceType']
