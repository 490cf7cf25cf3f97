"""Application layer DTOs"""

from src.service.play_arena.app.dto.booking_view import BookingView

__all__ = ['BookingView']
