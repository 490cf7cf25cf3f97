"""Play Arena Domain Value Objects"""

from src.service.play_arena.domain.value_object.time_slot import SlotWindow, TimeSlot

__all__ = ['SlotWindow', 'TimeSlot']
