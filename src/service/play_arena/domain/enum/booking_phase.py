from enum import StrEnum


class BookingPhase(StrEnum):
    """Derived from the slot versus the current time, never stored"""

    UPCOMING = 'upcoming'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
