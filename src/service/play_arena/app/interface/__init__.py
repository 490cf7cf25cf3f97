"""Application layer interfaces (Ports)"""

from src.service.play_arena.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.play_arena.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.play_arena.app.interface.i_open_booking_listing_cache import (
    IOpenBookingListingCache,
)
from src.service.play_arena.app.interface.i_reservation_lock_manager import (
    IReservationLockManager,
)
from src.service.play_arena.app.interface.i_roster_validator import IRosterValidator
from src.service.play_arena.app.interface.i_score_ledger_repo import IScoreLedgerRepo
from src.service.play_arena.app.interface.i_slot_availability_index import (
    ISlotAvailabilityIndex,
)

__all__ = [
    'IBookingCommandRepo',
    'IBookingQueryRepo',
    'INotificationDispatcher',
    'IOpenBookingListingCache',
    'IReservationLockManager',
    'IRosterValidator',
    'IScoreLedgerRepo',
    'ISlotAvailabilityIndex',
]
