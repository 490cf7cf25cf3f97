"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.play_arena.app.command import (
    cancel_booking_use_case,
    check_in_use_case,
    create_booking_use_case,
    join_booking_use_case,
    submit_final_scores_use_case,
    update_booking_use_case,
)
from src.service.play_arena.app.query import (
    aggregate_user_scores_use_case,
    get_available_slots_use_case,
    get_booking_scores_use_case,
    get_booking_use_case,
    list_my_bookings_use_case,
    list_open_bookings_use_case,
    list_roster_users_use_case,
)
from src.service.play_arena.driving_adapter.http_controller.auth import caller_identity


WIRE_MODULES: list[ModuleType] = [
    create_booking_use_case,
    join_booking_use_case,
    check_in_use_case,
    update_booking_use_case,
    cancel_booking_use_case,
    submit_final_scores_use_case,
    get_booking_use_case,
    list_my_bookings_use_case,
    list_open_bookings_use_case,
    get_available_slots_use_case,
    get_booking_scores_use_case,
    aggregate_user_scores_use_case,
    list_roster_users_use_case,
    caller_identity,
]
