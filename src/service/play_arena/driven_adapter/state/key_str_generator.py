"""
Key String Generator

Helper functions for the Redis/Kvrocks keys used by the play arena.
"""

from datetime import date
import os
from typing import Optional


def _get_key_prefix() -> str:
    """Read at call time: pytest sets KVROCKS_KEY_PREFIX after module import"""
    return os.getenv('KVROCKS_KEY_PREFIX', '')


def _make_key(key: str) -> str:
    """Add prefix to key for test isolation in parallel testing"""
    return f'{_get_key_prefix()}{key}'


def make_slot_lease_key(*, resource_type: str, slot_date: date, start_time: str) -> str:
    return _make_key(f'play_arena:lease:slot:{resource_type}:{slot_date.isoformat()}:{start_time}')


def make_booking_lease_key(*, booking_id: str) -> str:
    return _make_key(f'play_arena:lease:booking:{booking_id}')


def make_availability_key(*, resource_type: str, slot_date: date) -> str:
    """Cached free windows for one resource type and date"""
    return _make_key(f'play_arena:availability:{resource_type}:{slot_date.isoformat()}')


def make_open_listing_key(*, slot_date: Optional[date], resource_type: Optional[str]) -> str:
    """Cached open-booking listing; None stands for 'all'"""
    date_part = slot_date.isoformat() if slot_date else 'all'
    type_part = resource_type or 'all'
    return _make_key(f'play_arena:open_bookings:{date_part}:{type_part}')


def make_roster_key(*, roster_key: str) -> str:
    """Roster written by the external directory sync job"""
    return _make_key(roster_key)


def make_token_blacklist_key(*, prefix: str, token: str) -> str:
    return _make_key(f'{prefix}{token}')
