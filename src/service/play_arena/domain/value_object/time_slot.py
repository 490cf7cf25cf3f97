"""
Time slot value object and the fixed booking grid.

The operating window (default 09:00-22:00) is split into fixed windows of
SLOT_STEP_MINUTES. A booking slot covers one or more consecutive windows and is
identified per window by its start time ('HH:MM').
"""

from datetime import date, datetime, time
import re
from typing import Any
from zoneinfo import ZoneInfo

import attrs

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DomainError


_TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):([0-5]\d)$')


def arena_now() -> datetime:
    """Current wall-clock time in the arena's timezone"""
    return datetime.now(ZoneInfo(settings.ARENA_TIMEZONE))


def to_minutes(value: str) -> int:
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


def from_minutes(minutes: int) -> str:
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


def parse_slot_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise DomainError('date must be in YYYY-MM-DD format')


def _parse_time(value: str, *, field: str) -> int:
    if not isinstance(value, str) or not _TIME_PATTERN.match(value):
        raise DomainError(f'{field} must be in HH:MM format')
    return to_minutes(value)


@attrs.define(frozen=True)
class SlotWindow:
    start_time: str
    end_time: str

    def to_dict(self) -> dict[str, str]:
        return {'start_time': self.start_time, 'end_time': self.end_time}


def grid_windows() -> list[SlotWindow]:
    """Every bookable window of a day, in order"""
    step = settings.SLOT_STEP_MINUTES
    start = to_minutes(settings.SLOT_GRID_START)
    end = to_minutes(settings.SLOT_GRID_END)
    return [
        SlotWindow(start_time=from_minutes(m), end_time=from_minutes(m + step))
        for m in range(start, end - step + 1, step)
    ]


@attrs.define(frozen=True)
class TimeSlot:
    date: date
    start_time: str
    end_time: str

    @classmethod
    def parse(cls, *, slot_date: str | date, start_time: str, end_time: str) -> 'TimeSlot':
        """
        Raises:
            DomainError: malformed date/time, start >= end, outside operating
                hours or not aligned to the grid
        """
        parsed_date = parse_slot_date(slot_date)
        start = _parse_time(start_time, field='start_time')
        end = _parse_time(end_time, field='end_time')

        if start >= end:
            raise DomainError('start_time must be before end_time')

        grid_start = to_minutes(settings.SLOT_GRID_START)
        grid_end = to_minutes(settings.SLOT_GRID_END)
        if start < grid_start or end > grid_end:
            raise DomainError(
                f'Slot must be within operating hours '
                f'{settings.SLOT_GRID_START}-{settings.SLOT_GRID_END}'
            )

        step = settings.SLOT_STEP_MINUTES
        if (start - grid_start) % step or (end - grid_start) % step:
            raise DomainError(f'Slot must align to {step}-minute windows')

        return cls(date=parsed_date, start_time=start_time, end_time=end_time)

    def windows(self) -> list[str]:
        """Start times of every grid window this slot covers"""
        step = settings.SLOT_STEP_MINUTES
        return [
            from_minutes(m)
            for m in range(to_minutes(self.start_time), to_minutes(self.end_time), step)
        ]

    def starts_at(self, tz: Any = None) -> datetime:
        return datetime.combine(self.date, time.fromisoformat(self.start_time), tzinfo=tz)

    def ends_at(self, tz: Any = None) -> datetime:
        return datetime.combine(self.date, time.fromisoformat(self.end_time), tzinfo=tz)

    def has_started(self, now: datetime) -> bool:
        return now >= self.starts_at(now.tzinfo)

    def has_ended(self, now: datetime) -> bool:
        return now >= self.ends_at(now.tzinfo)

    def ensure_bookable(self, now: datetime) -> None:
        if self.date < now.date():
            raise DomainError('Slot date cannot be in the past')
        if self.has_started(now):
            raise DomainError('Slot start time has already passed')

    def to_dict(self) -> dict[str, str]:
        return {
            'date': self.date.isoformat(),
            'start_time': self.start_time,
            'end_time': self.end_time,
        }
