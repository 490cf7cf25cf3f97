from enum import StrEnum

from src.platform.exception.exceptions import DomainError


class BookingMode(StrEnum):
    PRIVATE = 'private'  # invite-only, participants fixed by the creator
    OPEN = 'open'  # joinable by any valid user until full

    @classmethod
    def parse(cls, value: str) -> 'BookingMode':
        try:
            return cls(value)
        except ValueError:
            raise DomainError('mode must be either "private" or "open"')
