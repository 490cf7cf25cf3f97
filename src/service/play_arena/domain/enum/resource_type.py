from enum import StrEnum

from src.platform.exception.exceptions import DomainError


class ResourceType(StrEnum):
    CARROM = 'carrom'
    CHESS = 'chess'
    FOOSBALL = 'foosball'
    TABLE_TENNIS = 'table_tennis'

    @classmethod
    def parse(cls, value: str) -> 'ResourceType':
        try:
            return cls(value)
        except ValueError:
            allowed = ', '.join(member.value for member in cls)
            raise DomainError(f'Invalid resource type "{value}". Allowed: {allowed}')
