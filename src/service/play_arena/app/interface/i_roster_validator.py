from abc import ABC, abstractmethod
from typing import Any, Iterable


class IRosterValidator(ABC):
    @abstractmethod
    async def validate(self, *, identities: Iterable[str]) -> bool:
        """
        Check identities against the cached authoritative roster

        Returns:
            True only if every identity is on the roster

        Raises:
            DomainError: empty input
            DependencyUnavailableError: roster missing or store unreachable (fail closed)
        """
        pass

    @abstractmethod
    async def list_users(self) -> list[dict[str, Any]]:
        """
        Raises:
            NotFoundError: roster not cached
            DependencyUnavailableError: store unreachable
        """
        pass
