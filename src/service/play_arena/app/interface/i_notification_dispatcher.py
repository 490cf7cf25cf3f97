from abc import ABC, abstractmethod
from typing import Iterable


class INotificationDispatcher(ABC):
    """
    Fire-and-forget notification fan-out. Returning means "accepted for
    delivery"; delivery failures are logged and never reach the caller.
    """

    @abstractmethod
    def notify(self, *, identity: str, title: str, body: str) -> None:
        pass

    @abstractmethod
    def notify_many(self, *, identities: Iterable[str], title: str, body: str) -> None:
        """Dispatch to each recipient independently"""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Wait for in-flight deliveries (shutdown)"""
        pass
