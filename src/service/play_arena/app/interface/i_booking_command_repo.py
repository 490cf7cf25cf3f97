"""
Booking Command Repository Interface

Authoritative writes. Every write keeps the booking row and its per-window
slot claims in one transaction.
"""

from abc import ABC, abstractmethod

from uuid_utils import UUID

from src.service.play_arena.domain.entity.booking_entity import Booking


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        """
        Insert booking and claim every grid window its slot covers

        Raises:
            ConflictError: a window is already claimed by another booking
        """
        pass

    @abstractmethod
    async def update(self, *, booking: Booking, rewrite_claims: bool) -> Booking:
        """
        Persist booking changes

        Args:
            booking: Booking entity with new state
            rewrite_claims: Replace the slot claims (resource type or slot changed)

        Raises:
            NotFoundError: booking was deleted meanwhile
            ConflictError: a new window is already claimed by another booking
        """
        pass

    @abstractmethod
    async def delete(self, *, booking_id: UUID) -> bool:
        """Hard-delete booking (claims cascade). Returns False if already gone."""
        pass
