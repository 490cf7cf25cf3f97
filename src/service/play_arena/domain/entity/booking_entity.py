from datetime import date, datetime
from typing import Any, List, Optional

import attrs
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import ConflictError, DomainError, ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.play_arena.domain.enum.booking_mode import BookingMode
from src.service.play_arena.domain.enum.booking_phase import BookingPhase
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import TimeSlot


@attrs.define(frozen=True)
class Participant:
    identity: str
    checked_in: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {'identity': self.identity, 'checked_in': self.checked_in}


def _validate_location(location: str) -> str:
    location = (location or '').strip()
    if not location:
        raise DomainError('location is required')
    if len(location) > settings.MAX_LOCATION_LENGTH:
        raise DomainError(f'location must be at most {settings.MAX_LOCATION_LENGTH} characters')
    return location


def _validate_invitees(*, mode: BookingMode, creator: str, invitees: List[str]) -> List[str]:
    if mode == BookingMode.OPEN:
        if invitees:
            raise DomainError('Open bookings start with the creator only')
        return []

    max_invitees = settings.MAX_PARTICIPANTS - 1
    if not 1 <= len(invitees) <= max_invitees:
        raise DomainError(f'Private bookings need between 1 and {max_invitees} colleagues')
    if creator in invitees:
        raise DomainError('The creator cannot invite themselves')
    if len(set(invitees)) != len(invitees):
        raise DomainError('Duplicate participants are not allowed')
    return list(invitees)


@attrs.define
class Booking:
    id: UUID
    resource_type: ResourceType
    mode: BookingMode
    slot: TimeSlot
    location: str
    created_by: str
    participants: List[Participant] = attrs.field(factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        mode: BookingMode,
        resource_type: ResourceType,
        slot: TimeSlot,
        location: str,
        created_by: str,
        invitees: List[str],
        now: datetime,
    ) -> 'Booking':
        """
        Open mode starts with exactly the creator; private mode with the creator
        plus 1..3 colleagues.

        Raises:
            DomainError: slot in the past, bad location or participant bounds
        """
        slot.ensure_bookable(now)
        location = _validate_location(location)
        invitees = _validate_invitees(mode=mode, creator=created_by, invitees=invitees)

        return cls(
            id=id,
            resource_type=resource_type,
            mode=mode,
            slot=slot,
            location=location,
            created_by=created_by,
            participants=[Participant(identity=created_by)]
            + [Participant(identity=identity) for identity in invitees],
            created_at=now,
            updated_at=now,
        )

    @property
    def participant_ids(self) -> List[str]:
        return [p.identity for p in self.participants]

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= settings.MAX_PARTICIPANTS

    def is_participant(self, identity: str) -> bool:
        return identity in self.participant_ids

    def phase(self, now: datetime) -> BookingPhase:
        if self.slot.has_ended(now):
            return BookingPhase.COMPLETED
        if self.slot.has_started(now):
            return BookingPhase.IN_PROGRESS
        return BookingPhase.UPCOMING

    def ensure_creator(self, identity: str, *, action: str) -> None:
        if identity != self.created_by:
            raise ForbiddenError(f'Only the booking creator can {action}')

    def ensure_not_started(self, now: datetime, *, action: str) -> None:
        if self.slot.has_started(now):
            raise DomainError(f'Cannot {action} a booking whose slot has already started')

    @Logger.io
    def join(self, *, identity: str, now: datetime) -> 'Booking':
        """
        Raises:
            DomainError: private booking or slot already started
            ConflictError: caller already a participant or booking full
        """
        if self.mode != BookingMode.OPEN:
            raise DomainError('Only open bookings can be joined')
        self.ensure_not_started(now, action='join')
        if self.is_participant(identity):
            raise ConflictError('You are already a participant of this booking')
        if self.is_full:
            raise ConflictError('Booking is full')

        return attrs.evolve(
            self,
            participants=[*self.participants, Participant(identity=identity)],
            updated_at=now,
        )

    @Logger.io
    def check_in(self, *, identity: str, now: datetime) -> 'Booking':
        """
        Check-in is allowed while the slot is in progress.

        Raises:
            DomainError: slot not started yet or already ended
            ForbiddenError: caller is not a participant
            ConflictError: caller already checked in
        """
        if not self.slot.has_started(now):
            raise DomainError('Check-in opens when the slot starts')
        if self.slot.has_ended(now):
            raise DomainError('Check-in closed: the slot has already ended')
        if not self.is_participant(identity):
            raise ForbiddenError('Only participants can check in')

        participants = []
        for participant in self.participants:
            if participant.identity == identity:
                if participant.checked_in:
                    raise ConflictError('You have already checked in')
                participant = attrs.evolve(participant, checked_in=True)
            participants.append(participant)

        return attrs.evolve(self, participants=participants, updated_at=now)

    @Logger.io
    def update(
        self,
        *,
        now: datetime,
        resource_type: Optional[ResourceType] = None,
        slot: Optional[TimeSlot] = None,
        location: Optional[str] = None,
        invitees: Optional[List[str]] = None,
    ) -> 'Booking':
        """
        Apply the creator's changes. Fields left as None are unchanged.
        Retained participants keep their check-in flag.

        Raises:
            DomainError: invitees on an open booking, bad bounds, bad location,
                new slot not bookable
        """
        changes: dict[str, Any] = {'updated_at': now}

        if resource_type is not None:
            changes['resource_type'] = resource_type

        if slot is not None:
            if slot != self.slot:
                slot.ensure_bookable(now)
            changes['slot'] = slot

        if location is not None:
            changes['location'] = _validate_location(location)

        if invitees is not None:
            if self.mode != BookingMode.PRIVATE:
                raise DomainError('Participants can only be changed on private bookings')
            invitees = _validate_invitees(
                mode=self.mode, creator=self.created_by, invitees=invitees
            )
            existing = {p.identity: p for p in self.participants}
            changes['participants'] = [existing[self.created_by]] + [
                existing.get(identity, Participant(identity=identity)) for identity in invitees
            ]

        return attrs.evolve(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': str(self.id),
            'resource_type': self.resource_type.value,
            'mode': self.mode.value,
            'slot': self.slot.to_dict(),
            'location': self.location,
            'created_by': self.created_by,
            'participants': [p.to_dict() for p in self.participants],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Booking':
        slot = data['slot']
        return cls(
            id=UUID(data['id']),
            resource_type=ResourceType(data['resource_type']),
            mode=BookingMode(data['mode']),
            slot=TimeSlot(
                date=date.fromisoformat(slot['date']),
                start_time=slot['start_time'],
                end_time=slot['end_time'],
            ),
            location=data['location'],
            created_by=data['created_by'],
            participants=[
                Participant(identity=p['identity'], checked_in=p['checked_in'])
                for p in data['participants']
            ],
            created_at=datetime.fromisoformat(data['created_at']) if data['created_at'] else None,
            updated_at=datetime.fromisoformat(data['updated_at']) if data['updated_at'] else None,
        )
