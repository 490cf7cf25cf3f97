"""
Notification messages emitted by booking lifecycle events.

Each builder returns the (title, body) pair handed to the notification
dispatcher; recipients are chosen by the use case.
"""

import attrs

from src.service.play_arena.domain.entity.booking_entity import Booking


@attrs.define(frozen=True)
class NotificationMessage:
    title: str
    body: str


def _describe(booking: Booking) -> str:
    slot = booking.slot
    game = booking.resource_type.value.replace('_', ' ')
    return (
        f'{game} on {slot.date.isoformat()} {slot.start_time}-{slot.end_time} '
        f'at {booking.location}'
    )


def booking_created(booking: Booking) -> NotificationMessage:
    return NotificationMessage(
        title='Play Arena booking confirmed',
        body=f'{booking.created_by} booked {_describe(booking)}.',
    )


def participant_joined(booking: Booking, *, identity: str) -> NotificationMessage:
    return NotificationMessage(
        title='Player joined your game',
        body=f'{identity} joined {_describe(booking)}.',
    )


def joined_confirmation(booking: Booking) -> NotificationMessage:
    return NotificationMessage(
        title='You joined a game',
        body=f'You are in for {_describe(booking)}.',
    )


def checked_in(booking: Booking) -> NotificationMessage:
    return NotificationMessage(
        title='Checked in',
        body=f'You checked in for {_describe(booking)}. +1 point recorded.',
    )


def booking_updated(booking: Booking) -> NotificationMessage:
    return NotificationMessage(
        title='Play Arena booking updated',
        body=f'Your booking is now {_describe(booking)}.',
    )


def booking_cancelled(booking: Booking) -> NotificationMessage:
    return NotificationMessage(
        title='Play Arena booking cancelled',
        body=f'{booking.created_by} cancelled {_describe(booking)}.',
    )


def final_scores_submitted(booking: Booking) -> NotificationMessage:
    return NotificationMessage(
        title='Final scores posted',
        body=f'Scores are in for {_describe(booking)}.',
    )
