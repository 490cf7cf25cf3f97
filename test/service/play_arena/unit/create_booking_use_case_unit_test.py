"""
Unit tests for CreateBookingUseCase

Test Focus:
1. Happy path: booking + claims persisted, caches invalidated, everyone notified
2. Validation before side effects: nothing persisted, no lease left behind
3. Slot exclusivity: lease contention and claim re-check both end in a conflict
4. Leases released on any failure after acquisition
"""

from unittest.mock import AsyncMock

import orjson
import pytest

from src.platform.exception.exceptions import (
    ConflictError,
    DependencyUnavailableError,
    DomainError,
    LeaseNotAcquiredError,
)
from src.service.play_arena.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.play_arena.domain.enum.booking_mode import BookingMode
from src.service.play_arena.driven_adapter.state.key_str_generator import (
    make_availability_key,
    make_slot_lease_key,
)
from test.service.play_arena.fakes import (
    BOOKING_DAY,
    FakeRedis,
    InMemoryBookingStore,
    RecordingDispatcher,
)


DAY = BOOKING_DAY.isoformat()


def _lease_keys(redis: FakeRedis) -> list[str]:
    return [key for key in redis.store if ':lease:slot:' in key]


@pytest.mark.unit
class TestCreateBooking:
    @pytest.mark.asyncio
    async def test_private_booking_is_persisted_and_everyone_notified(
        self,
        create_use_case: CreateBookingUseCase,
        store: InMemoryBookingStore,
        dispatcher: RecordingDispatcher,
    ) -> None:
        booking = await create_use_case.create_booking(
            creator='aa111a',
            mode='private',
            resource_type='table_tennis',
            slot_date=DAY,
            start_time='12:00',
            end_time='13:00',
            location='Floor 1',
            invitees=['bb222b', 'cc333c'],
        )

        assert booking.mode == BookingMode.PRIVATE
        assert store.bookings[str(booking.id)] == booking
        assert set(store.claims) == {
            ('table_tennis', BOOKING_DAY, '12:00'),
            ('table_tennis', BOOKING_DAY, '12:30'),
        }
        assert dispatcher.recipients('Play Arena booking confirmed') == [
            'aa111a',
            'bb222b',
            'cc333c',
        ]

    @pytest.mark.asyncio
    async def test_leases_are_left_to_expire_after_success(
        self, create_use_case: CreateBookingUseCase, redis: FakeRedis
    ) -> None:
        await create_use_case.create_booking(
            creator='aa111a',
            mode='open',
            resource_type='chess',
            slot_date=DAY,
            start_time='10:00',
            end_time='10:30',
            location='Arena 1',
        )

        assert _lease_keys(redis) == [
            make_slot_lease_key(resource_type='chess', slot_date=BOOKING_DAY, start_time='10:00')
        ]

    @pytest.mark.asyncio
    async def test_availability_cache_is_invalidated(
        self, create_use_case: CreateBookingUseCase, redis: FakeRedis
    ) -> None:
        key = make_availability_key(resource_type='chess', slot_date=BOOKING_DAY)
        redis.store[key] = orjson.dumps([{'start_time': '10:00', 'end_time': '10:30'}])

        await create_use_case.create_booking(
            creator='aa111a',
            mode='open',
            resource_type='chess',
            slot_date=DAY,
            start_time='10:00',
            end_time='10:30',
            location='Arena 1',
        )

        assert key not in redis.store

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'overrides,message',
        [
            ({'resource_type': 'darts'}, 'Invalid resource type'),
            ({'mode': 'public'}, 'mode must be either'),
            ({'start_time': '10:15'}, '30-minute windows'),
            ({'slot_date': '2030-06-02'}, 'cannot be in the past'),
            ({'location': ''}, 'location is required'),
            ({'invitees': []}, 'between 1 and 3'),
        ],
    )
    async def test_invalid_input_has_no_side_effects(
        self,
        create_use_case: CreateBookingUseCase,
        store: InMemoryBookingStore,
        redis: FakeRedis,
        dispatcher: RecordingDispatcher,
        overrides: dict,
        message: str,
    ) -> None:
        request = dict(
            creator='aa111a',
            mode='private',
            resource_type='chess',
            slot_date=DAY,
            start_time='10:00',
            end_time='11:00',
            location='Floor 3',
            invitees=['bb222b'],
        ) | overrides

        with pytest.raises(DomainError, match=message):
            await create_use_case.create_booking(**request)

        assert store.bookings == {}
        assert redis.store == {}
        assert dispatcher.sent == []

    @pytest.mark.asyncio
    async def test_invalid_colleague_is_rejected_and_nothing_persisted(
        self,
        create_use_case: CreateBookingUseCase,
        store: InMemoryBookingStore,
        redis: FakeRedis,
    ) -> None:
        with pytest.raises(DomainError, match='not valid users'):
            await create_use_case.create_booking(
                creator='aa111a',
                mode='private',
                resource_type='chess',
                slot_date=DAY,
                start_time='10:00',
                end_time='11:00',
                location='Floor 3',
                invitees=['bb222b', 'zz999z'],
            )

        assert store.bookings == {}
        assert _lease_keys(redis) == []

    @pytest.mark.asyncio
    async def test_slot_being_reserved_elsewhere_is_a_conflict(
        self, create_use_case: CreateBookingUseCase, redis: FakeRedis
    ) -> None:
        redis.store[
            make_slot_lease_key(resource_type='chess', slot_date=BOOKING_DAY, start_time='10:30')
        ] = 'other-request'

        with pytest.raises(LeaseNotAcquiredError):
            await create_use_case.create_booking(
                creator='aa111a',
                mode='open',
                resource_type='chess',
                slot_date=DAY,
                start_time='10:00',
                end_time='11:00',
                location='Arena 1',
            )

        assert _lease_keys(redis) == [
            make_slot_lease_key(resource_type='chess', slot_date=BOOKING_DAY, start_time='10:30')
        ]

    @pytest.mark.asyncio
    async def test_overlap_with_persisted_booking_is_a_conflict_and_leases_released(
        self, create_use_case: CreateBookingUseCase, redis: FakeRedis
    ) -> None:
        """
        Given: a booking on 10:30-11:00 whose slot lease has already expired
        When: 10:00-11:00 is requested for the same resource
        Then: the claim re-check rejects it and the new leases are released
        """
        await create_use_case.create_booking(
            creator='aa111a',
            mode='open',
            resource_type='chess',
            slot_date=DAY,
            start_time='10:30',
            end_time='11:00',
            location='Arena 1',
        )
        redis.expire_all()

        with pytest.raises(ConflictError, match='already booked'):
            await create_use_case.create_booking(
                creator='bb222b',
                mode='open',
                resource_type='chess',
                slot_date=DAY,
                start_time='10:00',
                end_time='11:00',
                location='Arena 1',
            )

        assert _lease_keys(redis) == []

    @pytest.mark.asyncio
    async def test_other_resource_type_same_time_is_independent(
        self, create_use_case: CreateBookingUseCase, store: InMemoryBookingStore
    ) -> None:
        for resource_type in ('chess', 'carrom'):
            await create_use_case.create_booking(
                creator='aa111a',
                mode='open',
                resource_type=resource_type,
                slot_date=DAY,
                start_time='10:00',
                end_time='10:30',
                location='Arena 1',
            )

        assert len(store.bookings) == 2

    @pytest.mark.asyncio
    async def test_store_failure_releases_leases(
        self, create_use_case: CreateBookingUseCase, store: InMemoryBookingStore, redis: FakeRedis
    ) -> None:
        store.create = AsyncMock(side_effect=DependencyUnavailableError('db down'))  # type: ignore[method-assign]

        with pytest.raises(DependencyUnavailableError):
            await create_use_case.create_booking(
                creator='aa111a',
                mode='open',
                resource_type='chess',
                slot_date=DAY,
                start_time='10:00',
                end_time='11:00',
                location='Arena 1',
            )

        assert _lease_keys(redis) == []
