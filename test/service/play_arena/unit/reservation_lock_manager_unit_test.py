"""
Unit tests for ReservationLockManagerImpl on FakeRedis

Test Focus:
1. Slot leases cover every window; partial acquisition is rolled back
2. Release is ownership-checked
3. booking_lease context manager: busy -> LeaseNotAcquiredError, releases only its own lease
4. Lease store errors fail closed
"""

import pytest
from uuid_utils import UUID

from src.platform.exception.exceptions import DependencyUnavailableError, LeaseNotAcquiredError
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import TimeSlot
from src.service.play_arena.driven_adapter.state.key_str_generator import (
    make_booking_lease_key,
    make_slot_lease_key,
)
from src.service.play_arena.driven_adapter.state.reservation_lock_manager_impl import (
    ReservationLockManagerImpl,
)
from test.service.play_arena.fakes import BOOKING_DAY, FakeRedis


BOOKING_ID = UUID('01890000-0000-7000-8000-000000000003')


def _slot_key(start_time: str) -> str:
    return make_slot_lease_key(
        resource_type='chess', slot_date=BOOKING_DAY, start_time=start_time
    )


@pytest.mark.unit
class TestSlotLeases:
    @pytest.mark.asyncio
    async def test_leases_every_covered_window_with_ttl(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        slot = TimeSlot.parse(slot_date=BOOKING_DAY, start_time='10:00', end_time='11:00')

        leases = await lock_manager.acquire_slot_leases(
            resource_type=ResourceType.CHESS, slot=slot
        )
        keys = [lease.key for lease in leases]

        assert keys == [_slot_key('10:00'), _slot_key('10:30')]
        assert all(redis.ttls[key] == 120 for key in keys)
        assert keys[0].endswith('play_arena:lease:slot:chess:2030-06-03:10:00')

    @pytest.mark.asyncio
    async def test_partial_acquisition_is_released(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        """
        Given: another request holds the 10:30 window
        When: a 10:00-11:00 slot is leased
        Then: LeaseNotAcquiredError, and the 10:00 lease taken on the way is released
        """
        redis.store[_slot_key('10:30')] = 'someone-else'
        slot = TimeSlot.parse(slot_date=BOOKING_DAY, start_time='10:00', end_time='11:00')

        with pytest.raises(LeaseNotAcquiredError):
            await lock_manager.acquire_slot_leases(resource_type=ResourceType.CHESS, slot=slot)

        assert _slot_key('10:00') not in redis.store
        assert redis.store[_slot_key('10:30')] == 'someone-else'

    @pytest.mark.asyncio
    async def test_only_requested_windows_are_leased(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        slot = TimeSlot.parse(slot_date=BOOKING_DAY, start_time='10:00', end_time='11:30')

        leases = await lock_manager.acquire_slot_leases(
            resource_type=ResourceType.CHESS, slot=slot, windows=['11:00']
        )

        assert [lease.key for lease in leases] == [_slot_key('11:00')]
        assert set(redis.store) == {_slot_key('11:00')}

    @pytest.mark.asyncio
    async def test_single_slot_lease_is_non_blocking(
        self, lock_manager: ReservationLockManagerImpl
    ) -> None:
        kwargs = dict(resource_type=ResourceType.CHESS, slot_date=BOOKING_DAY, start_time='12:00')

        assert await lock_manager.acquire_slot_lease(**kwargs) is not None
        assert await lock_manager.acquire_slot_lease(**kwargs) is None


@pytest.mark.unit
class TestRelease:
    @pytest.mark.asyncio
    async def test_release_deletes_own_lease(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        lease = await lock_manager.acquire_booking_lease(booking_id=BOOKING_ID)

        assert lease is not None
        assert await lock_manager.release(lease=lease) is True
        assert lease.key not in redis.store

    @pytest.mark.asyncio
    async def test_release_never_deletes_a_lease_taken_over_by_another_holder(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        """
        Given: our lease expired and another request acquired the same key
        When: we release
        Then: the other holder's lease survives
        """
        lease = await lock_manager.acquire_booking_lease(booking_id=BOOKING_ID)
        redis.expire_all()
        other = ReservationLockManagerImpl(redis_client=redis)  # type: ignore[arg-type]
        other_lease = await other.acquire_booking_lease(booking_id=BOOKING_ID)
        assert other_lease is not None

        assert await lock_manager.release(lease=lease) is False
        assert redis.store[other_lease.key] == other_lease.token

    @pytest.mark.asyncio
    async def test_release_after_expiry_is_false(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        lease = await lock_manager.acquire_slot_lease(
            resource_type=ResourceType.CHESS, slot_date=BOOKING_DAY, start_time='13:00'
        )
        redis.expire_all()

        assert await lock_manager.release(lease=lease) is False


@pytest.mark.unit
class TestBookingLease:
    @pytest.mark.asyncio
    async def test_busy_booking_raises_lease_not_acquired(
        self, lock_manager: ReservationLockManagerImpl
    ) -> None:
        async with lock_manager.booking_lease(booking_id=BOOKING_ID):
            with pytest.raises(LeaseNotAcquiredError, match='another request'):
                async with lock_manager.booking_lease(booking_id=BOOKING_ID):
                    pass

    @pytest.mark.asyncio
    async def test_expired_holder_exit_keeps_successor_lease_in_same_process(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        """
        Given: X holds the booking lease, it expires mid-mutation, and Y in the
            same process acquires it
        When: X leaves its block
        Then: Y's lease is still held, so a third request Z is turned away
        """
        key = make_booking_lease_key(booking_id=str(BOOKING_ID))

        async with lock_manager.booking_lease(booking_id=BOOKING_ID):
            redis.expire_all()
            y_lease = await lock_manager.acquire_booking_lease(booking_id=BOOKING_ID)
            assert y_lease is not None

        assert redis.store[key] == y_lease.token
        with pytest.raises(LeaseNotAcquiredError):
            async with lock_manager.booking_lease(booking_id=BOOKING_ID):
                pass

        assert await lock_manager.release(lease=y_lease) is True
        assert key not in redis.store

    @pytest.mark.asyncio
    async def test_lease_released_when_body_raises(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        with pytest.raises(RuntimeError):
            async with lock_manager.booking_lease(booking_id=BOOKING_ID):
                raise RuntimeError('boom')

        assert redis.store == {}
        async with lock_manager.booking_lease(booking_id=BOOKING_ID):
            pass

    @pytest.mark.asyncio
    async def test_lease_store_down_fails_closed(
        self, redis: FakeRedis, lock_manager: ReservationLockManagerImpl
    ) -> None:
        redis.down = True

        with pytest.raises(DependencyUnavailableError):
            async with lock_manager.booking_lease(booking_id=BOOKING_ID):
                pass
