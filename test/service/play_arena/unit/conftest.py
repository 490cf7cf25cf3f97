"""
Conftest for play arena unit tests - no external dependencies.

Real lease manager and caches run on FakeRedis; bookings and scores live in
in-memory stores; the clock is fixed at 08:00 UTC on BOOKING_DAY.
"""

import pytest

from src.service.play_arena.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.play_arena.app.command.check_in_use_case import CheckInUseCase
from src.service.play_arena.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.play_arena.app.command.join_booking_use_case import JoinBookingUseCase
from src.service.play_arena.app.command.submit_final_scores_use_case import (
    SubmitFinalScoresUseCase,
)
from src.service.play_arena.app.command.update_booking_use_case import UpdateBookingUseCase
from src.service.play_arena.app.query.aggregate_user_scores_use_case import (
    AggregateUserScoresUseCase,
)
from src.service.play_arena.app.query.get_available_slots_use_case import (
    GetAvailableSlotsUseCase,
)
from src.service.play_arena.app.query.get_booking_scores_use_case import (
    GetBookingScoresUseCase,
)
from src.service.play_arena.app.query.get_booking_use_case import GetBookingUseCase
from src.service.play_arena.app.query.list_my_bookings_use_case import ListMyBookingsUseCase
from src.service.play_arena.app.query.list_open_bookings_use_case import (
    ListOpenBookingsUseCase,
)
from src.service.play_arena.driven_adapter.state.open_booking_listing_cache_impl import (
    OpenBookingListingCacheImpl,
)
from src.service.play_arena.driven_adapter.state.reservation_lock_manager_impl import (
    ReservationLockManagerImpl,
)
from src.service.play_arena.driven_adapter.state.slot_availability_index_impl import (
    SlotAvailabilityIndexImpl,
)
from test.service.play_arena.fakes import (
    BOOKING_DAY,
    ROSTER,
    FakeRedis,
    FixedClock,
    InMemoryBookingStore,
    InMemoryScoreLedger,
    RecordingDispatcher,
    StaticRoster,
    at,
)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(at(BOOKING_DAY, '08:00'))


@pytest.fixture
def redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def ledger(store: InMemoryBookingStore) -> InMemoryScoreLedger:
    return InMemoryScoreLedger(store)


@pytest.fixture
def roster() -> StaticRoster:
    return StaticRoster(ROSTER)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def lock_manager(redis: FakeRedis) -> ReservationLockManagerImpl:
    return ReservationLockManagerImpl(redis_client=redis)  # type: ignore[arg-type]


@pytest.fixture
def availability_index(
    redis: FakeRedis, store: InMemoryBookingStore
) -> SlotAvailabilityIndexImpl:
    return SlotAvailabilityIndexImpl(
        redis_client=redis,  # type: ignore[arg-type]
        booking_query_repo=store,
    )


@pytest.fixture
def listing_cache(redis: FakeRedis) -> OpenBookingListingCacheImpl:
    return OpenBookingListingCacheImpl(redis_client=redis)  # type: ignore[arg-type]


@pytest.fixture
def create_use_case(
    store, roster, lock_manager, availability_index, listing_cache, dispatcher, clock
) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        booking_command_repo=store,
        booking_query_repo=store,
        roster_validator=roster,
        lock_manager=lock_manager,
        availability_index=availability_index,
        listing_cache=listing_cache,
        notification_dispatcher=dispatcher,
        clock=clock,
    )


@pytest.fixture
def join_use_case(
    store, roster, lock_manager, listing_cache, dispatcher, clock
) -> JoinBookingUseCase:
    return JoinBookingUseCase(
        booking_command_repo=store,
        booking_query_repo=store,
        roster_validator=roster,
        lock_manager=lock_manager,
        listing_cache=listing_cache,
        notification_dispatcher=dispatcher,
        clock=clock,
    )


@pytest.fixture
def check_in_use_case(store, ledger, lock_manager, dispatcher, clock) -> CheckInUseCase:
    return CheckInUseCase(
        booking_query_repo=store,
        score_ledger_repo=ledger,
        lock_manager=lock_manager,
        notification_dispatcher=dispatcher,
        clock=clock,
    )


@pytest.fixture
def update_use_case(
    store, roster, lock_manager, availability_index, listing_cache, dispatcher, clock
) -> UpdateBookingUseCase:
    return UpdateBookingUseCase(
        booking_command_repo=store,
        booking_query_repo=store,
        roster_validator=roster,
        lock_manager=lock_manager,
        availability_index=availability_index,
        listing_cache=listing_cache,
        notification_dispatcher=dispatcher,
        clock=clock,
    )


@pytest.fixture
def cancel_use_case(
    store, lock_manager, availability_index, listing_cache, dispatcher, clock
) -> CancelBookingUseCase:
    return CancelBookingUseCase(
        booking_command_repo=store,
        booking_query_repo=store,
        lock_manager=lock_manager,
        availability_index=availability_index,
        listing_cache=listing_cache,
        notification_dispatcher=dispatcher,
        clock=clock,
    )


@pytest.fixture
def submit_scores_use_case(store, ledger, dispatcher, clock) -> SubmitFinalScoresUseCase:
    return SubmitFinalScoresUseCase(
        booking_query_repo=store,
        score_ledger_repo=ledger,
        notification_dispatcher=dispatcher,
        clock=clock,
    )


@pytest.fixture
def get_booking_use_case(store, clock) -> GetBookingUseCase:
    return GetBookingUseCase(booking_query_repo=store, clock=clock)


@pytest.fixture
def list_my_bookings_use_case(store, clock) -> ListMyBookingsUseCase:
    return ListMyBookingsUseCase(booking_query_repo=store, clock=clock)


@pytest.fixture
def list_open_bookings_use_case(store, listing_cache, clock) -> ListOpenBookingsUseCase:
    return ListOpenBookingsUseCase(
        booking_query_repo=store, listing_cache=listing_cache, clock=clock
    )


@pytest.fixture
def available_slots_use_case(availability_index, clock) -> GetAvailableSlotsUseCase:
    return GetAvailableSlotsUseCase(availability_index=availability_index, clock=clock)


@pytest.fixture
def booking_scores_use_case(ledger) -> GetBookingScoresUseCase:
    return GetBookingScoresUseCase(score_ledger_repo=ledger)


@pytest.fixture
def aggregate_scores_use_case(ledger) -> AggregateUserScoresUseCase:
    return AggregateUserScoresUseCase(score_ledger_repo=ledger)
