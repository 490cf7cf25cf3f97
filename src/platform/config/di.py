"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.asyncpg_setting import get_asyncpg_pool
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.play_arena.domain.value_object.time_slot import arena_now
from src.service.play_arena.driven_adapter.message_queue.notification_dispatcher_impl import (
    NotificationDispatcherImpl,
)
from src.service.play_arena.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.play_arena.driven_adapter.repo.booking_query_repo_impl import (
    BookingQueryRepoImpl,
)
from src.service.play_arena.driven_adapter.repo.score_ledger_repo_impl import (
    ScoreLedgerRepoImpl,
)
from src.service.play_arena.driven_adapter.state.open_booking_listing_cache_impl import (
    OpenBookingListingCacheImpl,
)
from src.service.play_arena.driven_adapter.state.reservation_lock_manager_impl import (
    ReservationLockManagerImpl,
)
from src.service.play_arena.driven_adapter.state.roster_validator_impl import (
    RosterValidatorImpl,
)
from src.service.play_arena.driven_adapter.state.slot_availability_index_impl import (
    SlotAvailabilityIndexImpl,
)
from src.service.play_arena.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Process-owned clients (initialized in main.py lifespan before first use)
    redis_client = providers.Factory(kvrocks_client.get_client)
    pool_factory = providers.Object(get_asyncpg_pool)

    # Wall clock in the arena timezone (overridden in tests)
    clock = providers.Object(arena_now)

    # Repositories (PostgreSQL, authoritative)
    booking_command_repo = providers.Singleton(BookingCommandRepoImpl, pool_factory=pool_factory)
    booking_query_repo = providers.Singleton(BookingQueryRepoImpl, pool_factory=pool_factory)
    score_ledger_repo = providers.Singleton(ScoreLedgerRepoImpl, pool_factory=pool_factory)

    # Kvrocks-backed state
    roster_validator = providers.Singleton(RosterValidatorImpl, redis_client=redis_client)
    reservation_lock_manager = providers.Singleton(
        ReservationLockManagerImpl, redis_client=redis_client
    )
    slot_availability_index = providers.Singleton(
        SlotAvailabilityIndexImpl,
        redis_client=redis_client,
        booking_query_repo=booking_query_repo,
    )
    open_booking_listing_cache = providers.Singleton(
        OpenBookingListingCacheImpl, redis_client=redis_client
    )

    # Kafka notifications (fire-and-forget)
    notification_dispatcher = providers.Singleton(NotificationDispatcherImpl)

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth, redis_client=redis_client)


container = Container()
