"""
Slot Availability Index Implementation

Cache-aside view of free grid windows per (resource type, date):
- Hit: cached JSON list
- Miss: full grid minus windows claimed in PostgreSQL, stored with TTL

The cache is an accelerator only. Redis errors degrade to a direct store read
on the read path and to TTL expiry on the invalidation path.
"""

from datetime import date

import orjson
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.play_arena_metrics import metrics
from src.service.play_arena.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.play_arena.app.interface.i_slot_availability_index import (
    ISlotAvailabilityIndex,
)
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.domain.value_object.time_slot import grid_windows
from src.service.play_arena.driven_adapter.state.key_str_generator import (
    make_availability_key,
)


class SlotAvailabilityIndexImpl(ISlotAvailabilityIndex):
    def __init__(
        self,
        *,
        redis_client: AsyncRedis,
        booking_query_repo: IBookingQueryRepo,
        ttl_seconds: int = settings.AVAILABILITY_CACHE_TTL_SECONDS,
    ) -> None:
        self._redis = redis_client
        self._booking_query_repo = booking_query_repo
        self._ttl_seconds = ttl_seconds

    @Logger.io
    async def compute_slots(
        self, *, resource_type: ResourceType, slot_date: date
    ) -> list[dict[str, str]]:
        key = make_availability_key(resource_type=resource_type.value, slot_date=slot_date)

        try:
            cached = await self._redis.get(key)
        except RedisError as e:
            Logger.base.warning(f'⚠️ [AVAILABILITY] Cache read failed for {key}: {e}')
            cached = None

        if cached is not None:
            metrics.record_cache_lookup(cache='availability', hit=True)
            return orjson.loads(cached)

        metrics.record_cache_lookup(cache='availability', hit=False)
        claimed = await self._booking_query_repo.list_claimed_windows(
            resource_type=resource_type, slot_date=slot_date
        )
        free = [window.to_dict() for window in grid_windows() if window.start_time not in claimed]

        try:
            await self._redis.set(key, orjson.dumps(free), ex=self._ttl_seconds)
        except RedisError as e:
            Logger.base.warning(f'⚠️ [AVAILABILITY] Cache write failed for {key}: {e}')

        return free

    async def invalidate(self, *, resource_type: ResourceType, slot_date: date) -> None:
        key = make_availability_key(resource_type=resource_type.value, slot_date=slot_date)
        try:
            await self._redis.delete(key)
        except RedisError as e:
            Logger.base.warning(f'⚠️ [AVAILABILITY] Invalidate failed for {key}, left to TTL: {e}')
            return
        Logger.base.debug(f'🧹 [AVAILABILITY] Invalidated {key}')
