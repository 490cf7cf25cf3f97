"""
Open Booking Listing Cache Implementation

Listings are cached per (date or 'all', resource type or 'all'). A booking of
(date, type) can appear under four keys, so invalidation drops all four.
"""

from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any, Optional

import orjson
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.play_arena_metrics import metrics
from src.service.play_arena.app.interface.i_open_booking_listing_cache import (
    IOpenBookingListingCache,
)
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.driven_adapter.state.key_str_generator import (
    make_open_listing_key,
)


class OpenBookingListingCacheImpl(IOpenBookingListingCache):
    def __init__(
        self,
        *,
        redis_client: AsyncRedis,
        ttl_seconds: int = settings.AVAILABILITY_CACHE_TTL_SECONDS,
    ) -> None:
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    async def get_or_compute(
        self,
        *,
        slot_date: Optional[date],
        resource_type: Optional[ResourceType],
        compute: Callable[[], Awaitable[list[dict[str, Any]]]],
    ) -> list[dict[str, Any]]:
        key = make_open_listing_key(
            slot_date=slot_date, resource_type=resource_type.value if resource_type else None
        )

        try:
            cached = await self._redis.get(key)
        except RedisError as e:
            Logger.base.warning(f'⚠️ [OPEN-LISTING] Cache read failed for {key}: {e}')
            cached = None

        if cached is not None:
            metrics.record_cache_lookup(cache='open_listing', hit=True)
            return orjson.loads(cached)

        metrics.record_cache_lookup(cache='open_listing', hit=False)
        listing = await compute()

        try:
            await self._redis.set(key, orjson.dumps(listing), ex=self._ttl_seconds)
        except RedisError as e:
            Logger.base.warning(f'⚠️ [OPEN-LISTING] Cache write failed for {key}: {e}')

        return listing

    async def invalidate(self, *, slot_date: date, resource_type: ResourceType) -> None:
        keys = [
            make_open_listing_key(slot_date=d, resource_type=t)
            for d in (slot_date, None)
            for t in (resource_type.value, None)
        ]
        try:
            await self._redis.delete(*keys)
        except RedisError as e:
            Logger.base.warning(f'⚠️ [OPEN-LISTING] Invalidate failed, left to TTL: {e}')
