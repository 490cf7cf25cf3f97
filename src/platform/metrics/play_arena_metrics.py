from collections.abc import Iterator
from contextlib import contextmanager
import time

from prometheus_client import Counter, Histogram


class PlayArenaMetrics:
    """
    Play Arena Core Metrics Collector

    Tracks booking operation outcomes, lease contention, cache effectiveness
    and notification delivery.
    """

    def __init__(self):
        # ========== Booking Operation Metrics ==========
        self.booking_operations = Counter(
            'play_arena_booking_operations_total',
            'Booking operations by outcome',
            ['operation', 'result'],  # result: success or the error class name
        )

        self.booking_operation_duration = Histogram(
            'play_arena_booking_operation_duration_seconds',
            'Booking operation processing time',
            ['operation'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        # ========== Reservation Lease Metrics ==========
        self.lease_attempts = Counter(
            'play_arena_lease_attempts_total',
            'Lease acquisition attempts',
            ['scope', 'result'],  # scope: slot/booking, result: acquired/contended
        )

        # ========== Cache Metrics ==========
        self.cache_lookups = Counter(
            'play_arena_cache_lookups_total',
            'Derived cache lookups',
            ['cache', 'result'],  # cache: availability/open_listing, result: hit/miss
        )

        # ========== Notification Metrics ==========
        self.notifications = Counter(
            'play_arena_notifications_total',
            'Notification delivery attempts',
            ['result'],  # result: sent/failed
        )

    # ========== Helper Methods ==========

    def record_booking_operation(self, *, operation: str, result: str, duration: float):
        self.booking_operations.labels(operation=operation, result=result).inc()
        self.booking_operation_duration.labels(operation=operation).observe(duration)

    @contextmanager
    def track_booking_operation(self, *, operation: str) -> Iterator[None]:
        start = time.perf_counter()
        result = 'success'
        try:
            yield
        except Exception as e:
            result = type(e).__name__
            raise
        finally:
            self.record_booking_operation(
                operation=operation, result=result, duration=time.perf_counter() - start
            )

    def record_lease_attempt(self, *, scope: str, acquired: bool):
        self.lease_attempts.labels(
            scope=scope, result='acquired' if acquired else 'contended'
        ).inc()

    def record_cache_lookup(self, *, cache: str, hit: bool):
        self.cache_lookups.labels(cache=cache, result='hit' if hit else 'miss').inc()

    def record_notification(self, *, sent: bool):
        self.notifications.labels(result='sent' if sent else 'failed').inc()


# Global metrics instance
metrics = PlayArenaMetrics()
