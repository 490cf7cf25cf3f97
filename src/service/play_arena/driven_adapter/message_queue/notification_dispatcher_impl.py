"""
Notification Dispatcher Implementation

Each notify() schedules its own asyncio task that publishes
{attuid, title, body} to the notification topic, keyed by recipient.
The request path never awaits delivery; failures are logged per recipient.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Iterable

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.event_publisher import publish_message
from src.platform.metrics.play_arena_metrics import metrics
from src.service.play_arena.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)


class NotificationDispatcherImpl(INotificationDispatcher):
    def __init__(
        self,
        *,
        topic: str = settings.NOTIFICATION_TOPIC,
        publish: Callable[..., Awaitable[Any]] = publish_message,
    ) -> None:
        self._topic = topic
        self._publish = publish
        # Strong references keep fire-and-forget tasks alive until done
        self._tasks: set[asyncio.Task[None]] = set()

    def notify(self, *, identity: str, title: str, body: str) -> None:
        task = asyncio.create_task(self._deliver(identity=identity, title=title, body=body))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def notify_many(self, *, identities: Iterable[str], title: str, body: str) -> None:
        for identity in dict.fromkeys(identities):
            self.notify(identity=identity, title=title, body=body)

    async def _deliver(self, *, identity: str, title: str, body: str) -> None:
        try:
            await self._publish(
                topic=self._topic,
                key=identity,
                payload={'attuid': identity, 'title': title, 'body': body},
            )
        except Exception as e:
            metrics.record_notification(sent=False)
            Logger.base.warning(f'⚠️ [NOTIFY] Delivery to {identity} failed: {e}')
            return
        metrics.record_notification(sent=True)
        Logger.base.debug(f'📨 [NOTIFY] Accepted "{title}" for {identity}')

    async def aclose(self) -> None:
        if self._tasks:
            Logger.base.info(f'📨 [NOTIFY] Waiting for {len(self._tasks)} in-flight deliveries')
            await asyncio.gather(*self._tasks, return_exceptions=True)
