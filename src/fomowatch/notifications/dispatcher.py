"""Fire-and-forget hand-off of new feed items to a notification sink."""

from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from fomowatch.config import NotificationConfig
from fomowatch.models import FeedItem
from fomowatch.notifications.base import NotificationError, NotificationSink
from fomowatch.notifications.formatting import build_message

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Queues deliveries on a single background worker so the poll loop never waits.

    One worker keeps messages in submission order. Delivery errors are logged
    and dropped; nothing is retried.
    """

    def __init__(self, sink: NotificationSink, config: NotificationConfig):
        self._sink = sink
        self._enabled = config.enabled
        self._skip_types = set(config.skip_types)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="notify")
        self._closed = False

    def submit(self, item: FeedItem, instance_id: str = "default") -> Future | None:
        """Queue ``item`` for delivery. Returns None when it is filtered out."""
        if not self._enabled or self._closed:
            logger.debug("notification.disabled", item_id=item.id, instance_id=instance_id)
            return None

        if item.type in self._skip_types:
            logger.debug(
                "notification.skipped_type",
                item_id=item.id,
                type=item.type,
                instance_id=instance_id,
            )
            return None

        return self._executor.submit(self._deliver, item, instance_id)

    def _deliver(self, item: FeedItem, instance_id: str) -> bool:
        try:
            self._sink.send(build_message(item))
            return True
        except NotificationError as e:
            logger.warning(
                "notification.failed",
                item_id=item.id,
                instance_id=instance_id,
                error=str(e),
            )
        except Exception as e:
            logger.error(
                "notification.error",
                item_id=item.id,
                instance_id=instance_id,
                error=str(e),
                exc_info=True,
            )
        return False

    def shutdown(self, wait: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait)
