"""Named feed monitor instances, each driven by its own periodic task."""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from fomowatch.feed.tracker import FeedWatermarkTracker
from fomowatch.models import FeedItem, MonitorStatus
from fomowatch.notifications.dispatcher import NotificationDispatcher

logger = structlog.get_logger(__name__)

DEFAULT_INSTANCE = "default"


@dataclass
class MonitorInstance:
    instance_id: str
    tracker: FeedWatermarkTracker
    running: bool = False
    started_at: Optional[float] = None
    stop_event: Optional[asyncio.Event] = None


class MonitorService:
    """Starts, stops and reports on independent feed monitors.

    Instances never share a tracker, so each has its own watermark and
    in-flight guard. A stopped instance keeps its tracker: restarting it does
    not re-announce items it already reported.
    """

    def __init__(
        self,
        tracker_factory: Callable[[str], FeedWatermarkTracker],
        dispatcher: NotificationDispatcher,
        *,
        poll_interval_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._tracker_factory = tracker_factory
        self._dispatcher = dispatcher
        self._interval = poll_interval_seconds
        self._clock = clock
        self._instances: dict[str, MonitorInstance] = {}
        self._tasks: set[asyncio.Task] = set()

    @property
    def instance_ids(self) -> list[str]:
        return list(self._instances)

    async def start(self, instance_id: str = DEFAULT_INSTANCE) -> bool:
        """Start polling for ``instance_id``. Returns False if it was already running."""
        instance = self._instances.get(instance_id)
        if instance is not None and instance.running:
            logger.info("monitor.already_running", instance_id=instance_id)
            return False

        if instance is None:
            instance = MonitorInstance(instance_id, self._tracker_factory(instance_id))
            self._instances[instance_id] = instance

        stop_event = asyncio.Event()
        instance.running = True
        instance.started_at = self._clock()
        instance.stop_event = stop_event

        task = asyncio.create_task(self._drive(instance, stop_event), name=f"monitor-{instance_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info(
            "monitor.started",
            instance_id=instance_id,
            interval_seconds=self._interval,
            watermark=instance.tracker.watermark,
        )
        return True

    def stop(self, instance_id: str = DEFAULT_INSTANCE) -> bool:
        """Stop scheduling polls for ``instance_id``. Returns False if it was not running.

        A poll already in flight finishes, but its items are not dispatched.
        """
        instance = self._instances.get(instance_id)
        if instance is None or not instance.running:
            return False

        instance.running = False
        instance.started_at = None
        if instance.stop_event is not None:
            instance.stop_event.set()

        logger.info("monitor.stopped", instance_id=instance_id, watermark=instance.tracker.watermark)
        return True

    def get_status(self, instance_id: str = DEFAULT_INSTANCE) -> MonitorStatus:
        instance = self._instances.get(instance_id)
        if instance is None:
            return MonitorStatus(instance_id=instance_id, running=False)

        last = instance.tracker.last_result
        uptime = 0.0
        if instance.running and instance.started_at is not None:
            uptime = max(self._clock() - instance.started_at, 0.0)

        return MonitorStatus(
            instance_id=instance_id,
            running=instance.running,
            watermark=instance.tracker.watermark,
            uptime_seconds=uptime,
            last_poll_at=last.polled_at if last else None,
            last_poll_failed=last.failed if last else False,
        )

    def latest_snapshot(self, instance_id: str = DEFAULT_INSTANCE) -> list[FeedItem]:
        instance = self._instances.get(instance_id)
        return instance.tracker.latest_snapshot if instance else []

    async def shutdown(self) -> None:
        """Stop every instance and wait for in-flight polls to finish."""
        for instance_id in list(self._instances):
            self.stop(instance_id)
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _drive(self, instance: MonitorInstance, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            await self._tick(instance, stop_event)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass

    async def _tick(self, instance: MonitorInstance, stop_event: asyncio.Event) -> None:
        try:
            result = await asyncio.to_thread(instance.tracker.poll)
        except Exception as e:
            logger.error(
                "monitor.tick_error",
                instance_id=instance.instance_id,
                error=str(e),
                exc_info=True,
            )
            return

        if stop_event.is_set():
            if result.new_items:
                logger.info(
                    "monitor.result_discarded",
                    instance_id=instance.instance_id,
                    new_count=len(result.new_items),
                )
            return

        try:
            for item in result.new_items:
                self._dispatcher.submit(item, instance.instance_id)
        except Exception as e:
            logger.error(
                "monitor.dispatch_error",
                instance_id=instance.instance_id,
                error=str(e),
                exc_info=True,
            )
