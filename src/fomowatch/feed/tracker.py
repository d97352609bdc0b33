"""Change detection over the newest-first activity feed."""

import threading

import structlog

from fomowatch.auth.credentials import CredentialCache
from fomowatch.feed.base import FeedSource
from fomowatch.feed.client import FeedFetchError
from fomowatch.models import FeedItem, PollOutcome, PollResult

logger = structlog.get_logger(__name__)


def compute_new_items(watermark: str | None, snapshot: list[FeedItem]) -> list[FeedItem]:
    """Items in ``snapshot`` that are newer than ``watermark``, newest first.

    Feed ids carry no order and the API has no "since" parameter, so the diff
    is positional: everything above the watermark's position, or the whole
    snapshot if the watermark has aged out of the window. An unset watermark
    yields nothing. Items reordered between polls are reported best-effort.
    """
    if watermark is None or not snapshot or snapshot[0].id == watermark:
        return []

    new_items = []
    for item in snapshot:
        if item.id == watermark:
            break
        new_items.append(item)
    return new_items


class FeedWatermarkTracker:
    """Remembers the newest feed item seen and reports what arrived since."""

    def __init__(self, instance_id: str, feed: FeedSource, credentials: CredentialCache):
        self._instance_id = instance_id
        self._feed = feed
        self._credentials = credentials
        self._watermark: str | None = None
        self._poll_lock = threading.Lock()
        self._latest_snapshot: list[FeedItem] = []
        self._last_result: PollResult | None = None

    @property
    def instance_id(self) -> str:
        return self._instance_id

    @property
    def watermark(self) -> str | None:
        return self._watermark

    @property
    def in_flight(self) -> bool:
        return self._poll_lock.locked()

    @property
    def latest_snapshot(self) -> list[FeedItem]:
        """Last non-empty snapshot fetched successfully."""
        return list(self._latest_snapshot)

    @property
    def last_result(self) -> PollResult | None:
        """Most recent poll that was not skipped."""
        return self._last_result

    def poll(self) -> PollResult:
        """Fetch the feed once and return the items that are new since the last poll.

        Returns immediately with a ``skipped`` outcome when another poll of this
        tracker is still running. Failures never move the watermark.
        """
        if not self._poll_lock.acquire(blocking=False):
            logger.debug("feed.poll_skipped", instance_id=self._instance_id)
            return PollResult(
                instance_id=self._instance_id,
                outcome=PollOutcome.SKIPPED,
                watermark=self._watermark,
            )

        try:
            result = self._poll_locked()
            self._last_result = result
            return result
        finally:
            self._poll_lock.release()

    def _poll_locked(self) -> PollResult:
        token = self._credentials.bearer_token()
        if token is None:
            logger.warning("feed.credential_unavailable", instance_id=self._instance_id)
            return self._result(PollOutcome.CREDENTIAL_UNAVAILABLE, error="credential unavailable")

        try:
            snapshot = self._feed.fetch_snapshot(token)
        except FeedFetchError as e:
            if e.status_code == 401:
                self._credentials.invalidate()
            logger.error(
                "feed.fetch_failed",
                instance_id=self._instance_id,
                status_code=e.status_code,
                error=str(e),
            )
            return self._result(PollOutcome.FETCH_FAILED, error=str(e))

        if not snapshot:
            logger.debug("feed.empty_snapshot", instance_id=self._instance_id)
            return self._result(PollOutcome.EMPTY_SNAPSHOT)

        self._latest_snapshot = snapshot
        head = snapshot[0].id

        if self._watermark is None:
            self._watermark = head
            logger.info("feed.watermark_initialized", instance_id=self._instance_id, watermark=head)
            return self._result(PollOutcome.INITIALIZED)

        if head == self._watermark:
            return self._result(PollOutcome.NO_CHANGE)

        new_items = compute_new_items(self._watermark, snapshot)
        previous = self._watermark
        self._watermark = head

        logger.info(
            "feed.poll_complete",
            instance_id=self._instance_id,
            snapshot_size=len(snapshot),
            new_count=len(new_items),
            watermark_aged_out=len(new_items) == len(snapshot),
            previous_watermark=previous,
            watermark=head,
        )
        return self._result(PollOutcome.NEW_ITEMS, new_items=new_items)

    def _result(self, outcome: PollOutcome, new_items=None, error: str | None = None) -> PollResult:
        return PollResult(
            instance_id=self._instance_id,
            outcome=outcome,
            new_items=new_items or [],
            watermark=self._watermark,
            error=error,
        )
