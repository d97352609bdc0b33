"""Wires the credential cache, feed client, notifier and monitors together."""

import asyncio
import signal as signal_mod

import structlog

from fomowatch.auth.credentials import CredentialCache
from fomowatch.auth.privy import PrivyAuthClient
from fomowatch.config import AppConfig, Secrets
from fomowatch.feed.client import FeedFetchError, FomoFeedClient
from fomowatch.feed.tracker import FeedWatermarkTracker
from fomowatch.monitor import MonitorService
from fomowatch.notifications.dispatcher import NotificationDispatcher
from fomowatch.providers import create_notifier

logger = structlog.get_logger(__name__)


class WatchEngine:
    """Owns the shared credential cache and the monitor service for one process."""

    def __init__(self, config: AppConfig, secrets: Secrets):
        self._config = config
        self._auth = PrivyAuthClient(config, secrets)
        self._credentials = CredentialCache(
            self._auth,
            renew_margin_seconds=config.auth.renew_margin_seconds,
            static_token=secrets.fomo_api_token,
        )
        self._feed = FomoFeedClient(config)
        self._dispatcher = NotificationDispatcher(create_notifier(config, secrets), config.notifications)
        self._monitor = MonitorService(
            self._make_tracker,
            self._dispatcher,
            poll_interval_seconds=config.monitor.poll_interval_seconds,
        )
        self._running = False

    @property
    def monitor(self) -> MonitorService:
        return self._monitor

    @property
    def credentials(self) -> CredentialCache:
        return self._credentials

    def _make_tracker(self, instance_id: str) -> FeedWatermarkTracker:
        return FeedWatermarkTracker(instance_id, self._feed, self._credentials)

    async def start(self) -> None:
        """Start the configured monitors. Runs until shutdown signal received."""
        logger.info(
            "fomowatch.starting",
            feed_url=self._config.feed.base_url,
            interval_seconds=self._config.monitor.poll_interval_seconds,
            notifier=self._config.notifications.provider,
            instances=self._config.monitor.auto_start,
        )

        self._running = True
        self._register_signal_handlers()
        await asyncio.to_thread(self._preflight_checks)

        for instance_id in self._config.monitor.auto_start:
            await self._monitor.start(instance_id)

        try:
            while self._running:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            logger.info("fomowatch.cancelled")
        finally:
            await self._shutdown()

    def _register_signal_handlers(self) -> None:
        """Register SIGINT/SIGTERM handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()
        for sig in (signal_mod.SIGINT, signal_mod.SIGTERM):
            loop.add_signal_handler(sig, self._request_shutdown)

    def _preflight_checks(self) -> None:
        """Check auth and feed connectivity before the first tick. Logs only."""
        logger.info("fomowatch.preflight_starting")

        credential = self._credentials.get_valid_credential()
        fallback = self._credentials.static_token
        if credential is not None:
            logger.info("preflight.auth_ok")
        elif self._auth.configured:
            logger.error("preflight.auth_failed", fallback_token=fallback is not None)
        else:
            logger.warning("preflight.auth_not_configured", fallback_token=fallback is not None)

        token = credential.token if credential is not None else fallback
        if token is None:
            logger.error("preflight.feed_skipped", reason="no bearer token available")
            return

        try:
            snapshot = self._feed.fetch_snapshot(token)
            logger.info("preflight.feed_ok", items_available=len(snapshot))
        except FeedFetchError as e:
            logger.error("preflight.feed_failed", status_code=e.status_code, error=str(e))

    def _request_shutdown(self) -> None:
        """Signal the main loop to stop."""
        logger.info("fomowatch.shutdown_requested")
        self._running = False

    async def _shutdown(self) -> None:
        logger.info("fomowatch.shutting_down")
        await self._monitor.shutdown()
        await asyncio.to_thread(self._dispatcher.shutdown)
        for instance_id in self._monitor.instance_ids:
            status = self._monitor.get_status(instance_id)
            logger.info("fomowatch.final_status", **status.model_dump(mode="json"))
        logger.info("fomowatch.stopped")
