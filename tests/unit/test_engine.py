"""Tests for engine wiring, preflight checks and lifecycle."""

import asyncio
from unittest.mock import patch

import pytest

from fomowatch.auth.privy import CredentialConfigError, CredentialRenewalError
from fomowatch.engine import WatchEngine
from fomowatch.feed.client import FeedFetchError
from fomowatch.models import FeedItem


class TestWatchEngine:
    @pytest.fixture
    def auth_cls(self):
        with patch("fomowatch.engine.PrivyAuthClient") as cls:
            cls.return_value.renew.return_value = ("fresh-token", 900.0)
            cls.return_value.configured = True
            yield cls

    @pytest.fixture
    def feed_cls(self):
        with patch("fomowatch.engine.FomoFeedClient") as cls:
            cls.return_value.fetch_snapshot.return_value = [FeedItem(id="a", type="large_buy")]
            yield cls

    def test_preflight_uses_fresh_credential(self, test_config, mock_secrets, auth_cls, feed_cls):
        engine = WatchEngine(test_config, mock_secrets)

        engine._preflight_checks()

        feed_cls.return_value.fetch_snapshot.assert_called_once_with("fresh-token")
        assert engine.credentials.renewal_count == 1

    def test_preflight_falls_back_to_static_token(self, test_config, mock_secrets, auth_cls, feed_cls):
        auth_cls.return_value.renew.side_effect = CredentialRenewalError("rejected", status_code=401)
        mock_secrets.fomo_api_token = "static-token"
        engine = WatchEngine(test_config, mock_secrets)

        engine._preflight_checks()

        feed_cls.return_value.fetch_snapshot.assert_called_once_with("static-token")
        assert engine.credentials.renewal_count == 1

    def test_preflight_without_any_token_skips_feed(self, test_config, mock_secrets, auth_cls, feed_cls):
        auth_cls.return_value.renew.side_effect = CredentialConfigError("missing")
        auth_cls.return_value.configured = False
        engine = WatchEngine(test_config, mock_secrets)

        engine._preflight_checks()

        feed_cls.return_value.fetch_snapshot.assert_not_called()

    def test_preflight_feed_failure_does_not_raise(self, test_config, mock_secrets, auth_cls, feed_cls):
        feed_cls.return_value.fetch_snapshot.side_effect = FeedFetchError("Upstream error 503", status_code=503)
        engine = WatchEngine(test_config, mock_secrets)

        engine._preflight_checks()

    def test_start_runs_auto_start_instances_until_shutdown(self, test_config, mock_secrets, auth_cls, feed_cls):
        engine = WatchEngine(test_config, mock_secrets)

        async def scenario():
            with patch.object(WatchEngine, "_register_signal_handlers"):
                task = asyncio.create_task(engine.start())
                for _ in range(200):
                    if engine.monitor.get_status().watermark == "a":
                        break
                    await asyncio.sleep(0.01)
                running = engine.monitor.get_status().running
                engine._request_shutdown()
                await asyncio.wait_for(task, timeout=5)
                return running

        assert asyncio.run(scenario()) is True

        status = engine.monitor.get_status()
        assert status.running is False
        assert status.watermark == "a"
        assert engine.monitor.instance_ids == ["default"]
