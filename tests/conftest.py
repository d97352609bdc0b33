"""Shared test fixtures."""

import pytest

from fomowatch.config import AppConfig, Secrets
from fomowatch.feed.base import FeedSource
from fomowatch.feed.client import FeedFetchError
from fomowatch.models import FeedItem


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFeed(FeedSource):
    """Returns queued snapshots in order; the last one repeats.

    A queued exception is raised instead of returned.
    """

    def __init__(self, *snapshots):
        self._snapshots = list(snapshots)
        self.calls = 0
        self.tokens: list[str] = []

    def push(self, snapshot) -> None:
        self._snapshots.append(snapshot)

    def fetch_snapshot(self, token: str) -> list[FeedItem]:
        self.calls += 1
        self.tokens.append(token)
        snapshot = self._snapshots.pop(0) if len(self._snapshots) > 1 else self._snapshots[0]
        if isinstance(snapshot, Exception):
            raise snapshot
        return [FeedItem(id=item_id, type="single_user_buy") for item_id in snapshot]


@pytest.fixture
def test_config() -> AppConfig:
    """Provide a test configuration with safe defaults."""
    return AppConfig(
        auth={
            "refresh_url": "https://auth.example.com/api/v1/sessions",
            "client_id": "client-test",
            "app_id": "app-test",
        },
        feed={
            "base_url": "https://feed.example.com",
            "limit": 50,
            "feed_types": ["single_user_buy", "single_user_sell"],
        },
        monitor={"poll_interval_seconds": 0.01, "auto_start": ["default"]},
        notifications={"provider": "log", "timezone": "UTC"},
        logging={
            "level": "DEBUG",
            "app_log": "/tmp/test_fomowatch.log",
            "notification_log": "/tmp/test_notifications.log",
        },
    )


@pytest.fixture
def mock_secrets() -> Secrets:
    """Provide fake secrets for unit tests."""
    return Secrets(
        _env_file=None,
        privy_refresh_token="test-refresh-token",
        privy_authorization_bearer="test-authorization",
        telegram_bot_token="123:test-bot-token",
        telegram_chat_id="-100123",
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetch_error() -> FeedFetchError:
    return FeedFetchError("Upstream error 502: bad gateway", status_code=502)


@pytest.fixture
def sample_item() -> FeedItem:
    """A realistic upstream sell event."""
    return FeedItem.from_raw(
        {
            "id": "feed-001",
            "type": "single_user_sell",
            "tokenAddress": "So11111111111111111111111111111111111111112",
            "body": {
                "ticker": "BONK",
                "price": 0.000023,
                "realizedPnlUsd": 1250.5,
                "totalPnlUsd": 4100.0,
                "userHandle": "degen_trader",
                "displayName": "Degen Trader",
            },
            "token": {"symbol": "BONK", "name": "Bonk"},
        }
    )


@pytest.fixture
def make_feed():
    """Factory for FakeFeed: ``make_feed(["b", "a"], ["c", "b", "a"])``."""
    return FakeFeed
