"""Verify connectivity to all external APIs."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from fomowatch.auth.privy import CredentialError, PrivyAuthClient
from fomowatch.config import AppConfig, Secrets, load_config
from fomowatch.feed.client import FeedFetchError, FomoFeedClient
from fomowatch.feed.narrative import NarrativeClient, NarrativeError
from fomowatch.models import FeedItem
from fomowatch.notifications.base import NotificationError
from fomowatch.notifications.formatting import build_message
from fomowatch.notifications.telegram import TelegramNotifier


def check_privy(config: AppConfig, secrets: Secrets) -> str | None:
    """Refresh the Privy session. Returns the bearer token to use for FOMO checks."""
    print("Checking Privy session refresh...")
    try:
        token, ttl = PrivyAuthClient(config, secrets).renew()
        print(f"  Token lifetime: {ttl:.0f}s")
        print("  Privy: OK")
        return token
    except CredentialError as e:
        print(f"  Privy: FAILED - {e}")
        if secrets.fomo_api_token:
            print("  Falling back to FOMO_API_TOKEN for the remaining checks")
            return secrets.fomo_api_token
        return None


def check_feed(config: AppConfig, token: str) -> bool:
    """Verify the activity feed and the auxiliary endpoints."""
    print("\nChecking FOMO API...")
    client = FomoFeedClient(config)
    try:
        snapshot = client.fetch_snapshot(token)
        print(f"  Feed items: {len(snapshot)}")
        if snapshot:
            print(f"  Newest: {snapshot[0].id} ({snapshot[0].type})")
        client.fetch_leaderboard(token)
        print("  Leaderboard: OK")
        client.fetch_trending_tokens(token)
        print("  Trending tokens: OK")
        print("  FOMO API: OK")
        return True
    except FeedFetchError as e:
        print(f"  FOMO API: FAILED - {e}")
        return False


def check_narrative(config: AppConfig, secrets: Secrets) -> bool:
    """Look up the narrative for a well-known token."""
    print("\nChecking narrative API...")
    address = "So11111111111111111111111111111111111111112"
    try:
        summary = NarrativeClient(config, secrets).fetch_narrative(address)
        print(f"  Summary: {summary[:80] if summary else '(none for this token)'}")
        print("  Narrative API: OK")
        return True
    except NarrativeError as e:
        print(f"  Narrative API: FAILED - {e}")
        return False


def check_telegram(config: AppConfig, secrets: Secrets) -> bool:
    """Send one test message to the configured chat."""
    print("\nChecking Telegram...")
    test_item = FeedItem(
        id="connectivity-check",
        type="manual",
        body={"displayName": "fomowatch", "ticker": "TEST"},
    )
    try:
        TelegramNotifier(config, secrets).send(build_message(test_item))
        print("  Telegram: OK")
        return True
    except NotificationError as e:
        print(f"  Telegram: FAILED - {e}")
        return False


def main():
    print("=" * 50)
    print("fomowatch - API Connectivity Check")
    print("=" * 50)

    config_path = Path("config/settings.yaml")
    config = load_config(config_path) if config_path.exists() else AppConfig()
    try:
        secrets = Secrets()
    except Exception as e:
        print(f"\nFailed to load .env file: {e}")
        sys.exit(1)

    token = check_privy(config, secrets)
    results = [
        token is not None,
        token is not None and check_feed(config, token),
        check_narrative(config, secrets),
        check_telegram(config, secrets),
    ]

    print("\n" + "=" * 50)
    if all(results):
        print("All checks passed. Ready to monitor.")
    else:
        print("Some checks failed. Fix the issues above.")
        sys.exit(1)


if __name__ == "__main__":
    main()
