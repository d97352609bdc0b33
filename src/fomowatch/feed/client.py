"""FOMO API client: activity feed, leaderboard and trending tokens."""

import requests
import structlog
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from fomowatch.config import AppConfig
from fomowatch.feed.base import FeedSource
from fomowatch.models import FeedItem

logger = structlog.get_logger(__name__)

MAX_ERROR_BODY_CHARS = 500


class FeedFetchError(Exception):
    """Raised when the upstream feed cannot be fetched or parsed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FomoFeedClient(FeedSource):
    """Reads the FOMO activity feed with a bearer token."""

    def __init__(self, config: AppConfig, session: requests.Session | None = None):
        self._config = config.feed
        self._session = session or requests.Session()

    def fetch_snapshot(self, token: str) -> list[FeedItem]:
        """Fetch the most recent feed items, newest first.

        A single attempt per call; the next poll is the retry.
        """
        params = [("limit", self._config.limit)]
        params.extend(("feedTypes", feed_type) for feed_type in self._config.feed_types)

        data = self._request("GET", "/feed", token, params=params)
        if not isinstance(data, dict):
            raise FeedFetchError("Feed response is not a JSON object")

        raw_items = data.get("list")
        if raw_items is None:
            return []
        if not isinstance(raw_items, list):
            raise FeedFetchError("Feed 'list' field is not an array")

        try:
            items = [FeedItem.from_raw(raw) for raw in raw_items]
        except (ValidationError, TypeError) as e:
            raise FeedFetchError(f"Malformed feed item: {e}") from e

        logger.debug("feed.snapshot_fetched", count=len(items))
        return items

    def fetch_leaderboard(self, token: str, window: str = "24h", limit: int = 100) -> dict:
        """Trader leaderboard for the given window."""
        return self._fetch_with_retry("GET", f"/v2/leaderboard/{window}", token, params={"limit": limit})

    def fetch_trending_tokens(self, token: str) -> dict:
        """Trending tokens. Upstream expects a POST without a body."""
        return self._fetch_with_retry("POST", "/proxy/trendingTokens", token)

    def _fetch_with_retry(self, method: str, path: str, token: str, params=None):
        try:
            return self._request_retrying(method, path, token, params)
        except requests.exceptions.Timeout as e:
            raise FeedFetchError(f"Request to {path} timed out after retries") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(requests.exceptions.Timeout),
        reraise=True,
    )
    def _request_retrying(self, method: str, path: str, token: str, params=None):
        """Retries up to 3 times on Timeout only, not on HTTP errors."""
        return self._request(method, path, token, params=params, wrap_timeout=False)

    def _request(self, method: str, path: str, token: str, params=None, wrap_timeout: bool = True):
        url = f"{self._config.base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {token}",
                },
                timeout=self._config.timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            if not wrap_timeout:
                raise
            raise FeedFetchError(f"Request to {path} timed out") from e
        except requests.RequestException as e:
            raise FeedFetchError(f"Request to {path} failed: {e}") from e

        if not response.ok:
            body = response.text[:MAX_ERROR_BODY_CHARS]
            raise FeedFetchError(
                f"Upstream error {response.status_code}: {body or 'No body'}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise FeedFetchError(f"Non-JSON response from {path}") from e
