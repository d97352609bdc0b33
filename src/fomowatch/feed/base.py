"""Abstract base class for feed sources."""

from abc import ABC, abstractmethod

from fomowatch.models import FeedItem


class FeedSource(ABC):
    """Interface for fetching one snapshot of the activity feed."""

    @abstractmethod
    def fetch_snapshot(self, token: str) -> list[FeedItem]:
        """Return the current feed, newest first. Raises FeedFetchError on failure."""
        ...
