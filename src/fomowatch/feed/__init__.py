"""Activity feed access and change detection."""

from fomowatch.feed.base import FeedSource
from fomowatch.feed.client import FeedFetchError, FomoFeedClient
from fomowatch.feed.narrative import NarrativeClient, NarrativeError
from fomowatch.feed.tracker import FeedWatermarkTracker, compute_new_items

__all__ = [
    "FeedFetchError",
    "FeedSource",
    "FeedWatermarkTracker",
    "FomoFeedClient",
    "NarrativeClient",
    "NarrativeError",
    "compute_new_items",
]
