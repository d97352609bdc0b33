"""Best-effort delivery of new feed items."""

from fomowatch.notifications.base import NotificationError, NotificationSink
from fomowatch.notifications.dispatcher import NotificationDispatcher
from fomowatch.notifications.formatting import build_message, render_text

__all__ = [
    "NotificationDispatcher",
    "NotificationError",
    "NotificationSink",
    "build_message",
    "render_text",
]
