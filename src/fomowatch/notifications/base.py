"""Abstract base class for notification sinks."""

from abc import ABC, abstractmethod

from fomowatch.models import NotificationMessage


class NotificationError(Exception):
    """Raised when a notification could not be delivered."""


class NotificationSink(ABC):
    """Interface for pushing a feed event to a chat channel or log."""

    @abstractmethod
    def send(self, message: NotificationMessage) -> None:
        """Deliver one message. Raises NotificationError on failure."""
        ...
