"""Notification sink that only writes to the notification log."""

from fomowatch.config import AppConfig, Secrets
from fomowatch.logging_config import get_notification_logger
from fomowatch.models import NotificationMessage
from fomowatch.notifications.base import NotificationSink


class LogNotifier(NotificationSink):
    def __init__(self, config: AppConfig, secrets: Secrets):
        self._log = get_notification_logger()

    def send(self, message: NotificationMessage) -> None:
        self._log.info("notification.logged", **message.model_dump())
