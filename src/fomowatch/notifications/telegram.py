"""Telegram Bot API notification sink."""

from datetime import datetime
from zoneinfo import ZoneInfo

import requests

from fomowatch.config import AppConfig, Secrets
from fomowatch.logging_config import get_notification_logger
from fomowatch.models import NotificationMessage
from fomowatch.notifications.base import NotificationError, NotificationSink
from fomowatch.notifications.formatting import render_text

TELEGRAM_API_URL = "https://api.telegram.org"


class TelegramNotifier(NotificationSink):
    """Posts each message to one chat via sendMessage. One attempt, no retries."""

    def __init__(self, config: AppConfig, secrets: Secrets, session: requests.Session | None = None):
        self._config = config.notifications
        self._bot_token = secrets.telegram_bot_token
        self._chat_id = secrets.telegram_chat_id
        self._tz = ZoneInfo(self._config.timezone)
        self._session = session or requests.Session()
        self._log = get_notification_logger()

    def send(self, message: NotificationMessage) -> None:
        if not self._bot_token or not self._chat_id:
            raise NotificationError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID must both be set")

        payload = {
            "chat_id": self._chat_id,
            "text": render_text(message, datetime.now(self._tz)),
            "parse_mode": "Markdown",
            "disable_web_page_preview": True,
        }

        try:
            response = self._session.post(
                f"{TELEGRAM_API_URL}/bot{self._bot_token}/sendMessage",
                json=payload,
                timeout=self._config.timeout_seconds,
            )
        except requests.RequestException as e:
            # The exception text can contain the URL, and with it the bot token
            raise NotificationError(f"Telegram request failed: {type(e).__name__}") from None

        if not response.ok:
            raise NotificationError(
                f"Telegram push failed {response.status_code}: {response.text[:200]}"
            )

        self._log.info(
            "notification.sent",
            channel="telegram",
            item_id=message.item_id,
            type=message.type,
            token_symbol=message.token_symbol,
        )
