"""Tests for the Telegram notification sink."""

from unittest.mock import MagicMock

import pytest
import requests

from fomowatch.notifications.base import NotificationError
from fomowatch.notifications.formatting import build_message
from fomowatch.notifications.telegram import TelegramNotifier


class TestTelegramNotifier:
    @pytest.fixture
    def session(self):
        session = MagicMock()
        session.post.return_value = MagicMock(ok=True, status_code=200)
        return session

    @pytest.fixture
    def notifier(self, test_config, mock_secrets, session):
        return TelegramNotifier(test_config, mock_secrets, session=session)

    def test_send(self, notifier, session, sample_item):
        notifier.send(build_message(sample_item))

        args, kwargs = session.post.call_args
        assert args[0] == "https://api.telegram.org/bot123:test-bot-token/sendMessage"
        assert kwargs["json"]["chat_id"] == "-100123"
        assert kwargs["json"]["parse_mode"] == "Markdown"
        assert kwargs["json"]["disable_web_page_preview"] is True
        assert "BONK" in kwargs["json"]["text"]
        assert kwargs["timeout"] == 10.0

    @pytest.mark.parametrize("missing", ["telegram_bot_token", "telegram_chat_id"])
    def test_missing_config(self, test_config, mock_secrets, session, sample_item, missing):
        setattr(mock_secrets, missing, "")
        notifier = TelegramNotifier(test_config, mock_secrets, session=session)

        with pytest.raises(NotificationError):
            notifier.send(build_message(sample_item))
        session.post.assert_not_called()

    def test_rejected(self, notifier, session, sample_item):
        session.post.return_value = MagicMock(ok=False, status_code=400, text="Bad Request: chat not found")

        with pytest.raises(NotificationError, match="400"):
            notifier.send(build_message(sample_item))

    def test_transport_error_hides_bot_token(self, notifier, session, sample_item):
        session.post.side_effect = requests.exceptions.ConnectionError(
            "https://api.telegram.org/bot123:test-bot-token/sendMessage unreachable"
        )

        with pytest.raises(NotificationError) as exc_info:
            notifier.send(build_message(sample_item))
        assert "test-bot-token" not in str(exc_info.value)
