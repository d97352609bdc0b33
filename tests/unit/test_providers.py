"""Tests for provider factory."""

import pytest

from fomowatch.notifications.base import NotificationSink
from fomowatch.notifications.log import LogNotifier
from fomowatch.notifications.telegram import TelegramNotifier
from fomowatch.providers import create_notifier


class TestProviderFactory:
    def test_create_notifier_log(self, test_config, mock_secrets):
        notifier = create_notifier(test_config, mock_secrets)
        assert isinstance(notifier, NotificationSink)
        assert isinstance(notifier, LogNotifier)

    def test_create_notifier_telegram(self, test_config, mock_secrets):
        test_config.notifications.provider = "telegram"
        notifier = create_notifier(test_config, mock_secrets)
        assert isinstance(notifier, TelegramNotifier)

    def test_unknown_notifier_raises(self, test_config, mock_secrets):
        test_config.notifications.provider = "unknown"
        with pytest.raises(ValueError, match="Unknown notification provider"):
            create_notifier(test_config, mock_secrets)

    def test_log_notifier_send(self, test_config, mock_secrets, sample_item):
        from fomowatch.notifications.formatting import build_message

        LogNotifier(test_config, mock_secrets).send(build_message(sample_item))
