"""Tests for notification message formatting."""

from datetime import datetime, timezone

import pytest

from fomowatch.models import FeedItem
from fomowatch.notifications.formatting import (
    action_label,
    build_message,
    format_number,
    format_usd,
    render_text,
)


class TestNumberFormatting:
    def test_trailing_zeros_trimmed(self):
        assert format_number(12.5, 2) == "12.5"
        assert format_number(1234567.0) == "1,234,567"
        assert format_number(0.000123) == "0.000123"

    def test_usd(self):
        assert format_usd(12.5) == "$12.5"
        assert format_usd(12.5, signed=True) == "+$12.5"
        assert format_usd(-3.25, signed=True) == "-$3.25"


class TestActionLabel:
    @pytest.mark.parametrize(
        "item_type,label",
        [
            ("single_user_sell", "Sell all"),
            ("single_user_buy", "Buy"),
            ("multi_user_buy", "Buy"),
            ("large_sell", "Sell"),
            ("new_token_listing", "Trade"),
            ("", "Trade"),
        ],
    )
    def test_labels(self, item_type, label):
        assert action_label(item_type) == label


class TestBuildMessage:
    def test_sell_with_realized_pnl(self, sample_item):
        message = build_message(sample_item)

        assert message.item_id == "feed-001"
        assert message.user_name == "degen_trader"
        assert message.token_symbol == "BONK"
        assert message.action == "Sell all"
        assert message.amount_text == "PnL: +$1,250.5"
        assert message.realized_pnl_usd == 1250.5

    def test_buy_uses_price(self):
        item = FeedItem.from_raw({
            "id": "b1",
            "type": "single_user_buy",
            "body": {"displayName": "Whale", "price": 0.000023},
            "token": {"symbol": "WIF"},
        })
        message = build_message(item)

        assert message.user_name == "Whale"
        assert message.token_symbol == "WIF"
        assert message.action == "Buy"
        assert message.amount_text == "$0.000023"

    def test_fallbacks(self):
        message = build_message(FeedItem(id="x", type="manual"))

        assert message.user_name == "Unknown User"
        assert message.token_symbol == "Token"
        assert message.amount_text == ""

    def test_token_name_when_no_symbol(self):
        item = FeedItem.from_raw({"id": "x", "type": "large_buy", "token": {"name": "Bonk"}})
        assert build_message(item).token_symbol == "Bonk"


class TestRenderText:
    NOW = datetime(2026, 10, 18, 9, 30, 15, tzinfo=timezone.utc)

    def test_sell_message(self, sample_item):
        text = render_text(build_message(sample_item), self.NOW)

        assert "*User*: degen\\_trader" in text
        assert "*Token*: BONK" in text
        assert "*Action*: Sell all" in text
        assert "`So11111111111111111111111111111111111111112`" in text
        assert "🟢 *PnL*: +$1,250.5" in text
        assert text.endswith("*Time*: 2026-10-18 09:30:15")

    def test_losing_sell_is_red(self):
        item = FeedItem.from_raw({"id": "s", "type": "single_user_sell", "body": {"realizedPnlUsd": -42}})
        assert "🔴 *PnL*: -$42" in render_text(build_message(item), self.NOW)

    def test_profit_milestone_shows_total(self):
        item = FeedItem.from_raw({
            "id": "p",
            "type": "user_trade_profit_milestone",
            "body": {"totalPnlUsd": 10000},
        })
        assert "*Total profit*: +$10,000" in render_text(build_message(item), self.NOW)

    def test_buy_shows_amount(self):
        item = FeedItem.from_raw({"id": "b", "type": "large_buy", "body": {"price": 2}})
        text = render_text(build_message(item), self.NOW)

        assert "*Price*: $2" in text
        assert "*Amount*: $2" in text
