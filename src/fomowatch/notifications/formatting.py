"""Turn feed items into human-readable notification text."""

import re
from datetime import datetime

from fomowatch.models import FeedItem, FeedItemType, NotificationMessage

_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")


def format_number(value: float, max_fraction_digits: int = 6) -> str:
    """Thousands separators, at most ``max_fraction_digits`` decimals, no trailing zeros."""
    text = f"{value:,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_usd(value: float, max_fraction_digits: int = 2, signed: bool = False) -> str:
    amount = f"${format_number(abs(value), max_fraction_digits)}"
    if value < 0:
        return f"-{amount}"
    return f"+{amount}" if signed else amount


def action_label(item_type: str) -> str:
    lowered = item_type.lower()
    if item_type == FeedItemType.SINGLE_USER_SELL.value:
        return "Sell all"
    if "buy" in lowered:
        return "Buy"
    if "sell" in lowered:
        return "Sell"
    return "Trade"


def build_message(item: FeedItem) -> NotificationMessage:
    """Normalize a feed item into the fields a chat message needs."""
    body = item.body
    token = item.token

    user_name = (body and (body.user_handle or body.display_name)) or "Unknown User"
    token_symbol = (body and body.ticker) or (token and (token.symbol or token.name)) or "Token"
    price = body.price if body else None
    realized = body.realized_pnl_usd if body else None
    total = body.total_pnl_usd if body else None

    amount_text = ""
    if item.type == FeedItemType.SINGLE_USER_SELL.value and realized is not None:
        amount_text = f"PnL: {format_usd(realized, signed=True)}"
    elif price:
        amount_text = format_usd(price, max_fraction_digits=6)

    return NotificationMessage(
        item_id=item.id,
        type=item.type,
        user_name=user_name,
        token_symbol=token_symbol,
        action=action_label(item.type),
        amount_text=amount_text,
        token_address=item.token_address,
        price=price,
        realized_pnl_usd=realized,
        total_pnl_usd=total,
    )


def _escape(text: str) -> str:
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def render_text(message: NotificationMessage, now: datetime) -> str:
    """Telegram Markdown body for a message; ``now`` is shown as the event time."""
    lines = [
        "🚀 *New trade activity*",
        "",
        f"👤 *User*: {_escape(message.user_name)}",
        f"🪙 *Token*: {_escape(message.token_symbol)}",
        f"📊 *Action*: {message.action}",
    ]

    if message.token_address:
        lines.append(f"📍 *Address*: `{message.token_address}`")

    if message.price:
        lines.append(f"💰 *Price*: {format_usd(message.price, max_fraction_digits=6)}")

    if message.type == FeedItemType.SINGLE_USER_SELL.value and message.realized_pnl_usd is not None:
        marker = "🟢" if message.realized_pnl_usd >= 0 else "🔴"
        lines.append(f"{marker} *PnL*: {format_usd(message.realized_pnl_usd, signed=True)}")
    elif message.type == FeedItemType.USER_TRADE_PROFIT_MILESTONE.value and message.total_pnl_usd is not None:
        lines.append(f"🟢 *Total profit*: {format_usd(message.total_pnl_usd, signed=True)}")
    elif message.amount_text:
        lines.append(f"💵 *Amount*: {message.amount_text}")

    lines.append("")
    lines.append(f"⏰ *Time*: {now.strftime('%Y-%m-%d %H:%M:%S')}")
    return "\n".join(lines)
