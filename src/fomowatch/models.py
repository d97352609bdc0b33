"""Domain models for the fomowatch feed monitor."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class FeedItemType(str, Enum):
    SINGLE_USER_BUY = "single_user_buy"
    SINGLE_USER_SELL = "single_user_sell"
    USER_TRADE_PROFIT_MILESTONE = "user_trade_profit_milestone"
    LARGE_BUY = "large_buy"
    LARGE_SELL = "large_sell"
    MANUAL = "manual"
    MULTI_USER_BUY = "multi_user_buy"
    MULTI_USER_SELL = "multi_user_sell"
    NEW_TOKEN_LISTING = "new_token_listing"
    PRICE_SINCE_LISTING = "price_since_listing"


class PollOutcome(str, Enum):
    INITIALIZED = "initialized"
    NO_CHANGE = "no_change"
    NEW_ITEMS = "new_items"
    EMPTY_SNAPSHOT = "empty_snapshot"
    SKIPPED = "skipped"
    CREDENTIAL_UNAVAILABLE = "credential_unavailable"
    FETCH_FAILED = "fetch_failed"


class Credential(BaseModel):
    """A bearer token and the instant (clock seconds) after which it is stale.

    ``expires_at`` of None means the expiry is unknown and the credential is
    treated as expired.
    """

    token: str
    expires_at: Optional[float] = None

    model_config = {"frozen": True}

    def is_valid(self, now: float) -> bool:
        return self.expires_at is not None and now <= self.expires_at


class FeedItemBody(BaseModel):
    ticker: Optional[str] = None
    price: Optional[float] = None
    realized_pnl_usd: Optional[float] = Field(None, alias="realizedPnlUsd")
    total_pnl_usd: Optional[float] = Field(None, alias="totalPnlUsd")
    user_handle: Optional[str] = Field(None, alias="userHandle")
    display_name: Optional[str] = Field(None, alias="displayName")

    model_config = {"populate_by_name": True}


class FeedToken(BaseModel):
    symbol: Optional[str] = None
    name: Optional[str] = None


class FeedItem(BaseModel):
    """One entry of the upstream activity feed.

    Only ``id`` matters to change detection. The remaining fields are read by
    the notification formatter; ``payload`` keeps the raw upstream dict.
    """

    id: str
    type: str = ""
    token_address: Optional[str] = Field(None, alias="tokenAddress")
    body: Optional[FeedItemBody] = None
    token: Optional[FeedToken] = None
    payload: dict = Field(default_factory=dict, exclude=True, repr=False)

    model_config = {"populate_by_name": True}

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str) and not v:
            raise ValueError("feed item id must not be empty")
        return v

    @classmethod
    def from_raw(cls, raw: dict) -> "FeedItem":
        return cls.model_validate({**raw, "payload": raw})

    @property
    def kind(self) -> FeedItemType | None:
        """The known type tag, or None for tags this client does not recognise."""
        try:
            return FeedItemType(self.type)
        except ValueError:
            return None


class PollResult(BaseModel):
    """Outcome of one poll of one tracker instance."""

    instance_id: str
    outcome: PollOutcome
    new_items: list[FeedItem] = Field(default_factory=list)
    watermark: Optional[str] = None
    error: Optional[str] = None
    polled_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def failed(self) -> bool:
        return self.outcome in (PollOutcome.CREDENTIAL_UNAVAILABLE, PollOutcome.FETCH_FAILED)


class MonitorStatus(BaseModel):
    """What the driving layer may see about a monitor instance."""

    instance_id: str
    running: bool
    watermark: Optional[str] = None
    uptime_seconds: float = 0.0
    last_poll_at: Optional[datetime] = None
    last_poll_failed: bool = False


class NotificationMessage(BaseModel):
    """Normalized feed item as handed to a notification sink."""

    item_id: str
    type: str
    user_name: str
    token_symbol: str
    action: str
    amount_text: str = ""
    token_address: Optional[str] = None
    price: Optional[float] = None
    realized_pnl_usd: Optional[float] = None
    total_pnl_usd: Optional[float] = None
