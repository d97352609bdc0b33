"""Configuration loading and validation using Pydantic."""

from pathlib import Path

from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from fomowatch.models import FeedItemType


class AuthConfig(BaseModel):
    """Privy session refresh settings. Identifiers only, secrets live in Secrets."""

    refresh_url: str = "https://auth.privy.io/api/v1/sessions"
    client_id: str = "client-WY5gFSayQjxnQhG4rP6SnwPAyPZWZpNRhJ6xkhmfgbmVh"
    app_id: str = "cm6h485o300n3zj9yl6vpedq7"
    privy_client: str = "expo:0.50.0"
    accept_language: str = "zh-CN,zh-Hans;q=0.9"
    user_agent: str = "fomo/108 CFNetwork/1494.0.7 Darwin/23.4.0"
    native_app_identifier: str = "family.fomo.app"
    timeout_seconds: float = Field(default=5.0, gt=0, le=60)
    default_ttl_seconds: int = Field(default=900, gt=0)
    renew_margin_seconds: int = Field(default=60, ge=0)


class FeedConfig(BaseModel):
    base_url: str = "https://prod-api.fomo.family"
    limit: int = Field(default=50, ge=1, le=100)
    feed_types: list[str] = Field(default_factory=lambda: [t.value for t in FeedItemType])
    timeout_seconds: float = Field(default=10.0, gt=0, le=60)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")


class NarrativeConfig(BaseModel):
    """AI-written token summaries. The bearer token lives in Secrets."""

    base_url: str = "https://api.djdog.ai"
    content_language: str = "zh"
    timeout_seconds: float = Field(default=10.0, gt=0, le=60)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")


class MonitorConfig(BaseModel):
    poll_interval_seconds: float = Field(default=5.0, gt=0)
    auto_start: list[str] = Field(default_factory=lambda: ["default"])


class NotificationConfig(BaseModel):
    """Where new feed items are pushed."""

    provider: Literal["telegram", "log"] = "log"
    enabled: bool = True
    skip_types: list[str] = Field(
        default_factory=lambda: [FeedItemType.USER_TRADE_PROFIT_MILESTONE.value]
    )
    timeout_seconds: float = Field(default=10.0, gt=0, le=60)
    timezone: str = "Asia/Shanghai"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    app_log: str = "logs/fomowatch.log"
    notification_log: str = "logs/notifications.log"
    max_bytes: int = 10485760
    backup_count: int = 5


class AppConfig(BaseModel):
    auth: AuthConfig = Field(default_factory=AuthConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    narrative: NarrativeConfig = Field(default_factory=NarrativeConfig)
    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class Secrets(BaseSettings):
    """Loaded from .env file automatically. Every value is optional; the
    operation that needs a missing one reports itself unavailable."""

    privy_refresh_token: str = ""
    privy_authorization_bearer: str = ""
    privy_client_id: str = ""
    privy_app_id: str = ""
    fomo_api_token: str = ""
    narrative_api_token: str = ""
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def load_config(config_path: Path = Path("config/settings.yaml")) -> AppConfig:
    """Load and validate application configuration from YAML."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    return AppConfig(**raw)
