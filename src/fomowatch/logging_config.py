"""Structured logging configuration with separate app and notification streams."""

import logging
import logging.handlers
from pathlib import Path

import structlog

from fomowatch.config import LoggingConfig

NOTIFICATION_LOGGER = "fomowatch.sent"


def configure_logging(config: LoggingConfig) -> None:
    """Set up structured logging with console + file outputs."""
    for log_path in [config.app_log, config.notification_log]:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=True),
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    # Bearer tokens travel in headers and the Telegram bot token in the URL
    for noisy_logger in ["urllib3", "requests"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    app_handler = logging.handlers.RotatingFileHandler(
        config.app_log,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
    )
    app_handler.setFormatter(json_formatter)
    root_logger.addHandler(app_handler)

    notification_logger = logging.getLogger(NOTIFICATION_LOGGER)
    notification_handler = logging.handlers.RotatingFileHandler(
        config.notification_log,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
    )
    notification_handler.setFormatter(json_formatter)
    notification_logger.addHandler(notification_handler)
    notification_logger.propagate = True


def get_notification_logger() -> structlog.stdlib.BoundLogger:
    """Get the notification-specific logger."""
    return structlog.get_logger(NOTIFICATION_LOGGER)
