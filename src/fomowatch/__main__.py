"""Entry point: python -m fomowatch"""

import asyncio
import sys
from pathlib import Path

from fomowatch.config import AppConfig, Secrets, load_config
from fomowatch.engine import WatchEngine
from fomowatch.logging_config import configure_logging

CONFIG_PATH = Path("config/settings.yaml")


def main():
    config = load_config(CONFIG_PATH) if CONFIG_PATH.exists() else AppConfig()
    try:
        secrets = Secrets()
    except Exception as e:
        print(f"Failed to load secrets from .env: {e}")
        print("Check PRIVY_REFRESH_TOKEN, PRIVY_AUTHORIZATION_BEARER and TELEGRAM_* entries")
        sys.exit(1)

    configure_logging(config.logging)

    engine = WatchEngine(config, secrets)
    asyncio.run(engine.start())


if __name__ == "__main__":
    main()
