"""Provider factory: builds the notification sink named in config."""

from fomowatch.config import AppConfig, Secrets
from fomowatch.notifications.base import NotificationSink

NOTIFIER_PROVIDERS = {
    "telegram": "fomowatch.notifications.telegram:TelegramNotifier",
    "log": "fomowatch.notifications.log:LogNotifier",
}


def _import_class(path: str):
    """Import a class from a 'module:ClassName' string."""
    module_path, class_name = path.split(":")
    import importlib

    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def create_notifier(config: AppConfig, secrets: Secrets) -> NotificationSink:
    """Create a notification sink based on config.notifications.provider."""
    name = config.notifications.provider
    if name not in NOTIFIER_PROVIDERS:
        raise ValueError(
            f"Unknown notification provider: '{name}'. Available: {list(NOTIFIER_PROVIDERS.keys())}"
        )
    cls = _import_class(NOTIFIER_PROVIDERS[name])
    return cls(config, secrets)
