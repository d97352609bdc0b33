"""Feed change monitor with a self-renewing bearer credential."""

__version__ = "0.1.0"
