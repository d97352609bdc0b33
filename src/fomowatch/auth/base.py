"""Abstract base class for upstream credential renewal."""

from abc import ABC, abstractmethod


class CredentialRenewer(ABC):
    """Interface for exchanging a long-lived secret for a short-lived token."""

    @abstractmethod
    def renew(self) -> tuple[str, float]:
        """Return (token, ttl_seconds). Raises CredentialError on failure."""
        ...
