"""Bearer credential renewal and caching."""

from fomowatch.auth.base import CredentialRenewer
from fomowatch.auth.credentials import CredentialCache
from fomowatch.auth.privy import (
    CredentialConfigError,
    CredentialError,
    CredentialRenewalError,
    PrivyAuthClient,
)

__all__ = [
    "CredentialCache",
    "CredentialConfigError",
    "CredentialError",
    "CredentialRenewalError",
    "CredentialRenewer",
    "PrivyAuthClient",
]
