"""Process-wide cache for the short-lived bearer credential."""

import threading
import time
from typing import Callable

import structlog

from fomowatch.auth.base import CredentialRenewer
from fomowatch.auth.privy import CredentialConfigError, CredentialError
from fomowatch.models import Credential

logger = structlog.get_logger(__name__)


class CredentialCache:
    """Holds one credential and renews it when it goes stale.

    Reads are lock-free: the cached Credential is immutable and replaced with a
    single assignment. Renewal is serialized by a lock, and callers that queued
    behind a renewal reuse its result, success or failure, instead of issuing
    their own.
    """

    def __init__(
        self,
        renewer: CredentialRenewer,
        *,
        clock: Callable[[], float] = time.time,
        renew_margin_seconds: float = 60,
        static_token: str | None = None,
    ):
        self._renewer = renewer
        self._clock = clock
        self._renew_margin = renew_margin_seconds
        self._static_token = static_token or None
        self._credential: Credential | None = None
        self._renew_lock = threading.Lock()
        self._renewal_count = 0
        self._attempt_generation = 0
        self._last_attempt: Credential | None = None

    @property
    def renewal_count(self) -> int:
        """Number of upstream renewal attempts made so far."""
        return self._renewal_count

    @property
    def current(self) -> Credential | None:
        return self._credential

    @property
    def static_token(self) -> str | None:
        return self._static_token

    def get_valid_credential(self) -> Credential | None:
        """Return a fresh credential, renewing first if needed. None if unavailable."""
        credential = self._credential
        if credential is not None and credential.is_valid(self._clock()):
            return credential

        generation = self._attempt_generation
        with self._renew_lock:
            # Another caller may have renewed while we waited for the lock
            credential = self._credential
            if credential is not None and credential.is_valid(self._clock()):
                return credential
            if self._attempt_generation != generation:
                return self._last_attempt
            return self._renew()

    def bearer_token(self) -> str | None:
        """Token to authorize upstream calls: fresh credential, else the static fallback."""
        credential = self.get_valid_credential()
        if credential is not None:
            return credential.token
        if self._static_token:
            logger.debug("auth.using_static_token")
        return self._static_token

    def invalidate(self) -> None:
        """Forget the cached credential so the next read renews."""
        with self._renew_lock:
            self._credential = None

    def _renew(self) -> Credential | None:
        self._renewal_count += 1
        credential = self._attempt_renewal()
        self._last_attempt = credential
        self._attempt_generation += 1
        return credential

    def _attempt_renewal(self) -> Credential | None:
        try:
            token, ttl = self._renewer.renew()
        except CredentialConfigError as e:
            logger.warning("auth.not_configured", error=str(e))
            return None
        except CredentialError as e:
            logger.error("auth.renewal_failed", error=str(e))
            return None

        lifetime = ttl - self._renew_margin if ttl > self._renew_margin else ttl
        credential = Credential(token=token, expires_at=self._clock() + lifetime)
        self._credential = credential

        logger.info("auth.credential_renewed", lifetime_seconds=lifetime)
        return credential
