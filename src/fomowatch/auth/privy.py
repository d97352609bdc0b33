"""Privy session refresh: trades the refresh token for a new bearer token."""

import requests
import structlog

from fomowatch.auth.base import CredentialRenewer
from fomowatch.config import AppConfig, Secrets

logger = structlog.get_logger(__name__)


class CredentialError(Exception):
    """Base class for credential renewal failures."""


class CredentialConfigError(CredentialError):
    """Raised when the refresh or authorization secret is not provisioned."""


class CredentialRenewalError(CredentialError):
    """Raised when the auth endpoint rejects the refresh or answers without a token."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


MAX_ERROR_BODY_CHARS = 500


def _path_accessor(path: str):
    keys = path.split(".")

    def accessor(data):
        for key in keys:
            if not isinstance(data, dict):
                return None
            data = data.get(key)
        return data

    return accessor


# Tried in order; the first non-empty string wins.
TOKEN_PATHS = [
    "token",
    "privy_access_token",
    "access_token",
    "session.token",
    "session.access_token",
    "accessToken",
    "authToken",
    "bearer_token",
]
TOKEN_ACCESSORS = [(path, _path_accessor(path)) for path in TOKEN_PATHS]

TTL_FIELDS = ("expires_in", "expiresIn")


def extract_token(data) -> str | None:
    """Return the first token found along TOKEN_PATHS, or None."""
    for _, accessor in TOKEN_ACCESSORS:
        value = accessor(data)
        if isinstance(value, str) and value:
            return value
    return None


def extract_ttl(data, default: float) -> float:
    """Lifetime in seconds from the response, falling back to ``default``."""
    if isinstance(data, dict):
        for field in TTL_FIELDS:
            value = data.get(field)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
                return float(value)
    return float(default)


class PrivyAuthClient(CredentialRenewer):
    """Calls the Privy sessions endpoint with the app's refresh token."""

    def __init__(self, config: AppConfig, secrets: Secrets, session: requests.Session | None = None):
        self._config = config.auth
        self._refresh_token = secrets.privy_refresh_token
        self._authorization = secrets.privy_authorization_bearer
        self._client_id = secrets.privy_client_id or self._config.client_id
        self._app_id = secrets.privy_app_id or self._config.app_id
        self._session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self._refresh_token and self._authorization)

    def renew(self) -> tuple[str, float]:
        """Refresh the session. Returns (token, ttl_seconds)."""
        if not self.configured:
            raise CredentialConfigError(
                "PRIVY_REFRESH_TOKEN and PRIVY_AUTHORIZATION_BEARER must both be set"
            )

        try:
            response = self._session.post(
                self._config.refresh_url,
                json={"refresh_token": self._refresh_token},
                headers=self._build_headers(),
                timeout=self._config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise CredentialRenewalError(f"Privy refresh request failed: {e}") from e

        if not response.ok:
            body = response.text[:MAX_ERROR_BODY_CHARS]
            logger.warning(
                "auth.refresh_rejected",
                status_code=response.status_code,
                body=body,
            )
            raise CredentialRenewalError(
                f"Privy refresh failed {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CredentialRenewalError(
                "Privy refresh returned a non-JSON body",
                status_code=response.status_code,
                body=response.text[:MAX_ERROR_BODY_CHARS],
            ) from e

        token = extract_token(data)
        if token is None:
            raise CredentialRenewalError("No token in Privy response", status_code=response.status_code)

        ttl = extract_ttl(data, self._config.default_ttl_seconds)
        logger.info("auth.refreshed", ttl_seconds=ttl)
        return token, ttl

    def _build_headers(self) -> dict[str, str]:
        return {
            "content-type": "application/json",
            "accept": "application/json",
            "authorization": f"Bearer {self._authorization}",
            "privy-client-id": self._client_id,
            "privy-app-id": self._app_id,
            "privy-client": self._config.privy_client,
            "accept-language": self._config.accept_language,
            "user-agent": self._config.user_agent,
            "x-native-app-identifier": self._config.native_app_identifier,
        }
