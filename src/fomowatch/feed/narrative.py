"""Token narrative lookup: an AI-written summary of what a token is about."""

import requests
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from fomowatch.config import AppConfig, Secrets

logger = structlog.get_logger(__name__)

# Upstream reports an expired token in the JSON envelope, not the HTTP status.
RETURN_CODE_OK = 200
RETURN_CODE_AUTH_EXPIRED = 429


class NarrativeError(Exception):
    """Raised when a narrative cannot be fetched."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NarrativeClient:
    """Fetches token summaries from the narrative report API."""

    def __init__(self, config: AppConfig, secrets: Secrets, session: requests.Session | None = None):
        self._config = config.narrative
        self._api_token = secrets.narrative_api_token
        self._session = session or requests.Session()

    def fetch_narrative(self, token_address: str) -> str | None:
        """Summary text for ``token_address``, or None when upstream has none."""
        if not token_address:
            raise NarrativeError("Token address is required", status_code=400)
        if not self._api_token:
            raise NarrativeError("Narrative API token not configured")

        try:
            data = self._get_report(token_address)
        except requests.exceptions.Timeout as e:
            raise NarrativeError("Narrative request timed out after retries") from e
        except requests.RequestException as e:
            raise NarrativeError(f"Narrative request failed: {e}") from e

        if not isinstance(data, dict):
            raise NarrativeError("Narrative response is not a JSON object")

        return_code = data.get("returnCode")
        if return_code == RETURN_CODE_AUTH_EXPIRED:
            logger.warning("narrative.auth_expired", return_desc=data.get("returnDesc"))
            raise NarrativeError("Narrative API authorization expired", status_code=401)

        report = data.get("data")
        summary = None
        if return_code == RETURN_CODE_OK and isinstance(report, dict):
            summary = report.get("summary")
        if not summary:
            logger.info(
                "narrative.unavailable",
                token_address=token_address,
                return_code=return_code,
                return_desc=data.get("returnDesc"),
            )
            return None

        logger.debug("narrative.fetched", token_address=token_address, length=len(summary))
        return summary

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(requests.exceptions.Timeout),
        reraise=True,
    )
    def _get_report(self, token_address: str):
        response = self._session.get(
            f"{self._config.base_url}/openApi/grok/report/{token_address}",
            headers={
                "Authorization": f"Bearer {self._api_token}",
                "Content-Type": "application/json",
                "Content-Language": self._config.content_language,
            },
            timeout=self._config.timeout_seconds,
        )

        if not response.ok:
            raise NarrativeError(
                f"Narrative API request failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise NarrativeError("Non-JSON narrative response") from e
