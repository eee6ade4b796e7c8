"""Outbound status update call."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import requests

from ..config import REQUEST_TIMEOUT
from ..exceptions import ConfigurationError

AUTH_HEADER = "X-Character-Key"


@dataclass(frozen=True)
class TransportResult:
    """Outcome of one status update call."""

    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


def build_payload(payload_text: str) -> dict:
    return {"type": "mac", "data": {"mac": payload_text}}


def validate_target(endpoint: Optional[str], auth_key: Optional[str]) -> None:
    """
    Check an endpoint and key before any request is made.

    Raises:
        ConfigurationError: If the endpoint is not an http(s) URL or the key is missing
    """
    if not endpoint or not endpoint.strip():
        raise ConfigurationError("Endpoint is not set")
    parsed = urlparse(endpoint.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"Malformed endpoint: {endpoint!r}")
    if not auth_key or not auth_key.strip():
        raise ConfigurationError("Auth key is not set")


class StatusTransport:
    """Sends a single best-effort status update; no retries, no queuing."""

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        """
        Initialize the transport.

        Args:
            timeout: Request timeout in seconds (defaults to config value)
            session: Optional requests session to reuse connections
        """
        self.timeout = timeout or REQUEST_TIMEOUT
        self._session = session

    def update_status(self, endpoint: Optional[str], auth_key: Optional[str], payload_text: str) -> TransportResult:
        """
        POST the status to the endpoint.

        Args:
            endpoint: Status update URL
            auth_key: Value of the X-Character-Key header
            payload_text: Status text sent as data.mac

        Returns:
            TransportResult; any 2xx status is a success

        Raises:
            ConfigurationError: If the endpoint or key is unusable (nothing is sent)
        """
        validate_target(endpoint, auth_key)
        headers = {
            "Content-Type": "application/json",
            AUTH_HEADER: auth_key.strip(),
        }
        post = self._session.post if self._session is not None else requests.post
        try:
            response = post(
                endpoint.strip(),
                json=build_payload(payload_text),
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            return TransportResult(success=False, error=str(e))

        success = 200 <= response.status_code < 300
        return TransportResult(
            success=success,
            status_code=response.status_code,
            error=None if success else f"HTTP {response.status_code}"
        )
