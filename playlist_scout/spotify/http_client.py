"""
Lightweight HTTP client for the Spotify Web API.

Wraps requests.Session with automatic token management, retry logic,
and rate limit handling.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from .auth import ClientCredentialsTokenProvider
from .error_handling import RetryPolicy, is_retryable_status
from .exceptions import (
    SpotifyAPIError,
    SpotifyAuthError,
    SpotifyBadRequestError,
    SpotifyForbiddenError,
    SpotifyNotFoundError,
    SpotifyRateLimitError,
    SpotifyUnavailableError,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://api.spotify.com/v1"
DEFAULT_TIMEOUT = 30  # seconds


def _error_message(response: requests.Response) -> str:
    """Pull the most useful message out of a Spotify error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or ""
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    if isinstance(body, dict) and body.get("error_description"):
        return body["error_description"]
    return response.text or "Unknown Spotify API error"


def _retry_after(response: requests.Response, default: int) -> int:
    """Seconds from the Retry-After header, or ``default`` if absent or unparseable."""
    try:
        return int(response.headers.get("Retry-After", default))
    except (TypeError, ValueError):
        return default


class SpotifyHTTPClient:
    """
    HTTP client for Spotify Web API requests.

    Asks the token provider for a bearer token on every request. A 401
    clears the provider's cache and repeats the request once with a
    fresh token. Rate limits (429), server errors (5xx) and network
    failures are retried with capped exponential backoff.
    """

    def __init__(
        self,
        token_provider: ClientCredentialsTokenProvider,
        retry_policy: Optional[RetryPolicy] = None,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the HTTP client.

        Args:
            token_provider: Source of bearer tokens.
            retry_policy: Backoff settings (defaults to RetryPolicy()).
            base_url: API root URL.
            timeout: Per-request timeout in seconds.
            sleep: Called with the backoff delay between retries.
            session: Optional requests session.
        """
        self._token_provider = token_provider
        self._retry = retry_policy or RetryPolicy()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._sleep = sleep
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def get(self, path: str, params: Optional[Dict] = None) -> Any:
        """Send a GET request to a path relative to the API root."""
        return self._request("GET", f"{self._base_url}{path}", params=params)

    # -----------------------------------------------------------------
    # Internal request handling
    # -----------------------------------------------------------------

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict] = None,
        json: Any = None,
    ) -> Any:
        """
        Execute an HTTP request with retry and error handling.

        Retries on 429 (rate limit), 5xx, and network errors.
        On 401, re-authenticates once before failing.
        """
        token_refreshed = False
        attempt = 0
        max_attempts = self._retry.max_retries + 1

        while True:
            token = self._token_provider.get_access_token()
            try:
                response = self._session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers={"Authorization": f"Bearer {token}"},
                    timeout=self._timeout,
                )
            except (ConnectionError, Timeout, RequestException) as e:
                if attempt >= self._retry.max_retries:
                    raise SpotifyUnavailableError(
                        f"Network error after {max_attempts} attempts: {e}"
                    )
                delay = self._retry.backoff_delay(attempt)
                logger.warning(
                    "Network error, retry %d/%d in %ss: %s",
                    attempt + 1, max_attempts, delay, e,
                )
                attempt += 1
                self._sleep(delay)
                continue

            # --- Success ---
            if response.status_code == 204:
                return None
            if response.ok:
                return response.json()

            status = response.status_code

            # --- 401 Unauthorized: re-authenticate once ---
            if status == 401:
                if not token_refreshed:
                    logger.info("401 received, refreshing access token")
                    self._token_provider.clear()
                    token_refreshed = True
                    continue
                raise SpotifyAuthError(
                    "Spotify authentication failed after token refresh: "
                    f"{_error_message(response)}"
                )

            # --- 429 / 5xx: back off and retry ---
            if is_retryable_status(status):
                if attempt >= self._retry.max_retries:
                    self._raise_exhausted(response, max_attempts)
                delay = self._retry.backoff_delay(attempt)
                if status == 429:
                    retry_after = _retry_after(response, 1)
                    delay = min(max(retry_after, delay), self._retry.max_delay)
                    logger.warning(
                        "Rate limited (429), retry %d/%d in %ss",
                        attempt + 1, max_attempts, delay,
                    )
                else:
                    logger.warning(
                        "Server error %d, retry %d/%d in %ss",
                        status, attempt + 1, max_attempts, delay,
                    )
                attempt += 1
                self._sleep(delay)
                continue

            # --- Other client errors are terminal ---
            msg = _error_message(response)
            if status == 400:
                raise SpotifyBadRequestError(f"Bad request: {msg}")
            if status == 403:
                raise SpotifyForbiddenError(f"Access forbidden: {msg}")
            if status == 404:
                raise SpotifyNotFoundError(f"Resource not found: {url}")
            raise SpotifyAPIError(
                f"Spotify API error ({status}): {msg}", status_code=status
            )

    @staticmethod
    def _raise_exhausted(response: requests.Response, max_attempts: int) -> None:
        if response.status_code == 429:
            retry_after = _retry_after(response, 60)
            raise SpotifyRateLimitError(
                f"Rate limited after {max_attempts} attempts",
                retry_after=retry_after,
            )
        raise SpotifyUnavailableError(
            f"Server error {response.status_code} after {max_attempts} attempts",
            status_code=response.status_code,
        )
