"""
Spotify client-credentials authentication and token caching.

Handles the token exchange against the Spotify accounts service and
keeps a single cached token per provider. This module is responsible
for all authentication concerns, separating them from data operations.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from requests.exceptions import RequestException

from .credentials import SpotifyCredentials
from .exceptions import (
    SpotifyAuthError,
    SpotifyConfigurationError,
    SpotifyUnavailableError,
)

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"

# Tokens are treated as expired this many seconds before Spotify says so
DEFAULT_EXPIRY_BUFFER = 5 * 60


@dataclass(frozen=True)
class TokenInfo:
    """
    A cached bearer token and the instant it stops being served.

    ``expires_at`` already has the safety buffer subtracted.
    """

    access_token: str
    expires_at: float

    @classmethod
    def from_response(
        cls,
        data: Dict[str, Any],
        now: float,
        buffer_seconds: float = DEFAULT_EXPIRY_BUFFER,
    ) -> "TokenInfo":
        """
        Build a TokenInfo from a token endpoint payload.

        Raises:
            SpotifyAuthError: If the payload has no access_token.
        """
        if not isinstance(data, dict) or not data.get("access_token"):
            raise SpotifyAuthError("No access token returned from Spotify")

        expires_in = data.get("expires_in", 3600)
        return cls(
            access_token=data["access_token"],
            expires_at=now + float(expires_in) - buffer_seconds,
        )

    def is_valid_at(self, now: float) -> bool:
        return now < self.expires_at


class ClientCredentialsTokenProvider:
    """
    Obtains and caches an app-level access token.

    The cache holds one token. Concurrent callers that find it stale
    share a single refresh: the lock is held across the exchange and
    the cache is re-checked after acquiring it.

    Example:
        credentials = SpotifyCredentials.from_flask_config(app.config)
        provider = ClientCredentialsTokenProvider(credentials)
        token = provider.get_access_token()
    """

    def __init__(
        self,
        credentials: Optional[SpotifyCredentials],
        clock: Callable[[], float] = time.time,
        expiry_buffer: float = DEFAULT_EXPIRY_BUFFER,
        session: Optional[requests.Session] = None,
        token_url: str = TOKEN_URL,
        timeout: float = 30,
    ):
        """
        Initialize the provider.

        Args:
            credentials: App credentials, or None when they are not
                configured. In that case every token request fails with
                SpotifyConfigurationError.
            clock: Returns the current time in seconds.
            expiry_buffer: Seconds subtracted from the advertised lifetime.
            session: Optional requests session (defaults to a new one).
            token_url: Token endpoint URL.
            timeout: Request timeout in seconds.
        """
        self._credentials = credentials
        self._clock = clock
        self._expiry_buffer = expiry_buffer
        self._session = session or requests.Session()
        self._token_url = token_url
        self._timeout = timeout
        self._token: Optional[TokenInfo] = None
        self._lock = threading.Lock()

    def get_access_token(self) -> str:
        """
        Return a valid access token, exchanging credentials if needed.

        Raises:
            SpotifyConfigurationError: If credentials are not configured.
            SpotifyAuthError: If Spotify rejects the exchange.
            SpotifyUnavailableError: If the token endpoint is unreachable.
        """
        token = self._token
        if token and token.is_valid_at(self._clock()):
            return token.access_token

        with self._lock:
            token = self._token
            if token and token.is_valid_at(self._clock()):
                return token.access_token

            try:
                self._token = self._request_token()
            except Exception:
                self._token = None
                raise
            return self._token.access_token

    def clear(self) -> None:
        """Drop the cached token so the next call re-authenticates."""
        with self._lock:
            self._token = None
        logger.debug("Token cache cleared")

    def status(self) -> Dict[str, Any]:
        """Report whether a token is cached and how long it has left."""
        token = self._token
        if token is None:
            return {"cached": False}
        return {
            "cached": True,
            "expiresAt": token.expires_at,
            "timeUntilExpiry": max(0.0, token.expires_at - self._clock()),
        }

    def _request_token(self) -> TokenInfo:
        if self._credentials is None:
            raise SpotifyConfigurationError(
                "Spotify API credentials not configured. Please set "
                "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET environment variables."
            )

        try:
            response = self._session.post(
                self._token_url,
                data={"grant_type": "client_credentials"},
                auth=(
                    self._credentials.client_id,
                    self._credentials.client_secret,
                ),
                timeout=self._timeout,
            )
        except RequestException as e:
            logger.error("Token request failed: %s", e)
            raise SpotifyUnavailableError(
                f"Failed to obtain Spotify access token: {e}"
            )

        if not response.ok:
            try:
                body = response.json()
                error_msg = body.get("error_description") or body.get(
                    "error", response.text
                )
            except ValueError:
                error_msg = response.text
            logger.error(
                "Spotify token exchange rejected (%d): %s",
                response.status_code, error_msg,
            )
            raise SpotifyAuthError(
                f"Spotify authentication failed: {error_msg}"
            )

        token = TokenInfo.from_response(
            response.json(), self._clock(), self._expiry_buffer
        )
        logger.info("Obtained Spotify access token")
        return token
