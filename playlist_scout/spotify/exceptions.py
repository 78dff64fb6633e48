"""
Spotify module exceptions.

Provides a clean exception hierarchy for Spotify API operations.
"""

from typing import Optional


class SpotifyError(Exception):
    """Base exception for all Spotify-related errors."""
    pass


class SpotifyConfigurationError(SpotifyError, ValueError):
    """Raised when Spotify credentials are missing from configuration."""
    pass


class SpotifyAuthError(SpotifyError):
    """Raised when the client-credentials exchange or a retried request fails auth."""

    status_code = 401


class SpotifyAPIError(SpotifyError):
    """Raised when a Spotify API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SpotifyBadRequestError(SpotifyAPIError):
    """Raised when Spotify rejects the request parameters (400)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class SpotifyForbiddenError(SpotifyAPIError):
    """Raised when the app is not allowed to access a resource (403)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=403)


class SpotifyNotFoundError(SpotifyAPIError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class SpotifyRateLimitError(SpotifyAPIError):
    """Raised when rate limited by Spotify API."""

    def __init__(self, message: str, retry_after: int = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class SpotifyUnavailableError(SpotifyAPIError):
    """Raised on 5xx responses or network failures once retries run out."""
    pass
