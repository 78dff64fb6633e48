"""
Spotify API error classification and retry policy.

Contains retry configuration, backoff calculation, and the error
normalizer that turns transport/HTTP failures into a small taxonomy
with user-facing messages.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import SpotifyUnavailableError

logger = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 4
BASE_DELAY = 2  # seconds
MAX_DELAY = 16  # seconds
BACKOFF_MULTIPLIER = 2


@dataclass(frozen=True)
class RetryPolicy:
    """Capped exponential backoff settings for retryable failures."""

    max_retries: int = MAX_RETRIES
    base_delay: float = BASE_DELAY
    max_delay: float = MAX_DELAY
    multiplier: float = BACKOFF_MULTIPLIER

    def backoff_delay(self, attempt: int) -> float:
        """
        Calculate the delay before retry ``attempt`` (0-indexed).

        Returns:
            Delay in seconds, capped at max_delay.
        """
        return min(self.base_delay * (self.multiplier ** attempt), self.max_delay)

    @classmethod
    def from_flask_config(cls, config: dict) -> "RetryPolicy":
        return cls(
            max_retries=int(config.get("SPOTIFY_MAX_RETRIES", MAX_RETRIES)),
            base_delay=float(config.get("SPOTIFY_RETRY_BASE_DELAY", BASE_DELAY)),
            max_delay=float(config.get("SPOTIFY_RETRY_MAX_DELAY", MAX_DELAY)),
            multiplier=float(
                config.get("SPOTIFY_RETRY_MULTIPLIER", BACKOFF_MULTIPLIER)
            ),
        )


def is_retryable_status(status_code: Optional[int]) -> bool:
    """Rate limits and server errors are retryable; everything else is terminal."""
    if status_code is None:
        return False
    return status_code == 429 or status_code >= 500


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTH = "auth"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    GENERIC = "generic"


GENERIC_MESSAGE = "Unable to connect to Spotify. Please try again later."

_STATUS_KINDS = {
    400: (
        ErrorKind.VALIDATION,
        "Invalid search parameters. Please check your genre selection "
        "and follower count.",
    ),
    401: (
        ErrorKind.AUTH,
        "Spotify authentication failed. Please check configuration.",
    ),
    403: (
        ErrorKind.FORBIDDEN,
        "Access denied. Please verify your Spotify app permissions.",
    ),
    404: (
        ErrorKind.NOT_FOUND,
        "The requested resource was not found.",
    ),
    429: (
        ErrorKind.RATE_LIMITED,
        "Too many requests. Please try again in a moment.",
    ),
}

_UNAVAILABLE_MESSAGE = (
    "Spotify is temporarily unavailable. Please try again later."
)


@dataclass(frozen=True)
class NormalizedError:
    """An error reduced to a kind, a safe user message, and raw detail."""

    kind: ErrorKind
    user_message: str
    detail: Optional[str] = None


def _status_of(error: BaseException) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "http_status", None)
    if status is None:
        response = getattr(error, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def classify_status(status_code: Optional[int]) -> ErrorKind:
    if status_code in _STATUS_KINDS:
        return _STATUS_KINDS[status_code][0]
    if status_code is not None and 500 <= status_code < 600:
        return ErrorKind.UPSTREAM_UNAVAILABLE
    return ErrorKind.GENERIC


def normalize_error(error: BaseException) -> NormalizedError:
    """
    Map an exception to an error kind and a fixed user-facing message.

    HTTP errors are classified by status code. Errors without a status
    fall back to the generic kind with the original message kept as
    detail, except network failures, which count as the upstream being
    unavailable. Credentials and tokens never appear in the user message.
    """
    status = _status_of(error)

    if status is None and isinstance(error, SpotifyUnavailableError):
        # Network failure: no response, but still an upstream outage
        return NormalizedError(
            ErrorKind.UPSTREAM_UNAVAILABLE, _UNAVAILABLE_MESSAGE, str(error)
        )

    kind = classify_status(status)
    if kind == ErrorKind.UPSTREAM_UNAVAILABLE:
        message = _UNAVAILABLE_MESSAGE
        detail = f"Server error: {status}"
    elif kind == ErrorKind.GENERIC:
        message = GENERIC_MESSAGE
        detail = str(error) or type(error).__name__
    elif kind == ErrorKind.AUTH:
        message = _STATUS_KINDS[401][1]
        detail = "API credentials may be invalid or expired"
    elif kind == ErrorKind.RATE_LIMITED:
        message = _STATUS_KINDS[429][1]
        detail = "Spotify API rate limit exceeded"
    else:
        message = _STATUS_KINDS[status][1]
        detail = str(error)

    logger.debug("Normalized %s (status=%s) -> %s", type(error).__name__, status, kind)
    return NormalizedError(kind, message, detail)
