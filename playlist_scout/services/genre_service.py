"""
Genre service: the cached list of known genres and validation of
user-selected genres against it.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from playlist_scout.models.search import MAX_GENRES
from playlist_scout.spotify.adapters import adapt_genres
from playlist_scout.spotify.api import SpotifyAPI
from playlist_scout.spotify.exceptions import (
    SpotifyForbiddenError,
    SpotifyNotFoundError,
)

logger = logging.getLogger(__name__)

DEFAULT_GENRE_TTL = 60 * 60  # 1 hour

# Used when Spotify no longer serves the genre-seed endpoint to this app
CURATED_GENRES = (
    "acoustic", "afrobeat", "alt-rock", "alternative", "ambient", "anime",
    "black-metal", "bluegrass", "blues", "bossanova", "brazil", "breakbeat",
    "british", "cantopop", "chicago-house", "children", "chill", "classical",
    "club", "comedy", "country", "dance", "dancehall", "death-metal",
    "deep-house", "detroit-techno", "disco", "disney", "drum-and-bass", "dub",
    "dubstep", "edm", "electro", "electronic", "emo", "folk", "forro",
    "french", "funk", "garage", "german", "gospel", "goth", "grindcore",
    "groove", "grunge", "guitar", "happy", "hard-rock", "hardcore",
    "hardstyle", "heavy-metal", "hip-hop", "holidays", "honky-tonk", "house",
    "idm", "indian", "indie", "indie-pop", "industrial", "iranian", "j-dance",
    "j-idol", "j-pop", "j-rock", "jazz", "k-pop", "kids", "latin", "latino",
    "malay", "mandopop", "metal", "metal-misc", "metalcore", "minimal-techno",
    "movies", "mpb", "new-age", "new-release", "opera", "pagode", "party",
    "philippines-opm", "piano", "pop", "pop-film", "post-dubstep",
    "power-pop", "progressive-house", "psych-rock", "punk", "punk-rock",
    "r-n-b", "rainy-day", "reggae", "reggaeton", "road-trip", "rock",
    "rock-n-roll", "rockabilly", "romance", "sad", "salsa", "samba",
    "sertanejo", "show-tunes", "singer-songwriter", "ska", "sleep",
    "songwriter", "soul", "soundtracks", "spanish", "study", "summer",
    "swedish", "synth-pop", "tango", "techno", "trance", "trip-hop",
    "turkish", "work-out", "world-music",
)


class GenreError(Exception):
    """Base exception for genre operations."""
    pass


class GenreServiceError(GenreError):
    """Raised when genres cannot be fetched and nothing is cached."""
    pass


class GenreValidationError(GenreError):
    """Raised when a genre selection is empty, too large, or unknown."""

    def __init__(self, message: str, validation: "GenreValidation" = None):
        super().__init__(message)
        self.validation = validation


class InvalidGenresError(GenreValidationError):
    """Raised when a selection contains genres Spotify does not know."""

    @property
    def invalid_genres(self) -> List[str]:
        return list(self.validation.invalid_genres) if self.validation else []


@dataclass(frozen=True)
class GenreValidation:
    """Outcome of validating a genre selection."""

    is_valid: bool
    valid_genres: List[str] = field(default_factory=list)
    invalid_genres: List[str] = field(default_factory=list)
    error: Optional[str] = None


class GenreCache:
    """
    Single-slot, time-boxed cache of genre labels.

    A failed refresh serves the previous value, even if expired. Only
    when nothing was ever cached does the failure reach the caller.
    Concurrent refreshes are collapsed into one.
    """

    def __init__(
        self,
        fetch_genres: Callable[[], Iterable[str]],
        ttl: float = DEFAULT_GENRE_TTL,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache.

        Args:
            fetch_genres: Returns fresh genre labels; may raise.
            ttl: Seconds a fetched list stays fresh.
            clock: Returns the current time in seconds.
        """
        self._fetch_genres = fetch_genres
        self._ttl = ttl
        self._clock = clock
        self._genres: Optional[List[str]] = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    def _fresh(self) -> Optional[List[str]]:
        if self._genres is not None and self._clock() < self._expires_at:
            return list(self._genres)
        return None

    def get_genres(self) -> List[str]:
        """
        Return the sorted genre list, refreshing it if expired.

        Raises:
            GenreServiceError: If the refresh fails and nothing is cached.
        """
        cached = self._fresh()
        if cached is not None:
            return cached

        with self._lock:
            cached = self._fresh()
            if cached is not None:
                return cached

            try:
                genres = sorted(self._fetch_genres())
            except Exception as e:
                if self._genres is not None:
                    logger.warning(
                        "Genre refresh failed, returning cached genres: %s", e
                    )
                    return list(self._genres)
                logger.error("Failed to fetch genres: %s", e, exc_info=True)
                raise GenreServiceError(f"Failed to fetch available genres: {e}") from e

            self._genres = genres
            self._expires_at = self._clock() + self._ttl
            logger.info("Cached %d genres for %ss", len(genres), self._ttl)
            return list(genres)

    def clear(self) -> None:
        """Forget the cached list entirely."""
        with self._lock:
            self._genres = None
            self._expires_at = 0.0

    def expire(self) -> None:
        """Mark the cached list stale but keep it as a fallback."""
        with self._lock:
            self._expires_at = 0.0

    def status(self) -> Dict[str, Any]:
        now = self._clock()
        cached = self._genres is not None and now < self._expires_at
        result = {"cached": cached, "expiresAt": self._expires_at or None}
        if self._genres is not None:
            result["timeUntilExpiry"] = max(0.0, self._expires_at - now)
            result["count"] = len(self._genres)
        return result


class SpotifyGenreSource:
    """
    Fetches genre labels from Spotify's genre-seed endpoint.

    When the endpoint is gone for this app (404/403) the curated list is
    used instead. Other failures propagate so the cache can fall back.
    """

    def __init__(self, api: SpotifyAPI, fallback: Sequence[str] = CURATED_GENRES):
        self._api = api
        self._fallback = tuple(fallback)

    def __call__(self) -> List[str]:
        try:
            genres = adapt_genres(self._api.get_available_genre_seeds())
        except (SpotifyNotFoundError, SpotifyForbiddenError) as e:
            logger.warning(
                "Genre seed endpoint unavailable (%s), using curated genre list", e
            )
            return list(self._fallback)

        if not genres:
            logger.warning("Spotify returned no genre seeds, using curated genre list")
            return list(self._fallback)
        return genres


class GenreService:
    """Service for listing and validating genres."""

    def __init__(self, cache: GenreCache):
        self._cache = cache

    @property
    def cache(self) -> GenreCache:
        return self._cache

    def get_available_genres(self) -> List[str]:
        """
        Return the sorted list of known genres.

        Raises:
            GenreServiceError: If genres cannot be loaded at all.
        """
        return self._cache.get_genres()

    def validate_genres(self, genres: Sequence[str]) -> GenreValidation:
        """
        Partition a genre selection into known and unknown labels.

        Labels are trimmed and lower-cased before comparison, and the
        returned lists hold the normalized forms.

        Raises:
            GenreServiceError: If the genre list cannot be loaded.
        """
        if len(genres) == 0:
            return GenreValidation(
                is_valid=False, error="At least one genre is required"
            )
        if len(genres) > MAX_GENRES:
            return GenreValidation(
                is_valid=False,
                error=f"A maximum of {MAX_GENRES} genres is allowed",
            )

        available = {g.lower() for g in self._cache.get_genres()}
        normalized = [g.strip().lower() for g in genres]

        valid = [g for g in normalized if g in available]
        invalid = [g for g in normalized if g not in available]

        if invalid:
            logger.info("Rejected unknown genres: %s", ", ".join(invalid))

        return GenreValidation(
            is_valid=not invalid,
            valid_genres=valid,
            invalid_genres=invalid,
        )

    def require_valid_genres(self, genres: Sequence[str]) -> List[str]:
        """
        Validate a selection and return the normalized genres.

        Raises:
            GenreValidationError: If the selection is empty or too large.
            InvalidGenresError: If any genre is unknown.
        """
        validation = self.validate_genres(genres)
        if validation.error:
            raise GenreValidationError(validation.error, validation)
        if not validation.is_valid:
            raise InvalidGenresError(
                f"Invalid genres: {', '.join(validation.invalid_genres)}",
                validation,
            )
        return validation.valid_genres
