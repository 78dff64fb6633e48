"""
Wiring of the process-wide Spotify objects.

The token provider and the genre cache are shared by every request, so
they are built once per app and stored on ``app.extensions``.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from flask import current_app

from playlist_scout.services.genre_service import (
    DEFAULT_GENRE_TTL,
    GenreCache,
    GenreService,
    SpotifyGenreSource,
)
from playlist_scout.services.search_service import (
    DEFAULT_MAX_WORKERS,
    STRATEGY_PER_GENRE,
    PlaylistSearchService,
)
from playlist_scout.spotify.api import DEFAULT_MARKET, SpotifyAPI
from playlist_scout.spotify.auth import DEFAULT_EXPIRY_BUFFER, ClientCredentialsTokenProvider
from playlist_scout.spotify.credentials import SpotifyCredentials
from playlist_scout.spotify.error_handling import RetryPolicy
from playlist_scout.spotify.exceptions import SpotifyConfigurationError
from playlist_scout.spotify.http_client import DEFAULT_TIMEOUT, SpotifyHTTPClient

logger = logging.getLogger(__name__)

EXTENSION_KEY = "playlist_scout"


@dataclass
class Services:
    """The shared objects route handlers work with."""

    token_provider: ClientCredentialsTokenProvider
    api: SpotifyAPI
    genres: GenreService
    search: PlaylistSearchService

    def close(self) -> None:
        """Release the pooled HTTP connections."""
        logger.info("Closing Spotify HTTP session")
        self.api.close()


def build_services(
    config: dict,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], None] = time.sleep,
) -> Services:
    """
    Build the service graph from a Flask config mapping.

    Missing credentials do not fail here; the first Spotify call raises
    SpotifyConfigurationError instead.
    """
    try:
        credentials: Optional[SpotifyCredentials] = SpotifyCredentials.from_flask_config(config)
    except SpotifyConfigurationError as e:
        logger.warning("Spotify credentials not configured: %s", e)
        credentials = None

    timeout = float(config.get("SPOTIFY_REQUEST_TIMEOUT", DEFAULT_TIMEOUT))
    token_provider = ClientCredentialsTokenProvider(
        credentials,
        clock=clock,
        expiry_buffer=float(config.get("TOKEN_EXPIRY_BUFFER", DEFAULT_EXPIRY_BUFFER)),
        timeout=timeout,
    )
    http_client = SpotifyHTTPClient(
        token_provider,
        retry_policy=RetryPolicy.from_flask_config(config),
        timeout=timeout,
        sleep=sleep,
    )
    api = SpotifyAPI(http_client, market=config.get("SPOTIFY_MARKET", DEFAULT_MARKET))

    genre_cache = GenreCache(
        SpotifyGenreSource(api),
        ttl=float(config.get("GENRE_CACHE_TTL", DEFAULT_GENRE_TTL)),
        clock=clock,
    )
    genre_service = GenreService(genre_cache)

    search_service = PlaylistSearchService(
        api,
        genre_service,
        strategy=config.get("SEARCH_STRATEGY", STRATEGY_PER_GENRE),
        max_workers=int(config.get("SEARCH_MAX_WORKERS", DEFAULT_MAX_WORKERS)),
        fetch_missing_followers=bool(config.get("SEARCH_FETCH_MISSING_FOLLOWERS", False)),
    )

    return Services(
        token_provider=token_provider,
        api=api,
        genres=genre_service,
        search=search_service,
    )


def get_services() -> Services:
    """Return the Services registered on the current app."""
    return current_app.extensions[EXTENSION_KEY]
