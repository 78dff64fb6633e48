"""
Playlist Scout Services Package

This package provides the service layer on top of the Spotify
integration. All services can be imported directly from this package.

Usage:
    from playlist_scout.services import GenreService, PlaylistSearchService

    # Or import specific exceptions
    from playlist_scout.services import InvalidGenresError, PlaylistSearchError

Example:
    from playlist_scout.services import build_services

    services = build_services(app.config)
    result = services.search.search_playlists_by_genres(criteria)
"""

# Genre Service
from playlist_scout.services.genre_service import (
    GenreService,
    GenreCache,
    GenreValidation,
    SpotifyGenreSource,
    CURATED_GENRES,
    GenreError,
    GenreServiceError,
    GenreValidationError,
    InvalidGenresError,
)

# Search Service
from playlist_scout.services.search_service import (
    PlaylistSearchService,
    PlaylistSearchError,
    STRATEGY_PER_GENRE,
    STRATEGY_COMBINED,
)

# Wiring
from playlist_scout.services.registry import (
    Services,
    build_services,
)

__all__ = [
    # Genre Service
    "GenreService",
    "GenreCache",
    "GenreValidation",
    "SpotifyGenreSource",
    "CURATED_GENRES",
    "GenreError",
    "GenreServiceError",
    "GenreValidationError",
    "InvalidGenresError",
    # Search Service
    "PlaylistSearchService",
    "PlaylistSearchError",
    "STRATEGY_PER_GENRE",
    "STRATEGY_COMBINED",
    # Wiring
    "Services",
    "build_services",
]
