"""
Global Flask error handlers.

Provides consistent ``{error, message, details?}`` responses across all
endpoints by catching service-layer exceptions, Spotify errors, and
Pydantic validation errors.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from playlist_scout.routes import error_details, json_error
from playlist_scout.schemas import SEARCH_REQUEST_EXPECTED
from playlist_scout.services import (
    GenreServiceError,
    GenreValidationError,
    InvalidGenresError,
    PlaylistSearchError,
)
from playlist_scout.spotify import (
    ErrorKind,
    NormalizedError,
    SpotifyConfigurationError,
    SpotifyError,
    normalize_error,
)

logger = logging.getLogger(__name__)

CONFIGURATION_MESSAGE = "Service configuration error. Please contact support."
AUTH_MESSAGE = "Unable to authenticate with Spotify. Please try again later."
SEARCH_MESSAGE = "Failed to search playlists. Please try again later."
GENRES_MESSAGE = "Failed to fetch available genres. Please try again later."
RATE_LIMIT_MESSAGE = "Too many requests. Please try again in a moment."


def is_rate_limited(error: BaseException, normalized: Optional[NormalizedError] = None) -> bool:
    """True when the error is a rate limit by kind or by its message."""
    if normalized is not None and normalized.kind == ErrorKind.RATE_LIMITED:
        return True
    text = str(error).lower()
    return "rate limit" in text or "429" in text


def upstream_error_response(
    error: BaseException,
    normalized: NormalizedError,
    error_code: str,
    message: str,
):
    """
    Render a failure that came from Spotify.

    Rate limits become 429 and auth failures a generic 500; anything
    else is reported under ``error_code`` with ``message``.
    """
    details = error_details(normalized.detail or str(error))

    if is_rate_limited(error, normalized):
        logger.warning("Spotify rate limit: %s", error)
        return json_error(
            "RATE_LIMIT_ERROR", RATE_LIMIT_MESSAGE, 429, details
        )
    if normalized.kind == ErrorKind.AUTH:
        logger.error("Spotify authentication error: %s", error)
        return json_error("SPOTIFY_AUTH_ERROR", AUTH_MESSAGE, 500, details)

    logger.error("%s: %s", error_code, error)
    return json_error(error_code, message, 500, details)


def configuration_error_response(error: BaseException):
    logger.error("Configuration error: %s", error)
    return json_error(
        "CONFIGURATION_ERROR", CONFIGURATION_MESSAGE, 500, error_details(str(error))
    )


def register_error_handlers(app):
    """
    Register global error handlers with the Flask app.

    Args:
        app: The Flask application instance.
    """

    # =========================================================================
    # Validation Errors (400)
    # =========================================================================

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """Handle Pydantic request body validation errors."""
        errors_list = []
        for err in error.errors():
            field = ".".join(str(loc) for loc in err["loc"])
            errors_list.append(f"{field}: {err['msg']}" if field else err["msg"])

        message = "; ".join(errors_list) if errors_list else "Validation failed"
        logger.warning("Validation error: %s", message)
        return json_error(
            "VALIDATION_ERROR",
            "Invalid request body",
            400,
            {"errors": errors_list, "expected": SEARCH_REQUEST_EXPECTED},
        )

    @app.errorhandler(InvalidGenresError)
    def handle_invalid_genres(error: InvalidGenresError):
        """Handle genres that are not in the known genre list."""
        logger.info("Invalid genres: %s", error)
        return json_error(
            "INVALID_GENRES",
            str(error),
            400,
            {"invalidGenres": error.invalid_genres},
        )

    @app.errorhandler(GenreValidationError)
    def handle_genre_validation_error(error: GenreValidationError):
        """Handle empty or oversized genre selections."""
        logger.info("Genre validation error: %s", error)
        return json_error("VALIDATION_ERROR", str(error), 400)

    # =========================================================================
    # Upstream Errors (429 / 500)
    # =========================================================================

    @app.errorhandler(PlaylistSearchError)
    def handle_playlist_search_error(error: PlaylistSearchError):
        """Handle searches that failed as a whole."""
        return upstream_error_response(
            error, error.normalized, "SEARCH_ERROR", SEARCH_MESSAGE
        )

    @app.errorhandler(GenreServiceError)
    def handle_genre_service_error(error: GenreServiceError):
        """Handle a genre list that could not be loaded."""
        cause = error.__cause__
        if isinstance(cause, SpotifyConfigurationError):
            return configuration_error_response(cause)
        normalized = normalize_error(cause if cause is not None else error)
        logger.error("Failed to fetch genres: %s", error)
        return json_error(
            "SPOTIFY_API_ERROR",
            GENRES_MESSAGE,
            500,
            error_details(normalized.detail or str(error)),
        )

    @app.errorhandler(SpotifyConfigurationError)
    def handle_configuration_error(error: SpotifyConfigurationError):
        """Handle missing or invalid Spotify credentials."""
        return configuration_error_response(error)

    @app.errorhandler(SpotifyError)
    def handle_spotify_error(error: SpotifyError):
        """Handle Spotify errors that reached a route unwrapped."""
        return upstream_error_response(
            error, normalize_error(error), "SPOTIFY_API_ERROR", SEARCH_MESSAGE
        )

    # =========================================================================
    # HTTP Errors
    # =========================================================================

    @app.errorhandler(404)
    def handle_not_found(error):
        """Handle 404 Not Found errors."""
        return json_error("NOT_FOUND", "Resource not found.", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        """Handle 405 Method Not Allowed errors."""
        return json_error("METHOD_NOT_ALLOWED", "Method not allowed.", 405)

    @app.errorhandler(500)
    def handle_internal_error(error):
        """Handle 500 Internal Server errors."""
        original = getattr(error, "original_exception", None) or error
        logger.error("Internal server error: %s", original, exc_info=True)
        return json_error(
            "INTERNAL_ERROR",
            "An unexpected error occurred.",
            500,
            error_details(str(original)),
        )

    logger.info("Global error handlers registered")
