"""
Spotify API integration module.

This module provides a small, modular interface to the Spotify Web API
using the client-credentials flow (public catalog data only).

Architecture:
    - credentials.py: SpotifyCredentials for config/DI
    - auth.py: ClientCredentialsTokenProvider for token exchange and caching
    - http_client.py: SpotifyHTTPClient (401 refresh, retry with backoff)
    - error_handling.py: RetryPolicy and the error normalizer
    - api.py: SpotifyAPI for data operations
    - adapters.py: payload schemas and adapters to domain models
    - exceptions.py: Exception hierarchy

Usage:
    from playlist_scout.spotify import (
        SpotifyCredentials,
        ClientCredentialsTokenProvider,
        SpotifyHTTPClient,
        SpotifyAPI,
    )

    credentials = SpotifyCredentials.from_flask_config(app.config)
    provider = ClientCredentialsTokenProvider(credentials)
    api = SpotifyAPI(SpotifyHTTPClient(provider), market="US")
    items = api.search_playlists('genre:"jazz"', limit=25)
"""

# Credentials (for dependency injection)
from .credentials import SpotifyCredentials

# Auth (token management)
from .auth import ClientCredentialsTokenProvider, TokenInfo

# HTTP and API (data operations)
from .http_client import SpotifyHTTPClient
from .api import SpotifyAPI

# Errors and retry policy
from .error_handling import (
    ErrorKind,
    NormalizedError,
    RetryPolicy,
    normalize_error,
    is_retryable_status,
)

# Adapters
from .adapters import (
    adapt_playlist,
    adapt_owner,
    adapt_genres,
    safe_adapt_playlist,
)

# Exceptions
from .exceptions import (
    SpotifyError,
    SpotifyConfigurationError,
    SpotifyAuthError,
    SpotifyAPIError,
    SpotifyBadRequestError,
    SpotifyForbiddenError,
    SpotifyNotFoundError,
    SpotifyRateLimitError,
    SpotifyUnavailableError,
)


__all__ = [
    # Credentials
    'SpotifyCredentials',

    # Auth
    'ClientCredentialsTokenProvider',
    'TokenInfo',

    # HTTP / API
    'SpotifyHTTPClient',
    'SpotifyAPI',

    # Errors and retry policy
    'ErrorKind',
    'NormalizedError',
    'RetryPolicy',
    'normalize_error',
    'is_retryable_status',

    # Adapters
    'adapt_playlist',
    'adapt_owner',
    'adapt_genres',
    'safe_adapt_playlist',

    # Exceptions
    'SpotifyError',
    'SpotifyConfigurationError',
    'SpotifyAuthError',
    'SpotifyAPIError',
    'SpotifyBadRequestError',
    'SpotifyForbiddenError',
    'SpotifyNotFoundError',
    'SpotifyRateLimitError',
    'SpotifyUnavailableError',
]
