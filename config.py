import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration."""
    SPOTIFY_CLIENT_ID = os.getenv('SPOTIFY_CLIENT_ID')
    SPOTIFY_CLIENT_SECRET = os.getenv('SPOTIFY_CLIENT_SECRET')
    SPOTIFY_MARKET = os.getenv('SPOTIFY_MARKET', 'US')
    SPOTIFY_REQUEST_TIMEOUT = float(os.getenv('SPOTIFY_REQUEST_TIMEOUT', 30))

    # Retry with capped exponential backoff (seconds)
    SPOTIFY_MAX_RETRIES = int(os.getenv('SPOTIFY_MAX_RETRIES', 4))
    SPOTIFY_RETRY_BASE_DELAY = float(os.getenv('SPOTIFY_RETRY_BASE_DELAY', 2))
    SPOTIFY_RETRY_MAX_DELAY = float(os.getenv('SPOTIFY_RETRY_MAX_DELAY', 16))
    SPOTIFY_RETRY_MULTIPLIER = float(os.getenv('SPOTIFY_RETRY_MULTIPLIER', 2))

    # Caches
    TOKEN_EXPIRY_BUFFER = int(os.getenv('TOKEN_EXPIRY_BUFFER', 300))  # 5 minutes
    GENRE_CACHE_TTL = int(os.getenv('GENRE_CACHE_TTL', 3600))  # 1 hour

    # Search
    SEARCH_STRATEGY = os.getenv('SEARCH_STRATEGY', 'per_genre')
    SEARCH_MAX_WORKERS = int(os.getenv('SEARCH_MAX_WORKERS', 5))
    SEARCH_FETCH_MISSING_FOLLOWERS = _env_flag('SEARCH_FETCH_MISSING_FOLLOWERS')

    # Application settings
    DEBUG = False
    TESTING = False
    EXPOSE_ERROR_DETAILS = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    PORT = int(os.getenv('PORT', 8000))
    HOST = os.getenv('HOST', '0.0.0.0')


class ProductionConfig(Config):
    """Production configuration."""
    # Raw upstream errors never reach clients in production
    EXPOSE_ERROR_DETAILS = False


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False
    EXPOSE_ERROR_DETAILS = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')
    PORT = 8000
    HOST = 'localhost'


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    EXPOSE_ERROR_DETAILS = True
    # No real backoff sleeps in tests
    SPOTIFY_MAX_RETRIES = 0
    PORT = 8000
    HOST = 'localhost'


# Dictionary for easy config selection
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

REQUIRED_ENV_VARS = ('SPOTIFY_CLIENT_ID', 'SPOTIFY_CLIENT_SECRET')


def validate_required_env_vars():
    """
    Check that required environment variables are set.

    Raises:
        ValueError: Listing every missing variable.
    """
    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing)}"
        )
