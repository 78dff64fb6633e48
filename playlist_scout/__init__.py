import atexit
import os
import logging

from flask import Flask

from config import config, validate_required_env_vars

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(level)


def create_app(config_name=None):
    """Create and configure the Flask application."""
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "production")

    # Unknown names fall back to production settings
    if not isinstance(config_name, str) or config_name not in config:
        config_name = "production"

    _configure_logging(config[config_name].LOG_LEVEL)
    logger.info("Creating app with config: %s", config_name)

    # Validate required environment variables
    try:
        validate_required_env_vars()
        logger.info("Environment validation passed")
    except ValueError as e:
        logger.error("Environment validation failed: %s", str(e))
        if config_name == "production":
            raise  # Fail fast in production
        else:
            logger.warning(
                "Continuing in %s mode with missing environment variables",
                config_name,
            )

    app = Flask(__name__)

    # Load config
    app.config.from_object(config[config_name])
    app.config["CONFIG_NAME"] = config_name

    # Log important config values
    logger.info("SPOTIFY_MARKET: %s", app.config.get("SPOTIFY_MARKET"))
    logger.info("SEARCH_STRATEGY: %s", app.config.get("SEARCH_STRATEGY"))

    # Shared Spotify objects (token cache, genre cache, services)
    from playlist_scout.services.registry import EXTENSION_KEY, build_services

    services = build_services(app.config)
    app.extensions[EXTENSION_KEY] = services

    # Close the Spotify session on interpreter shutdown
    atexit.register(services.close)

    # Register blueprints
    from playlist_scout.routes import main as main_blueprint

    app.register_blueprint(main_blueprint)

    # Register global error handlers
    from playlist_scout.error_handlers import register_error_handlers

    register_error_handlers(app)

    return app
