"""
Core routes: health check.
"""

import logging
from datetime import datetime, timezone

from flask import jsonify

from playlist_scout.routes import main
from playlist_scout.services.registry import get_services

logger = logging.getLogger(__name__)


@main.route("/health")
def health():
    """Health check endpoint with cache status; never calls Spotify."""
    services = get_services()
    return jsonify({
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "tokenCache": services.token_provider.status(),
        "genreCache": services.genres.cache.status(),
    }), 200
