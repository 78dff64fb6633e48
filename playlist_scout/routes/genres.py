"""
Genre routes: list the genres a search may use.
"""

import logging

from flask import jsonify

from playlist_scout.routes import main
from playlist_scout.services.registry import get_services

logger = logging.getLogger(__name__)


@main.route("/genres", methods=["GET"])
def list_genres():
    """
    Return the cached genre list.

    Failures are raised as GenreServiceError and rendered by the global
    error handlers.
    """
    genres = get_services().genres.get_available_genres()
    logger.debug("Serving %d genres", len(genres))
    return jsonify({"genres": genres})
