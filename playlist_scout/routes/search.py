"""
Search routes: find playlists by genre and follower count.
"""

import logging

from flask import jsonify

from playlist_scout.routes import get_json_body, main
from playlist_scout.schemas import SearchPlaylistsRequest
from playlist_scout.services.registry import get_services

logger = logging.getLogger(__name__)


@main.route("/search/playlists", methods=["POST"])
def search_playlists():
    """
    Search playlists for the posted genres.

    Body: ``{genres, minFollowerCount, limit?}``. Shape errors raise
    pydantic's ValidationError; upstream failures raise service errors.
    Both are rendered by the global error handlers.
    """
    body = SearchPlaylistsRequest.model_validate(get_json_body())
    criteria = body.to_criteria()

    logger.info(
        "Playlist search: genres=%s minFollowerCount=%s limit=%d",
        list(criteria.genres), criteria.min_follower_count, criteria.limit,
    )
    result = get_services().search.search_playlists_by_genres(criteria)
    return jsonify(result.to_dict())
