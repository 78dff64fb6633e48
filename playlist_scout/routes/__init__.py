"""
Flask routes package for Playlist Scout.

This module handles HTTP requests and responses only.
All business logic is delegated to the services layer.

The single `main` Blueprint is split across feature modules for
navigability. All modules import `main` from this package and
register routes on it.
"""

import logging
from typing import Optional

from flask import Blueprint, current_app, jsonify, request

logger = logging.getLogger(__name__)
main = Blueprint("main", __name__, url_prefix="/api")


# =============================================================================
# Helper Functions (shared across all route modules)
# =============================================================================


def error_details(detail: Optional[object]) -> Optional[object]:
    """Return ``detail`` only when the app is allowed to expose it."""
    if detail is None or not current_app.config.get("EXPOSE_ERROR_DETAILS", False):
        return None
    return detail


def json_error(
    error: str, message: str, status_code: int = 400, details: object = None
) -> tuple:
    """Return a JSON error response of the form ``{error, message, details?}``."""
    body = {"error": error, "message": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status_code


def get_json_body() -> dict:
    """
    Return the JSON request body as a dict.

    Anything that is not a JSON object is treated as an empty body so
    that schema validation reports the missing fields.
    """
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# =============================================================================
# Import route modules to register their routes on the blueprint.
# These imports MUST come after the `main` Blueprint and helpers are
# defined, since each module does `from playlist_scout.routes import main`.
# =============================================================================

from playlist_scout.routes import (  # noqa: E402, F401
    core,
    genres,
    search,
)
