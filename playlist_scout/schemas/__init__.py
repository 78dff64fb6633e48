"""
Pydantic schemas for request validation.
"""

from pydantic import ValidationError

from .requests import (
    SearchPlaylistsRequest,
    SEARCH_REQUEST_EXPECTED,
)

__all__ = [
    "ValidationError",
    "SearchPlaylistsRequest",
    "SEARCH_REQUEST_EXPECTED",
]
