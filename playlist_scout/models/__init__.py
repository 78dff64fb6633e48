from .playlist import Playlist, PlaylistOwner
from .search import (
    SearchCriteria,
    SearchResult,
    GenreSearchOutcome,
    MAX_GENRES,
    MAX_LIMIT,
    DEFAULT_LIMIT,
)

__all__ = [
    "Playlist",
    "PlaylistOwner",
    "SearchCriteria",
    "SearchResult",
    "GenreSearchOutcome",
    "MAX_GENRES",
    "MAX_LIMIT",
    "DEFAULT_LIMIT",
]
