"""
Search value objects: the criteria a user submits and the result
returned for it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple

from playlist_scout.models.playlist import Playlist

MAX_GENRES = 10
MAX_LIMIT = 50
DEFAULT_LIMIT = 50


@dataclass(frozen=True)
class SearchCriteria:
    """
    Genres, follower threshold, and result limit for one search.

    Raises:
        ValueError: If any field is out of range.
    """

    genres: Tuple[str, ...]
    min_follower_count: float = 0
    limit: int = DEFAULT_LIMIT

    def __post_init__(self) -> None:
        object.__setattr__(self, "genres", tuple(self.genres))
        if not 1 <= len(self.genres) <= MAX_GENRES:
            raise ValueError(
                f"Between 1 and {MAX_GENRES} genres are required, "
                f"got {len(self.genres)}"
            )
        if self.min_follower_count < 0:
            raise ValueError("Minimum follower count cannot be negative")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise ValueError(f"Limit must be between 1 and {MAX_LIMIT}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "genres": list(self.genres),
            "minFollowerCount": self.min_follower_count,
            "limit": self.limit,
        }


@dataclass(frozen=True)
class GenreSearchOutcome:
    """How one genre's upstream search went."""

    genre: str
    succeeded: bool
    playlist_count: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class SearchResult:
    """Playlists matching a SearchCriteria, already filtered and sorted."""

    playlists: Tuple[Playlist, ...]
    total_found: int
    search_criteria: SearchCriteria
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    outcomes: Tuple[GenreSearchOutcome, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "playlists", tuple(self.playlists))
        object.__setattr__(self, "outcomes", tuple(self.outcomes))

    @property
    def succeeded_searches(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed_genres(self) -> Sequence[str]:
        return [o.genre for o in self.outcomes if not o.succeeded]

    def to_dict(self) -> Dict[str, Any]:
        """Response body for the search endpoint."""
        return {
            "playlists": [p.to_dict() for p in self.playlists],
            "totalFound": self.total_found,
            "searchCriteria": self.search_criteria.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }
