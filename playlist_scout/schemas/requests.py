"""
Request validation schemas using Pydantic.

Provides type-safe validation for API request bodies.
"""

import math
from typing import Annotated, List, Union

from pydantic import (
    BaseModel,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from playlist_scout.models.search import (
    DEFAULT_LIMIT,
    MAX_GENRES,
    MAX_LIMIT,
    SearchCriteria,
)

# Shown to clients alongside shape errors
SEARCH_REQUEST_EXPECTED = {
    "genres": f"array of 1-{MAX_GENRES} non-empty strings",
    "minFollowerCount": "number >= 0",
    "limit": f"optional integer 1-{MAX_LIMIT} (default {DEFAULT_LIMIT})",
}


class SearchPlaylistsRequest(BaseModel):
    """Schema for POST /api/search/playlists.

    Numbers are strict: strings and booleans are rejected rather than
    coerced.
    """

    genres: Annotated[
        List[StrictStr], Field(min_length=1, max_length=MAX_GENRES)
    ]
    min_follower_count: Annotated[
        Union[StrictInt, StrictFloat], Field(alias="minFollowerCount")
    ]
    limit: Annotated[StrictInt, Field(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT

    class Config:
        extra = "ignore"
        populate_by_name = True

    @field_validator("genres")
    @classmethod
    def validate_genres_not_blank(cls, v: List[str]) -> List[str]:
        """Reject empty or whitespace-only genre labels."""
        if any(not g.strip() for g in v):
            raise ValueError("Genre names cannot be empty")
        return v

    @field_validator("min_follower_count")
    @classmethod
    def validate_min_follower_count(cls, v: Union[int, float]) -> Union[int, float]:
        if not math.isfinite(v) or v < 0:
            raise ValueError("Minimum follower count must be a number >= 0")
        return v

    def to_criteria(self) -> SearchCriteria:
        return SearchCriteria(
            genres=tuple(self.genres),
            min_follower_count=self.min_follower_count,
            limit=self.limit,
        )
