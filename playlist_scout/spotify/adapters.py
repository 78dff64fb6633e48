"""
Adapters from Spotify Web API payloads to Playlist Scout models.

Raw payloads are parsed into pydantic models first, so a record either
comes out typed or fails with a ValidationError. The adapt functions
then map the typed records onto the domain dataclasses.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr, ValidationError

from playlist_scout.models.playlist import Playlist, PlaylistOwner

logger = logging.getLogger(__name__)


# =============================================================================
# External payload schemas
# =============================================================================


class SpotifyImageObject(BaseModel):
    url: StrictStr
    height: Optional[int] = None
    width: Optional[int] = None


class SpotifyExternalUrls(BaseModel):
    spotify: StrictStr = Field(..., min_length=1)


class SpotifyFollowers(BaseModel):
    total: StrictInt = Field(..., ge=0)


class SpotifyTracksRef(BaseModel):
    total: StrictInt = Field(default=0, ge=0)


class SpotifyUserObject(BaseModel):
    """A user reference as embedded in playlist objects."""

    id: StrictStr = Field(..., min_length=1)
    display_name: Optional[str] = None
    external_urls: SpotifyExternalUrls
    images: Optional[List[SpotifyImageObject]] = None


class SpotifyPlaylistObject(BaseModel):
    """
    A playlist as returned by search or the playlist endpoint.

    Search results may omit ``tracks`` and carry ``public: null``; both
    are accepted. ``followers`` is required since the follower filter
    depends on it.
    """

    id: StrictStr = Field(..., min_length=1)
    name: StrictStr
    description: Optional[str] = None
    external_urls: SpotifyExternalUrls
    followers: SpotifyFollowers
    tracks: Optional[SpotifyTracksRef] = None
    images: Optional[List[SpotifyImageObject]] = None
    owner: SpotifyUserObject
    public: Optional[StrictBool] = None


class SpotifyGenreSeeds(BaseModel):
    genres: List[StrictStr] = Field(default_factory=list)


PlaylistPayload = Union[SpotifyPlaylistObject, Dict[str, Any]]
UserPayload = Union[SpotifyUserObject, Dict[str, Any]]


# =============================================================================
# Adapters
# =============================================================================


def _first_image_url(images: Optional[Sequence[SpotifyImageObject]]) -> Optional[str]:
    # Spotify lists images largest first
    if not images:
        return None
    return images[0].url or None


def parse_playlist(raw: PlaylistPayload) -> SpotifyPlaylistObject:
    """
    Parse a raw playlist payload.

    Raises:
        ValidationError: If required fields are missing or mistyped.
    """
    if isinstance(raw, SpotifyPlaylistObject):
        return raw
    return SpotifyPlaylistObject.model_validate(raw)


def adapt_owner(external: UserPayload) -> PlaylistOwner:
    """
    Convert a Spotify user reference to a PlaylistOwner.

    Spotify exposes no separate handle, so the id doubles as username,
    and stands in for a missing display name.
    """
    if not isinstance(external, SpotifyUserObject):
        external = SpotifyUserObject.model_validate(external)

    return PlaylistOwner(
        id=external.id,
        username=external.id,
        display_name=external.display_name or external.id,
        profile_url=external.external_urls.spotify,
        image_url=_first_image_url(external.images),
    )


def adapt_playlist(
    external: PlaylistPayload, context_genres: Iterable[str] = ()
) -> Playlist:
    """
    Convert a Spotify playlist payload to a Playlist.

    Args:
        external: Raw dict or parsed SpotifyPlaylistObject.
        context_genres: Genres of the search that found the playlist.
            Spotify does not tag playlists with genres.

    Raises:
        ValidationError: If the payload does not parse.
    """
    parsed = parse_playlist(external)
    return Playlist(
        id=parsed.id,
        name=parsed.name,
        description=parsed.description or None,
        url=parsed.external_urls.spotify,
        follower_count=parsed.followers.total,
        track_count=parsed.tracks.total if parsed.tracks else 0,
        image_url=_first_image_url(parsed.images),
        owner=adapt_owner(parsed.owner),
        genres=tuple(context_genres),
        is_public=True if parsed.public is None else parsed.public,
    )


def safe_adapt_playlist(
    raw: Any, context_genres: Iterable[str] = ()
) -> Optional[Playlist]:
    """
    Adapt a playlist payload, returning None if it is malformed.

    Search results occasionally contain null entries or objects missing
    followers/owner data; one bad record must not break a whole search.
    """
    if not isinstance(raw, (dict, SpotifyPlaylistObject)):
        logger.warning("Skipping non-object playlist entry: %r", raw)
        return None

    try:
        return adapt_playlist(raw, context_genres)
    except ValidationError as e:
        playlist_id = raw.get("id") if isinstance(raw, dict) else None
        logger.warning(
            "Invalid playlist data received from Spotify (id=%s): %d field error(s)",
            playlist_id, e.error_count(),
        )
        return None
    except ValueError as e:
        logger.error("Error adapting playlist: %s", e)
        return None


def adapt_genres(external: Union[SpotifyGenreSeeds, Dict[str, Any], None]) -> List[str]:
    """Extract genre labels from a genre-seeds payload."""
    if external is None:
        return []
    if not isinstance(external, SpotifyGenreSeeds):
        external = SpotifyGenreSeeds.model_validate(external)
    return list(external.genres)
