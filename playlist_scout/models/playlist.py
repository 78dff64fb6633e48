from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaylistOwner:
    """The Spotify user who owns a playlist."""

    id: str
    username: str
    display_name: str
    profile_url: str
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert PlaylistOwner to the JSON shape the browser client expects."""
        result = {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name,
            "profileUrl": self.profile_url,
        }
        if self.image_url:
            result["imageUrl"] = self.image_url
        return result


@dataclass(frozen=True)
class Playlist:
    """A public Spotify playlist found by a genre search."""

    id: str
    name: str
    url: str
    follower_count: int
    track_count: int
    owner: PlaylistOwner
    description: Optional[str] = None
    image_url: Optional[str] = None
    genres: Tuple[str, ...] = field(default_factory=tuple)
    is_public: bool = True

    def __post_init__(self) -> None:
        if not self.id:
            logger.error("Playlist ID is required")
            raise ValueError("Playlist ID is required")
        if self.follower_count < 0:
            raise ValueError("follower_count cannot be negative")
        if self.track_count < 0:
            raise ValueError("track_count cannot be negative")
        # Accept any iterable of genres but store a tuple
        object.__setattr__(self, "genres", tuple(self.genres))

    def to_dict(self) -> Dict[str, Any]:
        """Convert Playlist to dictionary, omitting absent optionals."""
        result = {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "followerCount": self.follower_count,
            "trackCount": self.track_count,
            "owner": self.owner.to_dict(),
            "genres": list(self.genres),
            "isPublic": self.is_public,
        }
        if self.description:
            result["description"] = self.description
        if self.image_url:
            result["imageUrl"] = self.image_url
        return result

    def __str__(self) -> str:
        return f"{self.name} ({self.id}) - {self.follower_count} followers"
