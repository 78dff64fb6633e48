"""
Spotify API data operations.

Handles the read-only catalog operations Playlist Scout needs: search,
playlist lookups, and the genre seed list. Authentication and
retries are delegated to the HTTP client.
"""

import logging
from typing import Any, Dict, List, Optional

from .http_client import SpotifyHTTPClient

logger = logging.getLogger(__name__)

# Spotify caps search page size at 50
MAX_SEARCH_LIMIT = 50
DEFAULT_MARKET = "US"


class SpotifyAPI:
    """
    Spotify Web API client for public catalog data.

    Example:
        credentials = SpotifyCredentials.from_flask_config(app.config)
        provider = ClientCredentialsTokenProvider(credentials)
        api = SpotifyAPI(SpotifyHTTPClient(provider))
        items = api.search_playlists('genre:"rock"', limit=20)
    """

    def __init__(self, http_client: SpotifyHTTPClient, market: str = DEFAULT_MARKET):
        """
        Initialize the API client.

        Args:
            http_client: Authenticated HTTP client.
            market: ISO country code sent with search requests.
        """
        self._http = http_client
        self._market = market

    @property
    def market(self) -> str:
        return self._market

    def close(self) -> None:
        self._http.close()

    # =========================================================================
    # Search
    # =========================================================================

    def search(
        self,
        query: str,
        search_type: str = "playlist",
        limit: int = 20,
        offset: int = 0,
        market: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Run a catalog search and return the raw response.

        Args:
            query: Spotify search query string.
            search_type: Comma-separated item types.
            limit: Page size; clamped to 1..50.
            offset: Index of the first item.
            market: Overrides the default market.

        Raises:
            SpotifyAPIError: If the request fails.
        """
        params = {
            "q": query,
            "type": search_type,
            "limit": max(1, min(limit, MAX_SEARCH_LIMIT)),
            "offset": offset,
            "market": market or self._market,
        }
        logger.debug("Spotify search: %s", params)
        return self._http.get("/search", params=params) or {}

    def search_playlists(
        self, query: str, limit: int = 20, offset: int = 0
    ) -> List[Any]:
        """
        Search for playlists and return the raw items.

        Items may include nulls; callers are expected to adapt them
        defensively.
        """
        response = self.search(query, search_type="playlist", limit=limit, offset=offset)
        page = response.get("playlists") or {}
        items = page.get("items") or []
        logger.debug(
            "Search '%s' returned %d playlists (total %s)",
            query, len(items), page.get("total"),
        )
        return items

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_playlist(
        self, playlist_id: str, fields: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Get a single playlist by ID.

        Raises:
            SpotifyNotFoundError: If playlist doesn't exist.
            SpotifyAPIError: If the request fails.
        """
        params = {"market": self._market}
        if fields:
            params["fields"] = fields
        return self._http.get(f"/playlists/{playlist_id}", params=params)

    def get_available_genre_seeds(self) -> Dict[str, Any]:
        """
        Get the genre seed list.

        Spotify has deprecated this endpoint for new apps, which then
        receive 404 or 403.
        """
        return self._http.get("/recommendations/available-genre-seeds") or {}
