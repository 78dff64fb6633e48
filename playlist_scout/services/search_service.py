"""
Playlist search service.

Fans out genre searches to Spotify, then merges, deduplicates,
filters, sorts, and truncates the results.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from playlist_scout.models.playlist import Playlist
from playlist_scout.models.search import GenreSearchOutcome, SearchCriteria, SearchResult
from playlist_scout.services.genre_service import GenreService
from playlist_scout.spotify.adapters import safe_adapt_playlist
from playlist_scout.spotify.api import MAX_SEARCH_LIMIT, SpotifyAPI
from playlist_scout.spotify.error_handling import NormalizedError, normalize_error
from playlist_scout.spotify.exceptions import SpotifyConfigurationError, SpotifyError

logger = logging.getLogger(__name__)

STRATEGY_PER_GENRE = "per_genre"
STRATEGY_COMBINED = "combined"
STRATEGIES = (STRATEGY_PER_GENRE, STRATEGY_COMBINED)

DEFAULT_MAX_WORKERS = 5


class PlaylistSearchError(Exception):
    """Raised when a search fails upstream as a whole."""

    def __init__(self, message: str, normalized: NormalizedError = None):
        super().__init__(message)
        self.normalized = normalized or normalize_error(self)


def genre_query(genre: str) -> str:
    """Spotify search query restricting results to one genre."""
    return f'genre:"{genre}"'


def combined_genre_query(genres: Iterable[str]) -> str:
    return " OR ".join(genre_query(g) for g in genres)


def per_genre_limit(limit: int, genre_count: int) -> int:
    """Each genre's share of the overall limit, capped at Spotify's page size."""
    return min(math.ceil(limit / max(genre_count, 1)), MAX_SEARCH_LIMIT)


def merge_playlists(
    batches: Iterable[Iterable[Playlist]], min_follower_count: float
) -> Dict[str, Playlist]:
    """
    Merge playlist batches into a dict keyed by playlist id.

    Later batches overwrite earlier ones on duplicate ids. Playlists
    below the follower threshold are dropped.
    """
    merged: Dict[str, Playlist] = {}
    for batch in batches:
        for playlist in batch:
            if playlist.follower_count < min_follower_count:
                continue
            merged[playlist.id] = playlist
    return merged


def rank_playlists(playlists: Iterable[Playlist], limit: int) -> List[Playlist]:
    """Sort by followers descending, then id ascending, and keep ``limit``."""
    ranked = sorted(playlists, key=lambda p: (-p.follower_count, p.id))
    return ranked[:limit]


class PlaylistSearchService:
    """Service for finding playlists by genre and popularity."""

    def __init__(
        self,
        api: SpotifyAPI,
        genre_service: GenreService,
        strategy: str = STRATEGY_PER_GENRE,
        max_workers: int = DEFAULT_MAX_WORKERS,
        fetch_missing_followers: bool = False,
    ):
        """
        Initialize the search service.

        Args:
            api: Spotify API client.
            genre_service: Validates genre selections.
            strategy: ``per_genre`` (best effort, one search per genre)
                or ``combined`` (one OR query, fails as a whole).
            max_workers: Thread pool size for per-genre searches.
            fetch_missing_followers: Look up follower counts that search
                results leave out.
        """
        if strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown search strategy '{strategy}'. "
                f"Valid options: {', '.join(STRATEGIES)}"
            )
        self._api = api
        self._genre_service = genre_service
        self._strategy = strategy
        self._max_workers = max(1, max_workers)
        self._fetch_missing_followers = fetch_missing_followers

    @property
    def strategy(self) -> str:
        return self._strategy

    def search_playlists_by_genres(self, criteria: SearchCriteria) -> SearchResult:
        """
        Find playlists for the criteria's genres.

        Returns:
            SearchResult with at most ``criteria.limit`` playlists, each
            with at least ``criteria.min_follower_count`` followers.

        Raises:
            GenreValidationError: If the genre selection is empty or too large.
            InvalidGenresError: If any genre is unknown.
            GenreServiceError: If the genre list cannot be loaded.
            SpotifyConfigurationError: If Spotify credentials are missing.
            PlaylistSearchError: If the combined search fails, or every
                per-genre search fails. A partial failure is absorbed
                and only shows up in ``SearchResult.outcomes``.
        """
        genres = self._genre_service.require_valid_genres(criteria.genres)

        if self._strategy == STRATEGY_COMBINED:
            batches, outcomes = self._search_combined(genres, criteria.limit)
        else:
            batches, outcomes = self._search_per_genre(genres, criteria.limit)

        merged = merge_playlists(batches, criteria.min_follower_count)
        playlists = rank_playlists(merged.values(), criteria.limit)

        result = SearchResult(
            playlists=tuple(playlists),
            total_found=len(playlists),
            search_criteria=criteria,
            timestamp=datetime.now(timezone.utc),
            outcomes=tuple(outcomes),
        )
        logger.info(
            "Search for %s found %d playlists (%d/%d genre searches succeeded)",
            ", ".join(genres), result.total_found,
            result.succeeded_searches, len(outcomes),
        )
        return result

    # =========================================================================
    # Strategies
    # =========================================================================

    def _search_per_genre(
        self, genres: List[str], limit: int
    ) -> Tuple[List[List[Playlist]], List[GenreSearchOutcome]]:
        page_size = per_genre_limit(limit, len(genres))
        workers = min(self._max_workers, len(genres))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._search_one_genre, genre, page_size)
                for genre in genres
            ]
            # Results are read in genre order so duplicate ids resolve
            # the same way on every run.
            settled = [future.result() for future in futures]

        errors = [error for _, _, error in settled if error is not None]
        if errors and len(errors) == len(settled):
            normalized = normalize_error(errors[0])
            raise PlaylistSearchError(normalized.user_message, normalized) from errors[0]

        batches = [playlists for playlists, _, _ in settled]
        outcomes = [outcome for _, outcome, _ in settled]
        return batches, outcomes

    def _search_one_genre(
        self, genre: str, page_size: int
    ) -> Tuple[List[Playlist], GenreSearchOutcome, Optional[Exception]]:
        try:
            items = self._api.search_playlists(genre_query(genre), limit=page_size)
            playlists = self._adapt_items(items, [genre])
        except SpotifyConfigurationError:
            raise
        except Exception as e:
            logger.error("Failed to search for genre '%s': %s", genre, e)
            outcome = GenreSearchOutcome(genre=genre, succeeded=False, error=str(e))
            return [], outcome, e

        outcome = GenreSearchOutcome(
            genre=genre, succeeded=True, playlist_count=len(playlists)
        )
        return playlists, outcome, None

    def _search_combined(
        self, genres: List[str], limit: int
    ) -> Tuple[List[List[Playlist]], List[GenreSearchOutcome]]:
        query = combined_genre_query(genres)
        try:
            items = self._api.search_playlists(query, limit=min(limit, MAX_SEARCH_LIMIT))
            playlists = self._adapt_items(items, genres)
        except SpotifyConfigurationError:
            raise
        except SpotifyError as e:
            normalized = normalize_error(e)
            logger.error("Combined playlist search failed: %s", e)
            raise PlaylistSearchError(normalized.user_message, normalized) from e

        outcome = GenreSearchOutcome(
            genre=", ".join(genres), succeeded=True, playlist_count=len(playlists)
        )
        return [playlists], [outcome]

    # =========================================================================
    # Helpers
    # =========================================================================

    def _adapt_items(self, items: List[Any], genres: List[str]) -> List[Playlist]:
        if self._fetch_missing_followers:
            items = [self._with_followers(item) for item in items]

        playlists = []
        for item in items:
            playlist = safe_adapt_playlist(item, genres)
            if playlist is not None:
                playlists.append(playlist)
        return playlists

    def _with_followers(self, item: Any) -> Any:
        if not isinstance(item, dict) or item.get("followers") or not item.get("id"):
            return item
        try:
            details = self._api.get_playlist(item["id"], fields="followers(total)")
        except SpotifyError as e:
            logger.warning("Could not fetch followers for playlist %s: %s", item["id"], e)
            return item
        return {**item, "followers": (details or {}).get("followers")}
