"""
Tests for PlaylistSearchService.

Tests cover the per-genre fan-out, the combined strategy, merging,
deduplication, filtering, ranking, and failure handling.
"""

import pytest

from conftest import make_playlist_item
from playlist_scout.models import SearchCriteria
from playlist_scout.services.genre_service import (
    GenreCache,
    GenreService,
    InvalidGenresError,
)
from playlist_scout.services.search_service import (
    PlaylistSearchError,
    PlaylistSearchService,
    STRATEGY_COMBINED,
    combined_genre_query,
    genre_query,
    merge_playlists,
    per_genre_limit,
    rank_playlists,
)
from playlist_scout.spotify.adapters import adapt_playlist
from playlist_scout.spotify.error_handling import ErrorKind
from playlist_scout.spotify.exceptions import (
    SpotifyConfigurationError,
    SpotifyRateLimitError,
    SpotifyUnavailableError,
)


# =============================================================================
# Helpers
# =============================================================================


def _playlist(playlist_id, followers):
    return adapt_playlist(make_playlist_item(playlist_id, followers))


def _search_by_genre(results):
    """Return a search_playlists side effect keyed by genre query."""
    def search_playlists(query, limit=20, offset=0):
        outcome = results[query]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
    return search_playlists


@pytest.fixture
def genre_service(sample_genres):
    return GenreService(GenreCache(lambda: sample_genres))


@pytest.fixture
def service(mock_spotify_api, genre_service):
    return PlaylistSearchService(mock_spotify_api, genre_service)


# =============================================================================
# Pure helpers
# =============================================================================


class TestQueryHelpers:
    """Tests for query construction and page sizing."""

    def test_genre_query(self):
        assert genre_query('hip-hop') == 'genre:"hip-hop"'

    def test_combined_query(self):
        assert combined_genre_query(['rock', 'jazz']) == 'genre:"rock" OR genre:"jazz"'

    @pytest.mark.parametrize('limit, genres, expected', [
        (50, 1, 50),
        (10, 2, 5),
        (10, 3, 4),
        (1, 10, 1),
        (50, 10, 5),
    ])
    def test_per_genre_limit(self, limit, genres, expected):
        assert per_genre_limit(limit, genres) == expected


class TestMergeAndRank:
    """Tests for merge_playlists and rank_playlists."""

    def test_merge_filters_below_threshold(self):
        merged = merge_playlists([[_playlist('a', 999), _playlist('b', 1000)]], 1000)
        assert list(merged) == ['b']

    def test_merge_last_write_wins(self):
        first = _playlist('dup', 100)
        second = _playlist('dup', 200)

        merged = merge_playlists([[first], [second]], 0)

        assert merged['dup'] is second

    def test_rank_sorts_by_followers_descending(self):
        ranked = rank_playlists([_playlist('a', 10), _playlist('b', 30), _playlist('c', 20)], 10)
        assert [p.follower_count for p in ranked] == [30, 20, 10]

    def test_rank_breaks_ties_by_id(self):
        ranked = rank_playlists([_playlist('z', 5), _playlist('a', 5), _playlist('m', 5)], 10)
        assert [p.id for p in ranked] == ['a', 'm', 'z']

    def test_rank_truncates(self):
        playlists = [_playlist(f'p{i}', i) for i in range(20)]
        assert len(rank_playlists(playlists, 5)) == 5


# =============================================================================
# Per-genre strategy
# =============================================================================


class TestPerGenreSearch:
    """Tests for the default per-genre strategy."""

    def test_end_to_end_rock_and_jazz(self, service, mock_spotify_api):
        mock_spotify_api.search_playlists.side_effect = _search_by_genre({
            'genre:"rock"': [
                make_playlist_item('rock_500', 500),
                make_playlist_item('rock_1500', 1500),
                make_playlist_item('rock_2000', 2000),
            ],
            'genre:"jazz"': [
                make_playlist_item('jazz_1200', 1200),
                make_playlist_item('jazz_900', 900),
            ],
        })
        criteria = SearchCriteria(genres=('rock', 'jazz'), min_follower_count=1000, limit=10)

        result = service.search_playlists_by_genres(criteria)

        assert [p.follower_count for p in result.playlists] == [2000, 1500, 1200]
        assert result.total_found == 3
        assert result.search_criteria == criteria
        assert result.succeeded_searches == 2

    def test_each_genre_gets_share_of_limit(self, service, mock_spotify_api):
        service.search_playlists_by_genres(SearchCriteria(genres=('rock', 'jazz'), limit=10))

        limits = sorted(c.kwargs['limit'] for c in mock_spotify_api.search_playlists.call_args_list)
        assert limits == [5, 5]

    def test_genres_are_normalized_before_search(self, service, mock_spotify_api):
        service.search_playlists_by_genres(SearchCriteria(genres=(' ROCK ',)))

        mock_spotify_api.search_playlists.assert_called_once_with('genre:"rock"', limit=50)

    def test_deduplicates_across_genres(self, service, mock_spotify_api):
        shared = make_playlist_item('shared', 5000)
        mock_spotify_api.search_playlists.side_effect = _search_by_genre({
            'genre:"rock"': [shared],
            'genre:"pop"': [shared, make_playlist_item('pop_only', 10)],
        })

        result = service.search_playlists_by_genres(SearchCriteria(genres=('rock', 'pop')))

        assert [p.id for p in result.playlists] == ['shared', 'pop_only']
        # Later genre wins the duplicate
        assert result.playlists[0].genres == ('pop',)

    def test_result_respects_limit(self, service, mock_spotify_api):
        mock_spotify_api.search_playlists.return_value = [
            make_playlist_item(f'p{i}', 100 + i) for i in range(8)
        ]

        result = service.search_playlists_by_genres(SearchCriteria(genres=('rock',), limit=3))

        assert [p.follower_count for p in result.playlists] == [107, 106, 105]

    def test_min_follower_boundary_is_inclusive(self, service, mock_spotify_api):
        mock_spotify_api.search_playlists.return_value = [
            make_playlist_item('exact', 1000),
            make_playlist_item('below', 999),
        ]

        result = service.search_playlists_by_genres(
            SearchCriteria(genres=('rock',), min_follower_count=1000)
        )

        assert [p.id for p in result.playlists] == ['exact']

    def test_malformed_items_are_skipped(self, service, mock_spotify_api):
        broken = make_playlist_item('broken', 5000)
        del broken['owner']
        mock_spotify_api.search_playlists.return_value = [
            None, broken, make_playlist_item('ok', 10)
        ]

        result = service.search_playlists_by_genres(SearchCriteria(genres=('rock',)))

        assert [p.id for p in result.playlists] == ['ok']

    def test_partial_failure_is_absorbed(self, service, mock_spotify_api):
        mock_spotify_api.search_playlists.side_effect = _search_by_genre({
            'genre:"rock"': SpotifyUnavailableError('down', status_code=503),
            'genre:"jazz"': [make_playlist_item('jazz_1', 10)],
        })

        result = service.search_playlists_by_genres(SearchCriteria(genres=('rock', 'jazz')))

        assert [p.id for p in result.playlists] == ['jazz_1']
        assert result.failed_genres == ['rock']
        assert result.succeeded_searches == 1

    def test_all_genres_failing_raises(self, service, mock_spotify_api):
        mock_spotify_api.search_playlists.side_effect = SpotifyRateLimitError(
            'Rate limited', retry_after=30
        )

        with pytest.raises(PlaylistSearchError) as exc_info:
            service.search_playlists_by_genres(SearchCriteria(genres=('rock', 'jazz')))

        assert exc_info.value.normalized.kind == ErrorKind.RATE_LIMITED

    def test_configuration_error_propagates(self, service, mock_spotify_api):
        mock_spotify_api.search_playlists.side_effect = SpotifyConfigurationError('no creds')

        with pytest.raises(SpotifyConfigurationError):
            service.search_playlists_by_genres(SearchCriteria(genres=('rock',)))

    def test_invalid_genres_rejected_before_search(self, service, mock_spotify_api):
        with pytest.raises(InvalidGenresError):
            service.search_playlists_by_genres(SearchCriteria(genres=('rock', 'polka')))

        mock_spotify_api.search_playlists.assert_not_called()

    def test_no_matches(self, service):
        result = service.search_playlists_by_genres(SearchCriteria(genres=('rock',)))

        assert result.playlists == ()
        assert result.total_found == 0


# =============================================================================
# Combined strategy
# =============================================================================


class TestCombinedSearch:
    """Tests for the single OR-query strategy."""

    @pytest.fixture
    def combined(self, mock_spotify_api, genre_service):
        return PlaylistSearchService(
            mock_spotify_api, genre_service, strategy=STRATEGY_COMBINED
        )

    def test_issues_one_query(self, combined, mock_spotify_api):
        mock_spotify_api.search_playlists.return_value = [make_playlist_item('p', 10)]

        result = combined.search_playlists_by_genres(
            SearchCriteria(genres=('rock', 'jazz'), limit=20)
        )

        mock_spotify_api.search_playlists.assert_called_once_with(
            'genre:"rock" OR genre:"jazz"', limit=20
        )
        assert result.playlists[0].genres == ('rock', 'jazz')

    def test_failure_aborts_search(self, combined, mock_spotify_api):
        mock_spotify_api.search_playlists.side_effect = SpotifyUnavailableError(
            'down', status_code=500
        )

        with pytest.raises(PlaylistSearchError) as exc_info:
            combined.search_playlists_by_genres(SearchCriteria(genres=('rock',)))

        assert exc_info.value.normalized.kind == ErrorKind.UPSTREAM_UNAVAILABLE


# =============================================================================
# Configuration
# =============================================================================


class TestServiceOptions:
    """Tests for constructor options."""

    def test_unknown_strategy_rejected(self, mock_spotify_api, genre_service):
        with pytest.raises(ValueError) as exc_info:
            PlaylistSearchService(mock_spotify_api, genre_service, strategy='magic')

        assert 'magic' in str(exc_info.value)

    def test_fetches_missing_followers_when_enabled(self, mock_spotify_api, genre_service):
        item = make_playlist_item('no_followers', 0)
        del item['followers']
        mock_spotify_api.search_playlists.return_value = [item]
        mock_spotify_api.get_playlist.return_value = {'followers': {'total': 4321}}
        service = PlaylistSearchService(
            mock_spotify_api, genre_service, fetch_missing_followers=True
        )

        result = service.search_playlists_by_genres(SearchCriteria(genres=('rock',)))

        mock_spotify_api.get_playlist.assert_called_once_with(
            'no_followers', fields='followers(total)'
        )
        assert result.playlists[0].follower_count == 4321

    def test_missing_followers_dropped_by_default(self, service, mock_spotify_api):
        item = make_playlist_item('no_followers', 0)
        del item['followers']
        mock_spotify_api.search_playlists.return_value = [item]

        result = service.search_playlists_by_genres(SearchCriteria(genres=('rock',)))

        assert result.playlists == ()
        mock_spotify_api.get_playlist.assert_not_called()

    def test_follower_lookup_failure_drops_item(self, mock_spotify_api, genre_service):
        item = make_playlist_item('no_followers', 0)
        del item['followers']
        mock_spotify_api.search_playlists.return_value = [item]
        mock_spotify_api.get_playlist.side_effect = SpotifyUnavailableError('down')
        service = PlaylistSearchService(
            mock_spotify_api, genre_service, fetch_missing_followers=True
        )

        result = service.search_playlists_by_genres(SearchCriteria(genres=('rock',)))

        assert result.playlists == ()

