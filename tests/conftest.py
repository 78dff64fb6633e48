"""
Pytest configuration and shared fixtures for Playlist Scout tests.

This module provides common fixtures used across all test modules,
including a controllable clock, sample Spotify payloads, and Flask
app contexts.
"""

import pytest
from unittest.mock import Mock, MagicMock


# =============================================================================
# Helpers
# =============================================================================

class FakeClock:
    """A manually advanced clock for TTL tests."""

    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_playlist_item(playlist_id, followers, name=None, **overrides):
    """Build a search-result playlist item as Spotify returns it."""
    item = {
        'id': playlist_id,
        'name': name or f'Playlist {playlist_id}',
        'description': f'Description for {playlist_id}',
        'external_urls': {'spotify': f'https://open.spotify.com/playlist/{playlist_id}'},
        'followers': {'total': followers},
        'tracks': {'total': 42},
        'images': [{'url': f'https://i.scdn.co/image/{playlist_id}', 'height': 640, 'width': 640}],
        'owner': {
            'id': 'curator',
            'display_name': 'The Curator',
            'external_urls': {'spotify': 'https://open.spotify.com/user/curator'},
        },
        'public': True,
    }
    item.update(overrides)
    return item


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def fake_clock():
    """A clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def sample_token_response():
    """A client-credentials token endpoint payload."""
    return {
        'access_token': 'test_access_token_12345',
        'token_type': 'Bearer',
        'expires_in': 3600,
    }


@pytest.fixture
def sample_playlist_item():
    """A well-formed playlist item from a search response."""
    return make_playlist_item('pl_rock_1', 1500, name='Rock Classics')


@pytest.fixture
def sample_genres():
    """A small genre seed list."""
    return ['classical', 'hip-hop', 'jazz', 'pop', 'rock']


@pytest.fixture
def mock_spotify_api(sample_genres):
    """A mock SpotifyAPI that returns no playlists by default."""
    api = Mock()
    api.market = 'US'
    api.get_available_genre_seeds.return_value = {'genres': list(sample_genres)}
    api.search_playlists.return_value = []
    api.get_playlist.return_value = {'followers': {'total': 0}}
    return api


# =============================================================================
# Flask App Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Create a Flask application for testing."""
    import os
    os.environ['SPOTIFY_CLIENT_ID'] = 'test_client_id'
    os.environ['SPOTIFY_CLIENT_SECRET'] = 'test_client_secret'

    from playlist_scout import create_app
    app = create_app('testing')
    app.config['TESTING'] = True

    return app


@pytest.fixture
def app_context(app):
    """Provide Flask application context."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Provide Flask test client."""
    return app.test_client()


@pytest.fixture
def mock_services(app):
    """Replace the app's service graph with mocks."""
    from playlist_scout.services.registry import EXTENSION_KEY, Services

    services = Services(
        token_provider=MagicMock(),
        api=MagicMock(),
        genres=MagicMock(),
        search=MagicMock(),
    )
    services.token_provider.status.return_value = {'cached': False}
    services.genres.cache.status.return_value = {'cached': False, 'expiresAt': None}
    app.extensions[EXTENSION_KEY] = services
    return services
