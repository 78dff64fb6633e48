"""
Tests for GET /api/genres.
"""

from playlist_scout.services.genre_service import GenreServiceError
from playlist_scout.spotify.exceptions import (
    SpotifyConfigurationError,
    SpotifyRateLimitError,
    SpotifyUnavailableError,
)


class TestListGenres:
    """Tests for the genre list endpoint."""

    def test_returns_genres(self, client, mock_services):
        mock_services.genres.get_available_genres.return_value = ['jazz', 'rock']

        response = client.get('/api/genres')

        assert response.status_code == 200
        assert response.get_json() == {'genres': ['jazz', 'rock']}

    def test_fetch_failure_returns_500(self, client, mock_services):
        error = GenreServiceError('Failed to fetch available genres: boom')
        error.__cause__ = SpotifyUnavailableError('boom', status_code=502)
        mock_services.genres.get_available_genres.side_effect = error

        response = client.get('/api/genres')

        assert response.status_code == 500
        data = response.get_json()
        assert data['error'] == 'SPOTIFY_API_ERROR'
        assert data['message'] == 'Failed to fetch available genres. Please try again later.'
        assert 'details' in data

    def test_details_hidden_when_not_exposed(self, app, client, mock_services):
        app.config['EXPOSE_ERROR_DETAILS'] = False
        mock_services.genres.get_available_genres.side_effect = GenreServiceError('secret detail')

        response = client.get('/api/genres')

        assert response.status_code == 500
        assert 'details' not in response.get_json()
        assert b'secret detail' not in response.data

    def test_rate_limited_fetch_returns_500(self, client, mock_services):
        error = GenreServiceError('Failed to fetch available genres')
        error.__cause__ = SpotifyRateLimitError('Rate limited', retry_after=5)
        mock_services.genres.get_available_genres.side_effect = error

        response = client.get('/api/genres')

        assert response.status_code == 500
        data = response.get_json()
        assert data['error'] == 'SPOTIFY_API_ERROR'
        assert data['message'] == 'Failed to fetch available genres. Please try again later.'

    def test_missing_credentials_returns_configuration_error(self, client, mock_services):
        error = GenreServiceError('Failed to fetch available genres')
        error.__cause__ = SpotifyConfigurationError('credentials not configured')
        mock_services.genres.get_available_genres.side_effect = error

        response = client.get('/api/genres')

        assert response.status_code == 500
        assert response.get_json()['error'] == 'CONFIGURATION_ERROR'
