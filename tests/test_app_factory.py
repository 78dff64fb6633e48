"""
Tests for the Flask app factory.

Tests cover config selection, environment validation, and service
registration.
"""

import os

import pytest
from unittest.mock import patch

from playlist_scout.services.registry import EXTENSION_KEY, Services, build_services


CREDENTIALS = {
    'SPOTIFY_CLIENT_ID': 'test_id',
    'SPOTIFY_CLIENT_SECRET': 'test_secret',
}


class TestCreateApp:
    """Tests for create_app function."""

    def test_create_app_development_config(self):
        """Should create app with development config."""
        with patch.dict(os.environ, CREDENTIALS):
            from playlist_scout import create_app
            app = create_app('development')

            assert app is not None
            assert app.config['DEBUG'] is True
            assert app.config['CONFIG_NAME'] == 'development'

    def test_create_app_uses_flask_env_default(self):
        """Should use FLASK_ENV when config_name not provided."""
        with patch.dict(os.environ, {**CREDENTIALS, 'FLASK_ENV': 'testing'}):
            from playlist_scout import create_app
            app = create_app()

            assert app.config['TESTING'] is True

    def test_unknown_config_name_uses_production(self):
        with patch.dict(os.environ, CREDENTIALS):
            from playlist_scout import create_app
            app = create_app('staging')

            assert app.config['CONFIG_NAME'] == 'production'
            assert app.config['EXPOSE_ERROR_DETAILS'] is False

    def test_registers_services(self):
        with patch.dict(os.environ, CREDENTIALS):
            from playlist_scout import create_app
            app = create_app('testing')

            assert isinstance(app.extensions[EXTENSION_KEY], Services)

    def test_registers_api_routes(self):
        with patch.dict(os.environ, CREDENTIALS):
            from playlist_scout import create_app
            app = create_app('testing')

            rules = {rule.rule for rule in app.url_map.iter_rules()}
            assert {'/api/genres', '/api/search/playlists', '/api/health'} <= rules

    def test_closes_services_at_exit(self):
        with patch.dict(os.environ, CREDENTIALS), \
                patch('playlist_scout.atexit.register') as register:
            from playlist_scout import create_app
            app = create_app('testing')

            register.assert_called_once_with(app.extensions[EXTENSION_KEY].close)


class TestEnvironmentValidation:
    """Missing credentials fail production and warn elsewhere."""

    def test_production_fails_fast(self):
        with patch.dict(os.environ, {}, clear=True):
            from playlist_scout import create_app

            with pytest.raises(ValueError):
                create_app('production')

    def test_development_continues(self):
        with patch.dict(os.environ, {}, clear=True):
            from playlist_scout import create_app
            app = create_app('development')

            assert app is not None

    def test_missing_credentials_surface_on_first_call(self):
        with patch.dict(os.environ, {}, clear=True):
            from playlist_scout import create_app
            app = create_app('testing')
            app.config['SPOTIFY_CLIENT_ID'] = None
            app.extensions[EXTENSION_KEY] = build_services(app.config)

            response = app.test_client().get('/api/genres')

            assert response.status_code == 500
            assert response.get_json()['error'] == 'CONFIGURATION_ERROR'
