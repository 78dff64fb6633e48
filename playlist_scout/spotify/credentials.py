"""
App credentials for the client-credentials grant.

Kept separate from Flask so the token provider can be built and tested
without an application context.
"""

from dataclasses import dataclass

from .exceptions import SpotifyConfigurationError


@dataclass(frozen=True)
class SpotifyCredentials:
    """
    The Spotify app's client id and secret.

    The client-credentials grant has no redirect URI and no end user,
    so nothing else is needed.

    Example:
        credentials = SpotifyCredentials.from_flask_config(app.config)
        provider = ClientCredentialsTokenProvider(credentials)
    """

    client_id: str
    client_secret: str

    def __post_init__(self):
        if not self.client_id:
            raise SpotifyConfigurationError(
                "client_id is required. Set SPOTIFY_CLIENT_ID."
            )
        if not self.client_secret:
            raise SpotifyConfigurationError(
                "client_secret is required. Set SPOTIFY_CLIENT_SECRET."
            )

    @classmethod
    def from_flask_config(cls, config: dict) -> 'SpotifyCredentials':
        """
        Read SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET from app config.

        Raises:
            SpotifyConfigurationError: If either value is missing or empty.
        """
        return cls(
            client_id=config.get('SPOTIFY_CLIENT_ID') or '',
            client_secret=config.get('SPOTIFY_CLIENT_SECRET') or '',
        )

    def __repr__(self) -> str:
        return f"SpotifyCredentials(client_id={self.client_id!r}, client_secret='***')"
