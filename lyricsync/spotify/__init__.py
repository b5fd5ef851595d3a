"""
Spotify integration package

- SpotifyClient: rate-limited playback-state provider with token refresh
- PlaybackState: snapshot of the currently playing track and position
"""

from .client import SpotifyClient, get_spotify_client, reset_spotify_client
from .models import PlaybackState

__all__ = [
    'SpotifyClient',
    'get_spotify_client',
    'reset_spotify_client',
    'PlaybackState'
]
