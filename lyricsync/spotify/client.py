"""
Spotify API client for playback state retrieval

The lyrics view needs exactly one thing from Spotify: what is playing and
how far into it the user is. SpotifyClient wraps spotipy with:

1. **Rate Limiting Layer**: a minimum interval between requests
2. **Authentication Management**: lazy client creation and transparent
   token refresh on 401 responses
3. **Error Translation**: transport and API failures surface as
   PlaybackFetchError so the poller can treat them as "no change"

Usage Examples:

    client = get_spotify_client()
    state = client.get_playback_state()
    if state:
        print(state.track_key, state.progress_ms)
"""

import logging
import time
from typing import Any, Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from ..config.auth import get_auth
from ..config.settings import get_settings
from ..exceptions import AuthenticationError, PlaybackFetchError
from .models import PlaybackState
from ..utils.logger import get_logger

# Only show ERROR level messages from spotipy
logging.getLogger('spotipy.client').setLevel(logging.ERROR)


class SpotifyClient:
    """
    Playback-state provider built on the Spotify Web API

    Designed for use from the single background poller thread.
    """

    def __init__(self, auth=None):
        """
        Initialize client

        Args:
            auth: SpotifyAuth instance (defaults to the global one)
        """
        self.auth = auth or get_auth()
        self.settings = get_settings()
        self.logger = get_logger(__name__)
        self._client: Optional[spotipy.Spotify] = None

        # Rate limiting configuration
        self.last_request_time = 0.0
        self.min_request_interval = 0.1  # 100ms between requests

    @property
    def client(self) -> spotipy.Spotify:
        """
        Lazy-loading authenticated spotipy client

        Never starts the browser flow: the poller runs behind the
        full-screen view, so authorization must happen before start.

        Raises:
            AuthenticationError: If no valid token is available
        """
        if not self._client:
            self._client = self.auth.get_spotify_client(interactive=False)
            if not self._client:
                raise AuthenticationError("Not authenticated with Spotify (run 'lyricsync auth login')")
        return self._client

    def _rate_limit(self) -> None:
        """Sleep if the previous request was less than min_request_interval ago"""
        time_since_last = time.time() - self.last_request_time

        if time_since_last < self.min_request_interval:
            time.sleep(self.min_request_interval - time_since_last)

        self.last_request_time = time.time()

    def _make_request(self, method_name: str, *args, **kwargs) -> Any:
        """
        Rate-limited API request wrapper

        Args:
            method_name: Name of the spotipy.Spotify method to call

        Returns:
            API response data

        Raises:
            PlaybackFetchError: For network errors and API errors
            AuthenticationError: If the token cannot be refreshed
        """
        self._rate_limit()

        try:
            return getattr(self.client, method_name)(*args, **kwargs)
        except SpotifyException as e:
            if e.http_status == 401:
                # Token expired - rebuild client with a refreshed token
                self.logger.debug("Spotify token expired, attempting refresh...")
                self._client = None
                self._rate_limit()
                try:
                    return getattr(self.client, method_name)(*args, **kwargs)
                except SpotifyException as retry_error:
                    raise PlaybackFetchError(f"Spotify request failed after refresh: {retry_error}",
                                             status_code=retry_error.http_status)
            elif e.http_status == 429:
                retry_after = int((e.headers or {}).get('Retry-After', 1))
                self.logger.warning(f"Rate limited by Spotify, retry in {retry_after} seconds")
                raise PlaybackFetchError("Rate limited by Spotify", status_code=429,
                                         details={'retry_after': retry_after})
            raise PlaybackFetchError(f"Spotify request failed: {e}", status_code=e.http_status)
        except requests.RequestException as e:
            raise PlaybackFetchError(f"Network error talking to Spotify: {e}")

    def get_playback_state(self) -> Optional[PlaybackState]:
        """
        Read the currently playing track and position

        Returns:
            PlaybackState, or None when nothing (or a non-track item) is playing

        Raises:
            PlaybackFetchError: If the request failed
            AuthenticationError: If the client cannot authenticate
        """
        data = self._make_request('current_user_playing_track')
        state = PlaybackState.from_spotify_data(data)
        if state is None:
            self.logger.debug("Nothing playing")
        return state


# Global client instance
_spotify_client: Optional[SpotifyClient] = None


def get_spotify_client() -> SpotifyClient:
    """Get global Spotify client instance"""
    global _spotify_client
    if not _spotify_client:
        _spotify_client = SpotifyClient()
    return _spotify_client


def reset_spotify_client() -> None:
    """Reset global client instance"""
    global _spotify_client
    _spotify_client = None
