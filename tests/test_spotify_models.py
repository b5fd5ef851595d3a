# tests/test_spotify_models.py
"""Test Spotify playback models and client"""

from unittest.mock import Mock

import pytest
import requests
from spotipy.exceptions import SpotifyException

from lyricsync.exceptions import AuthenticationError, PlaybackFetchError
from lyricsync.spotify.client import SpotifyClient
from lyricsync.spotify.models import PlaybackState


class TestPlaybackState:
    """Test PlaybackState model"""

    def test_from_spotify_data(self, sample_playback_data):
        """Test creating a snapshot from API data"""
        state = PlaybackState.from_spotify_data(sample_playback_data)

        assert state.track == "Test Song"
        assert state.artist == "Test Artist"
        assert state.album == "Test Album"
        assert state.duration_ms == 210500
        assert state.progress_ms == 42000
        assert state.is_playing is True

    def test_derived_properties(self, sample_playback_data):
        """Test track key and whole-second duration"""
        state = PlaybackState.from_spotify_data(sample_playback_data)

        assert state.track_key == "Test Song - Test Artist"
        assert state.duration_sec == 210
        assert state.progress_str == "0:42 / 3:30"

    @pytest.mark.parametrize("data", [
        None,
        {},
        {'item': None, 'progress_ms': 0},
        {'item': {'name': '', 'artists': [{'name': 'A'}]}},
        {'item': {'name': 'Episode', 'artists': []}},
    ])
    def test_nothing_usable_playing(self, data):
        """Test payloads without a track give None"""
        assert PlaybackState.from_spotify_data(data) is None


class TestSpotifyClient:
    """Test the playback-state client with a mocked spotipy client"""

    @pytest.fixture
    def spotipy_client(self):
        return Mock()

    @pytest.fixture
    def client(self, spotipy_client):
        auth = Mock()
        auth.get_spotify_client.return_value = spotipy_client
        client = SpotifyClient(auth=auth)
        client.min_request_interval = 0
        return client

    def test_get_playback_state(self, client, spotipy_client, sample_playback_data):
        """Test a playing track is returned as PlaybackState"""
        spotipy_client.current_user_playing_track.return_value = sample_playback_data

        state = client.get_playback_state()

        assert state.track_key == "Test Song - Test Artist"
        client.auth.get_spotify_client.assert_called_once_with(interactive=False)

    def test_nothing_playing(self, client, spotipy_client):
        """Test 204 (None) response gives None"""
        spotipy_client.current_user_playing_track.return_value = None
        assert client.get_playback_state() is None

    def test_expired_token_refreshed(self, client, spotipy_client, sample_playback_data):
        """Test a 401 rebuilds the client and retries once"""
        spotipy_client.current_user_playing_track.side_effect = [
            SpotifyException(401, -1, "expired"),
            sample_playback_data
        ]

        assert client.get_playback_state() is not None
        assert client.auth.get_spotify_client.call_count == 2

    def test_rate_limited(self, client, spotipy_client):
        """Test 429 responses surface Retry-After"""
        spotipy_client.current_user_playing_track.side_effect = SpotifyException(
            429, -1, "slow down", headers={'Retry-After': '3'}
        )

        with pytest.raises(PlaybackFetchError) as exc_info:
            client.get_playback_state()

        assert exc_info.value.status_code == 429
        assert exc_info.value.details['retry_after'] == 3

    def test_network_error(self, client, spotipy_client):
        """Test transport errors become PlaybackFetchError"""
        spotipy_client.current_user_playing_track.side_effect = requests.ConnectionError("down")

        with pytest.raises(PlaybackFetchError):
            client.get_playback_state()

    def test_not_authenticated(self):
        """Test missing token raises AuthenticationError"""
        auth = Mock()
        auth.get_spotify_client.return_value = None
        client = SpotifyClient(auth=auth)

        with pytest.raises(AuthenticationError):
            client.get_playback_state()
