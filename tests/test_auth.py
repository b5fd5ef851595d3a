# tests/test_auth.py
"""Test Spotify token handling without network access"""

import json
import time
from unittest.mock import Mock, patch

import pytest
import requests

from lyricsync.config.auth import SpotifyAuth


@pytest.fixture
def auth_settings(temp_dir):
    settings = Mock()
    settings.get_token_storage_path.return_value = temp_dir / "tokens.json"
    settings.spotify.client_id = "client-123"
    settings.spotify.client_secret = "secret-456"
    settings.spotify.redirect_url = "http://127.0.0.1:8888/callback"
    settings.spotify.scope = "user-read-playback-state user-read-currently-playing"
    settings.network.request_timeout = 10
    return settings


@pytest.fixture
def auth(auth_settings):
    with patch('lyricsync.config.auth.get_settings', return_value=auth_settings):
        return SpotifyAuth()


def make_token(expires_in=3600, client_id="client-123"):
    return {
        'access_token': 'access',
        'refresh_token': 'refresh',
        'token_type': 'Bearer',
        'expires_at': int(time.time()) + expires_in,
        'client_id': client_id,
    }


class TestTokenStorage:
    """Test token persistence"""

    def test_save_and_load(self, auth):
        """Test a saved token is read back with the owning client id"""
        auth._save_token(make_token())

        loaded = auth._load_token()

        assert loaded['access_token'] == 'access'
        assert loaded['client_id'] == 'client-123'
        assert auth.has_stored_token()

    def test_token_file_permissions(self, auth):
        """Test the token file is private to the owner"""
        auth._save_token(make_token())
        assert auth.token_file.stat().st_mode & 0o777 == 0o600

    def test_foreign_client_token_rejected(self, auth):
        """Test tokens issued to another app are ignored"""
        auth.token_file.write_text(json.dumps(make_token(client_id="other")), encoding='utf-8')
        assert auth._load_token() is None

    def test_invalid_structure_rejected(self, auth):
        """Test incomplete token files are ignored"""
        auth.token_file.write_text(json.dumps({'access_token': 'x'}), encoding='utf-8')
        assert auth._load_token() is None

    def test_revoke(self, auth):
        """Test logout removes the token file"""
        auth._save_token(make_token())
        auth.revoke_token()
        assert not auth.token_file.exists()


class TestTokenLifecycle:
    """Test expiry and refresh"""

    def test_expiry_uses_safety_buffer(self, auth):
        """Test tokens close to expiry count as expired"""
        assert not auth._is_token_expired(make_token(expires_in=3600))
        assert auth._is_token_expired(make_token(expires_in=60))
        assert auth._is_token_expired({})

    @patch('lyricsync.config.auth.requests.post')
    def test_refresh_keeps_refresh_token(self, mock_post, auth):
        """Test refresh without a rotated refresh token keeps the old one"""
        mock_post.return_value.json.return_value = {'access_token': 'new', 'expires_in': 3600}

        refreshed = auth._refresh_token(make_token(expires_in=0))

        assert refreshed['access_token'] == 'new'
        assert refreshed['refresh_token'] == 'refresh'
        assert auth._load_token()['access_token'] == 'new'

    @patch('lyricsync.config.auth.requests.post')
    def test_non_interactive_never_prompts(self, mock_post, auth):
        """Test the poller path returns None instead of opening the browser"""
        mock_post.side_effect = requests.ConnectionError("offline")
        auth._save_token(make_token(expires_in=0))

        with patch.object(auth, '_authorize_new') as mock_authorize:
            assert auth.get_valid_token(interactive=False) is None
            mock_authorize.assert_not_called()

    def test_valid_token_used_as_is(self, auth):
        """Test a fresh stored token needs no network"""
        auth._save_token(make_token())
        assert auth.get_valid_token(interactive=False) == 'access'


class TestAuthorizationFlow:
    """Test authorization helpers"""

    def test_authorization_url(self, auth):
        """Test consent URL carries client, redirect and scopes"""
        url = auth.get_authorization_url()

        assert url.startswith("https://accounts.spotify.com/authorize?")
        assert "client_id=client-123" in url
        assert "redirect_uri=http%3A%2F%2F127.0.0.1%3A8888%2Fcallback" in url
        assert "user-read-playback-state" in url

    def test_callback_address(self, auth):
        """Test the callback server binds to the redirect URL host and port"""
        assert auth._callback_address() == ("127.0.0.1", 8888)
