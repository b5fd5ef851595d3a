"""
OAuth2 authentication and token management for the Spotify Web API

This module implements the authorization code flow used by Lyricsync to read
the user's playback state. It opens the browser for consent, receives the
authorization code on a small local HTTP server, exchanges it for tokens,
stores them on disk and refreshes them transparently when they expire.

The authentication flow follows Spotify's OAuth2 specification:
1. Generate authorization URL with the playback scopes
2. Open browser for user consent
3. Receive authorization code via callback on the configured redirect URL
4. Exchange code for access/refresh tokens
5. Store tokens for future runs
6. Automatically refresh tokens when they are about to expire

Security considerations:
- Tokens stored with restrictive file permissions (600)
- Token expiry validation with safety buffer
- The callback server only lives for the duration of the login
"""

import json
import time
import webbrowser
import urllib.parse
from typing import Dict, Optional, Any
from datetime import datetime
import spotipy
import requests
from http.server import HTTPServer, BaseHTTPRequestHandler
import threading

from .settings import get_settings
from ..exceptions import AuthenticationError, ConfigError

TOKEN_URL = "https://accounts.spotify.com/api/token"
AUTHORIZE_URL = "https://accounts.spotify.com/authorize"


class CallbackHandler(BaseHTTPRequestHandler):
    """
    HTTP request handler for the OAuth2 callback

    Extracts the authorization code (or error) from the callback query string
    and stores it on the parent server instance for the waiting login flow.
    """

    def do_GET(self):
        """Handle the redirect from Spotify's authorization page"""
        parsed_url = urllib.parse.urlparse(self.path)
        query_params = urllib.parse.parse_qs(parsed_url.query)

        if 'code' in query_params:
            self.server.authorization_code = query_params['code'][0]

            self.send_response(200)
            self.send_header('Content-type', 'text/html')
            self.end_headers()

            success_html = """
            <html>
            <head><title>Authorization Success</title></head>
            <body style="font-family: Arial, sans-serif; text-align: center; margin-top: 50px;">
                <h1 style="color: #1DB954;">Authorization complete</h1>
                <p>You can close this window and return to the terminal.</p>
                <script>window.close();</script>
            </body>
            </html>
            """
            self.wfile.write(success_html.encode())

        elif 'error' in query_params:
            self.server.authorization_error = query_params['error'][0]

            self.send_response(400)
            self.send_header('Content-type', 'text/html')
            self.end_headers()

            error_html = f"""
            <html>
            <head><title>Authorization Error</title></head>
            <body style="font-family: Arial, sans-serif; text-align: center; margin-top: 50px;">
                <h1 style="color: #E22134;">Authorization Failed</h1>
                <p>Error: {query_params.get('error', ['Unknown'])[0]}</p>
                <p>Please try again or check your Spotify App settings.</p>
            </body>
            </html>
            """
            self.wfile.write(error_html.encode())

        else:
            self.send_response(400)
            self.send_header('Content-type', 'text/plain')
            self.end_headers()
            self.wfile.write(b"No code received")

    def log_message(self, format, *args):
        """Keep the HTTP server quiet during the login flow"""
        pass


class SpotifyAuth:
    """
    Spotify OAuth2 authentication and token management

    Key responsibilities:
    - OAuth2 authorization code flow execution
    - Token storage and retrieval
    - Automatic token refresh before expiration
    - Spotify API client instance management

    Attributes:
        settings: Application settings instance
        token_file: Path to token storage file
        client_id: Spotify application client ID
        client_secret: Spotify application client secret
        redirect_uri: OAuth2 callback URL (must match the dashboard exactly)
        scope: Required permission scopes for API access
    """

    # Refresh tokens this many seconds before they actually expire
    SAFETY_BUFFER_SECONDS = 300

    # Maximum time to wait for the browser callback
    AUTHORIZATION_TIMEOUT = 300

    def __init__(self):
        """Initialize authentication manager from application settings"""
        self.settings = get_settings()

        self.token_file = self.settings.get_token_storage_path()

        self.client_id = self.settings.spotify.client_id
        self.client_secret = self.settings.spotify.client_secret
        self.redirect_uri = self.settings.spotify.redirect_url
        self.scope = self.settings.spotify.scope

        self._spotify_client: Optional[spotipy.Spotify] = None
        self._token_info: Optional[Dict[str, Any]] = None
        self._lock = threading.Lock()

    def _load_token(self) -> Optional[Dict[str, Any]]:
        """
        Load and validate stored authentication token from file

        Returns:
            Dictionary containing token information if valid, None otherwise
        """
        try:
            if self.token_file.exists():
                with open(self.token_file, 'r', encoding='utf-8') as f:
                    token_data = json.load(f)

                required_fields = ['access_token', 'refresh_token', 'expires_at', 'token_type']
                if all(field in token_data for field in required_fields):
                    # Tokens issued to another app cannot be refreshed with our credentials
                    if token_data.get('client_id') not in (None, self.client_id):
                        print("Warning: Stored token belongs to a different client, re-authentication required")
                        return None
                    return token_data
                else:
                    print("Warning: Invalid token structure, re-authentication required")

        except (OSError, ValueError) as e:
            print(f"Warning: Failed to load stored token: {e}")

        return None

    def _save_token(self, token_info: Dict[str, Any]) -> None:
        """
        Save token information to the token file

        Args:
            token_info: Complete token information dictionary to store
        """
        try:
            self.token_file.parent.mkdir(parents=True, exist_ok=True)

            token_data = {
                **token_info,
                'saved_at': datetime.now().isoformat(),
                'client_id': self.client_id
            }

            with open(self.token_file, 'w', encoding='utf-8') as f:
                json.dump(token_data, f, indent=2)

            try:
                # 0o600 = owner read/write only
                self.token_file.chmod(0o600)
            except OSError:
                # Windows doesn't support chmod
                pass

        except OSError as e:
            print(f"Warning: Failed to save token: {e}")

    def _is_token_expired(self, token_info: Dict[str, Any]) -> bool:
        """
        Check if access token is expired or approaching expiration

        Args:
            token_info: Token information dictionary containing expires_at field

        Returns:
            True if token is expired or will expire within the safety buffer
        """
        if 'expires_at' not in token_info:
            return True

        return int(time.time()) >= (token_info['expires_at'] - self.SAFETY_BUFFER_SECONDS)

    def _build_token_info(self, token_data: Dict[str, Any], refresh_token: Optional[str]) -> Dict[str, Any]:
        """Normalize a token endpoint response into the stored structure"""
        expires_in = token_data.get('expires_in', 3600)
        return {
            'access_token': token_data['access_token'],
            'token_type': token_data.get('token_type', 'Bearer'),
            'expires_in': expires_in,
            'expires_at': int(time.time()) + expires_in,
            # Spotify may or may not rotate the refresh token
            'refresh_token': token_data.get('refresh_token', refresh_token),
            'scope': token_data.get('scope', self.scope)
        }

    def _refresh_token(self, token_info: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Refresh expired access token using refresh token

        Args:
            token_info: Current token information containing refresh_token

        Returns:
            Updated token information if refresh successful, None otherwise
        """
        if not token_info.get('refresh_token'):
            return None

        data = {
            'grant_type': 'refresh_token',
            'refresh_token': token_info['refresh_token'],
            'client_id': self.client_id,
            'client_secret': self.client_secret
        }

        try:
            response = requests.post(
                TOKEN_URL,
                headers={'Content-Type': 'application/x-www-form-urlencoded'},
                data=data,
                timeout=self.settings.network.request_timeout
            )
            response.raise_for_status()
            updated_token = self._build_token_info(response.json(), token_info['refresh_token'])
        except (requests.RequestException, KeyError, ValueError) as e:
            print(f"Warning: Failed to refresh token: {e}")
            return None

        self._save_token(updated_token)
        return updated_token

    def _callback_address(self) -> tuple:
        """Host and port the local callback server must bind to"""
        parsed = urllib.parse.urlparse(self.redirect_uri)
        host = parsed.hostname or '127.0.0.1'
        port = parsed.port or 80
        return host, port

    def get_authorization_url(self) -> str:
        """Build the Spotify consent URL for the configured app"""
        params = {
            'client_id': self.client_id,
            'response_type': 'code',
            'redirect_uri': self.redirect_uri,
            'scope': self.scope,
            'show_dialog': 'true'
        }
        return f"{AUTHORIZE_URL}?{urllib.parse.urlencode(params)}"

    def _authorize_new(self) -> Dict[str, Any]:
        """
        Perform the complete OAuth2 authorization flow

        Starts the callback server on the host and port of the configured
        redirect URL, opens the consent page, waits for the code and
        exchanges it for tokens.

        Returns:
            Complete token information dictionary

        Raises:
            ConfigError: If client credentials are not configured
            AuthenticationError: On denial, timeout or failed code exchange
        """
        if not self.client_id or not self.client_secret:
            raise ConfigError("Spotify client_id and client_secret must be configured")

        host, port = self._callback_address()
        authorization_url = self.get_authorization_url()

        try:
            server = HTTPServer((host, port), CallbackHandler)
        except OSError as e:
            raise AuthenticationError(
                f"Cannot listen on {host}:{port} for the Spotify callback: {e}",
                details={'redirect_uri': self.redirect_uri}
            )
        server.authorization_code = None
        server.authorization_error = None

        server_thread = threading.Thread(target=server.serve_forever, daemon=True)
        server_thread.start()

        try:
            print("Opening browser for Spotify authorization...")
            print(f"If browser doesn't open, visit: {authorization_url}")
            webbrowser.open(authorization_url)

            print("Waiting for authorization callback...")
            start_time = time.time()

            while server.authorization_code is None and server.authorization_error is None:
                time.sleep(0.5)
                if time.time() - start_time > self.AUTHORIZATION_TIMEOUT:
                    raise AuthenticationError("Authorization timeout")

            if server.authorization_error:
                raise AuthenticationError(f"Authorization failed: {server.authorization_error}")

            token_info = self._exchange_code_for_token(server.authorization_code)
            self._save_token(token_info)
            print("Authorization successful!")
            return token_info

        finally:
            server.shutdown()
            server.server_close()

    def _exchange_code_for_token(self, code: str) -> Dict[str, Any]:
        """
        Exchange authorization code for access and refresh tokens

        Args:
            code: Authorization code from Spotify callback

        Returns:
            Complete token information dictionary

        Raises:
            AuthenticationError: If the token endpoint rejects the code
        """
        data = {
            'grant_type': 'authorization_code',
            'code': code,
            'redirect_uri': self.redirect_uri,
            'client_id': self.client_id,
            'client_secret': self.client_secret
        }

        try:
            response = requests.post(
                TOKEN_URL,
                headers={'Content-Type': 'application/x-www-form-urlencoded'},
                data=data,
                timeout=self.settings.network.request_timeout
            )
            response.raise_for_status()
            return self._build_token_info(response.json(), None)
        except (requests.RequestException, KeyError, ValueError) as e:
            raise AuthenticationError(f"Error exchanging code for token: {e}")

    def get_valid_token(self, interactive: bool = True) -> Optional[str]:
        """
        Get a valid access token, refreshing or re-authorizing as needed

        Args:
            interactive: Allow the browser flow when no usable token exists.
                         The background poller passes False so it never
                         blocks on user input behind the lyrics view.

        Returns:
            Valid access token string, or None if no token could be obtained
        """
        with self._lock:
            if not self._token_info:
                self._token_info = self._load_token()

            if self._token_info and self._is_token_expired(self._token_info):
                refreshed_token = self._refresh_token(self._token_info)
                if refreshed_token:
                    self._token_info = refreshed_token
                elif interactive:
                    print("Token refresh failed, re-authorization required")
                    self._token_info = None
                else:
                    return None

            if not self._token_info:
                if not interactive:
                    return None
                print("No valid token found, starting authorization...")
                self._token_info = self._authorize_new()

            return self._token_info['access_token']

    def get_spotify_client(self, interactive: bool = True) -> Optional[spotipy.Spotify]:
        """
        Get authenticated Spotify API client instance

        Args:
            interactive: See get_valid_token()

        Returns:
            Authenticated Spotify client, or None if authentication failed
        """
        token = self.get_valid_token(interactive=interactive)
        if not token:
            return None

        if not self._spotify_client:
            self._spotify_client = spotipy.Spotify(
                auth=token,
                requests_timeout=self.settings.network.request_timeout,
                retries=0
            )
        else:
            # Update token in existing client instance
            self._spotify_client.set_auth(token)

        return self._spotify_client

    def has_stored_token(self) -> bool:
        """True when a token file with the expected structure exists"""
        return self._load_token() is not None

    def is_authenticated(self) -> bool:
        """
        Check if the stored credentials can reach the Spotify API

        Never opens the browser; makes one lightweight `current_user` call.
        """
        try:
            client = self.get_spotify_client(interactive=False)
            if client:
                client.current_user()
                return True
        except (spotipy.SpotifyException, requests.RequestException):
            pass
        return False

    def revoke_token(self) -> None:
        """
        Delete stored credentials

        This only removes local token storage; the tokens stay valid on
        Spotify's side until they expire.
        """
        if self.token_file.exists():
            try:
                self.token_file.unlink()
                print("Token revoked successfully")
            except OSError as e:
                print(f"Warning: Failed to delete token file: {e}")

        self._token_info = None
        self._spotify_client = None

    def get_user_info(self) -> Optional[Dict[str, Any]]:
        """
        Get current authenticated user's profile information

        Returns:
            User profile dictionary, or None if unavailable
        """
        try:
            client = self.get_spotify_client(interactive=False)
            if client:
                return client.current_user()
        except (spotipy.SpotifyException, requests.RequestException) as e:
            print(f"Error getting user info: {e}")
        return None


# Global authentication instance management
_auth_instance: Optional[SpotifyAuth] = None


def get_auth() -> SpotifyAuth:
    """
    Get the global authentication instance (singleton pattern)

    Returns:
        Global SpotifyAuth instance
    """
    global _auth_instance
    if not _auth_instance:
        _auth_instance = SpotifyAuth()
    return _auth_instance


def reset_auth() -> None:
    """
    Reset the global authentication instance

    Forces a new instance (and re-read of the settings) on next access.
    Does not delete stored credentials.
    """
    global _auth_instance
    _auth_instance = None
