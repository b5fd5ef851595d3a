"""
Configuration management package for Lyricsync

Two components live here:

1. Settings Management (settings.py):
   - Application configuration from YAML files, environment variables and `.env`
   - Settings validation before the full-screen view starts
   - Configuration persistence (`lyricsync config set`)

2. Authentication Management (auth.py):
   - Spotify OAuth2 authorization code flow with a local callback server
   - Token storage and automatic refresh

Usage:

    from lyricsync.config import get_settings, get_auth

    settings = get_settings()
    auth = get_auth()
"""

from .settings import get_settings, reload_settings, Settings

from .auth import get_auth, reset_auth, SpotifyAuth

__all__ = [
    # Settings management
    'get_settings',
    'reload_settings',
    'Settings',

    # Authentication management
    'get_auth',
    'reset_auth',
    'SpotifyAuth'
]
