"""
Configuration management for Lyricsync

This module handles loading, validation, and management of application settings
from multiple sources including YAML files, environment variables and `.env`
files. It provides a centralized configuration system shared by the poller,
the display and the command line interface.

The configuration is organized into logical sections using dataclasses:
- Spotify API settings (credentials, redirect URL, scopes)
- Lyrics search and matching settings (LRCLIB endpoint, tolerance, conversion)
- Polling cadence for the background playback poller
- Display colors for the curses renderer
- Logging, network and storage settings

All sensitive data (client id and secret) can be loaded from environment variables
or from `~/.lyricsync/.env`, while non-sensitive settings live in YAML files.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load environment variables from .env file in the working directory if present
load_dotenv()

# Curses color names accepted by the display section
VALID_COLORS = ['black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white', 'default']


@dataclass
class SpotifyConfig:
    """
    Spotify API configuration and authentication settings

    Only the two playback scopes are needed: the application never reads or
    modifies the user's library. The redirect URL must match the one
    registered in the Spotify developer dashboard exactly.
    """
    client_id: str = ""
    client_secret: str = ""
    redirect_url: str = "http://127.0.0.1:8888/callback"
    scope: str = "user-read-playback-state user-read-currently-playing"


@dataclass
class LyricsConfig:
    """
    Lyrics search, matching and post-processing configuration

    Controls where candidates are searched, how strictly they are matched
    against the playing track and how the chosen lyrics are rewritten before
    display.
    """
    base_url: str = "https://lrclib.net"
    duration_tolerance: int = 2  # seconds
    spam_markers: list = field(default_factory=lambda: ["rickrolling"])
    interlude_glyph: str = "♪"
    script_conversion: str = "t2s"  # OpenCC config id, "" disables
    timeout: int = 15


@dataclass
class PollingConfig:
    """
    Background poller cadence (seconds)

    interval is the normal sleep between two playback reads, retry_delay the
    sleep after a failed fetch and idle_delay the sleep while nothing plays.
    """
    interval: float = 0.5
    retry_delay: float = 0.5
    idle_delay: float = 1.0


@dataclass
class DisplayConfig:
    """Colors and refresh rate of the terminal lyrics view"""
    before_color: str = "white"
    current_color: str = "blue"
    after_color: str = "default"
    bold_current: bool = True
    dim_before: bool = True
    refresh_ms: int = 100


@dataclass
class LoggingConfig:
    """
    Logging configuration and output settings

    While the lyrics view is on screen the console handler is removed and
    everything goes to `file` (relative paths resolve inside the config
    directory).
    """
    level: str = "INFO"
    file: str = "logs/lyricsync.log"
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


@dataclass
class NetworkConfig:
    """HTTP settings shared by the Spotify client and the lyrics provider"""
    user_agent: str = "Lyricsync/0.3 (https://github.com/lyricsync/lyricsync)"
    request_timeout: int = 10
    max_retries: int = 2
    retry_delay: float = 0.5


@dataclass
class SecurityConfig:
    """
    Security and storage configuration

    Controls where the OAuth token and the user configuration are stored.
    """
    token_storage_path: str = "~/.lyricsync/tokens.json"
    config_directory: str = "~/.lyricsync/"


class Settings:
    """
    Main settings class that manages all configuration

    The class handles:
    - Loading configuration from YAML files
    - Overriding with environment variables (and the user's `.env`)
    - Creating the configuration directory
    - Validating configuration values
    - Saving configuration back to files
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings from config file or environment variables

        Args:
            config_path: Path to custom config file, if None uses default locations
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".lyricsync"

        # Initialize all configuration objects with default values
        self.spotify = SpotifyConfig()
        self.lyrics = LyricsConfig()
        self.polling = PollingConfig()
        self.display = DisplayConfig()
        self.logging = LoggingConfig()
        self.network = NetworkConfig()
        self.security = SecurityConfig()

        # Load configuration from various sources in order of precedence
        self._load_config()
        self._load_environment_variables()
        self._create_directories()

    def _sections(self) -> Dict[str, Any]:
        """Map YAML section names to their dataclass instances"""
        return {
            'spotify': self.spotify,
            'lyrics': self.lyrics,
            'polling': self.polling,
            'display': self.display,
            'logging': self.logging,
            'network': self.network,
            'security': self.security,
        }

    def _load_config(self) -> None:
        """
        Load configuration from YAML file

        Searches for configuration files in multiple locations in order of
        precedence. The first file found will be used.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("config/config.yaml"),
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                    break
                except Exception as e:
                    print(f"Warning: Failed to load config from {path}: {e}")

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Apply configuration data to dataclass instances

        Only attributes that exist on the matching dataclass are updated;
        unknown sections and keys are ignored.

        Args:
            config_data: Dictionary containing configuration sections
        """
        config_mapping = self._sections()

        for section_name, section_data in config_data.items():
            if section_name in config_mapping and isinstance(section_data, dict):
                config_obj = config_mapping[section_name]
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        if isinstance(getattr(config_obj, key), list) and isinstance(value, str):
                            value = [value]
                        setattr(config_obj, key, value)

    def _load_environment_variables(self) -> None:
        """
        Load sensitive configuration from environment variables

        The user's `~/.lyricsync/.env` (written by `lyricsync config init`) is
        read first without overriding variables already set in the process
        environment, then the mapped variables are applied on top of the
        file-based configuration.
        """
        load_dotenv(self.get_config_directory() / ".env", override=False)

        env_mappings = {
            'SPOTIFY_CLIENT_ID': lambda v: setattr(self.spotify, 'client_id', v),
            'SPOTIFY_CLIENT_SECRET': lambda v: setattr(self.spotify, 'client_secret', v),
            'SPOTIFY_REDIRECT_URL': lambda v: setattr(self.spotify, 'redirect_url', v),
            'LRCLIB_BASE_URL': lambda v: setattr(self.lyrics, 'base_url', v),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                setter(value)

    def _create_directories(self) -> None:
        """Create the configuration directory, warning on permission errors"""
        directory = self.get_config_directory()
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            print(f"Warning: Failed to create directory {directory}: {e}")

    def get_config_directory(self) -> Path:
        """
        Get the expanded config directory path

        Returns:
            Path object for the configuration directory
        """
        return Path(self.security.config_directory).expanduser()

    def get_token_storage_path(self) -> Path:
        """
        Get the expanded token storage path

        Returns:
            Path object for the token storage file
        """
        return Path(self.security.token_storage_path).expanduser()

    def get_env_file_path(self) -> Path:
        """Path of the user's credential `.env` file"""
        return self.get_config_directory() / ".env"

    def get_log_file_path(self) -> Optional[Path]:
        """
        Resolve the configured log file

        Returns:
            Absolute log file path, or None when file logging is disabled
        """
        if not self.logging.file:
            return None
        log_path = Path(self.logging.file).expanduser()
        if log_path.is_absolute():
            return log_path
        return self.get_config_directory() / log_path

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Save current configuration to file

        Serializes the current configuration to a YAML file, excluding
        the Spotify client credentials, which belong in the `.env` file.

        Args:
            path: Custom path to save config, defaults to user config directory

        Returns:
            Path the configuration was written to

        Raises:
            ConfigError: If the configuration cannot be saved
        """
        from ..exceptions import ConfigError

        if not path:
            path = self.get_config_directory() / "config.yaml"
        else:
            path = Path(path)

        config_data = {
            name: self._dataclass_to_dict(section)
            for name, section in self._sections().items()
        }

        # Remove sensitive data from saved config
        config_data['spotify']['client_id'] = ""
        config_data['spotify']['client_secret'] = ""

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                yaml.dump(config_data, f, default_flow_style=False, indent=2, allow_unicode=True)
        except OSError as e:
            raise ConfigError(f"Failed to save config to {path}: {e}", details={'file_path': str(path)})
        return path

    def _dataclass_to_dict(self, obj) -> Dict[str, Any]:
        """
        Convert dataclass to dictionary

        Args:
            obj: Dataclass instance to convert

        Returns:
            Dictionary representation of the dataclass
        """
        result = {}
        for key, value in obj.__dict__.items():
            result[key] = value
        return result

    def validate(self) -> List[str]:
        """
        Validate current configuration

        Performs validation of all configuration values so that errors are
        reported before the terminal switches to the full-screen view.

        Returns:
            List of human-readable problems, empty when the configuration is valid
        """
        errors = []

        # Validate Spotify credentials
        if not self.spotify.client_id or not self.spotify.client_secret:
            errors.append("Spotify client_id and client_secret are required (run 'lyricsync config init')")

        if not self.spotify.redirect_url.startswith(('http://', 'https://')):
            errors.append(f"Invalid redirect URL: {self.spotify.redirect_url}")

        # Validate lyrics matching
        if self.lyrics.duration_tolerance < 0:
            errors.append(f"Duration tolerance must be >= 0: {self.lyrics.duration_tolerance}")

        if not self.lyrics.interlude_glyph:
            errors.append("Interlude glyph must not be empty")

        # Validate polling cadence
        for name in ('interval', 'retry_delay', 'idle_delay'):
            value = getattr(self.polling, name)
            if not isinstance(value, (int, float)) or value <= 0:
                errors.append(f"Polling {name} must be a positive number: {value}")

        # Validate display colors
        for name in ('before_color', 'current_color', 'after_color'):
            value = getattr(self.display, name)
            if value not in VALID_COLORS:
                errors.append(f"Invalid display {name}: {value}")

        return errors

    def is_valid(self) -> bool:
        """True when validate() found no problems"""
        return not self.validate()

    def __str__(self) -> str:
        """
        String representation of settings

        Returns:
            String summary of configuration
        """
        sections = [
            f"Lyrics: {self.lyrics.base_url}",
            f"Tolerance: {self.lyrics.duration_tolerance}s",
            f"Conversion: {self.lyrics.script_conversion or 'off'}",
            f"Poll: {self.polling.interval}s",
        ]
        return f"Settings({', '.join(sections)})"


# Global settings instance for singleton pattern
settings = Settings()


def get_settings() -> Settings:
    """
    Get the global settings instance

    Returns:
        The global Settings instance
    """
    return settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration files

    Creates a new settings instance with updated configuration from files
    and environment variables.

    Args:
        config_path: Optional path to specific config file

    Returns:
        New Settings instance with reloaded configuration
    """
    global settings
    settings = Settings(config_path)
    return settings
