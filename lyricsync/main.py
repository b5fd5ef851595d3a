"""
Main CLI interface for Lyricsync

This module provides the command-line interface for all functionality
including the live lyrics view, configuration management, authentication
setup, lyrics lookups and system diagnostics. It serves as the primary entry
point for user interactions with the application.

The CLI is built using Click framework and provides structured command groups for:
- Live view (start)
- Authentication handling (login, logout, status)
- Lyrics lookups (search, parse)
- Configuration management (show, init, set)
- System diagnostics (doctor)
"""

import functools
import shutil
import sys
import webbrowser

import click
from dotenv import set_key

# Import application modules for core functionality
from . import __version__
from .config.settings import get_settings, reload_settings
from .config.auth import get_auth, reset_auth
from .display.renderer import LyricsDisplay
from .exceptions import AuthenticationError, ConfigError, LyricsNotFoundError
from .lyrics.converter import ScriptConverter
from .lyrics.lrclib import get_lrclib_provider, reset_lrclib_provider
from .lyrics.models import LyricDocument
from .lyrics.parser import parse_lrc_file
from .spotify.client import get_spotify_client
from .sync.poller import PlaybackPoller, RedrawSignal
from .sync.tracker import PlaybackTracker
from .utils.logger import (
    configure_from_settings,
    get_current_log_file,
    get_logger,
    reconfigure_logging_for_display
)
from .utils.helpers import format_duration, format_timestamp_ms


# Initialize logging system from configuration settings
configure_from_settings()
logger = get_logger(__name__)

SPOTIFY_DASHBOARD_URL = "https://developer.spotify.com/dashboard"


def print_banner():
    """
    Print application banner to console

    Displays a styled banner with application title and brief description.
    Used to provide visual identity and context when the application starts.
    """
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║                           Lyricsync                           ║
║                                                               ║
║        Time-synced lyrics for Spotify, in your terminal       ║
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝
    """
    click.echo(click.style(banner, fg='green', bold=True))


def handle_error(func):
    """
    Decorator to handle common CLI errors gracefully

    Wraps CLI command functions to provide consistent error handling across
    all commands. Catches common exceptions and provides user-friendly error
    messages while ensuring proper logging and exit codes.

    Args:
        func: The CLI command function to wrap

    Returns:
        Wrapped function with error handling
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            # Handle user cancellation gracefully
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)  # Standard exit code for SIGINT
        except Exception as e:
            # Log error for debugging and show user-friendly message
            logger.error(f"Command failed: {e}")
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)  # Standard exit code for general errors
    return wrapper


def _print_document(document: LyricDocument) -> None:
    """Echo a document, with LRC-style offsets when synced"""
    for line in document.lines:
        if document.is_synced:
            click.echo(f"[{format_timestamp_ms(line.time_ms)}] {line.text}")
        else:
            click.echo(line.text)


def _display_name(user_info) -> str:
    if not user_info:
        return 'Unknown'
    return user_info.get('display_name') or user_info.get('id', 'Unknown')


# Main CLI group - root command that all subcommands attach to
@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
def cli(ctx, version, verbose, config):
    """
    Lyricsync - Time-synced Spotify lyrics in the terminal

    Follows what you are playing on Spotify, looks up the lyrics on LRCLIB
    and highlights the line being sung in a full-screen terminal view.

    This is the main entry point that handles global options and coordinates
    subcommand execution. When invoked without subcommands, it shows the banner
    and basic usage information.
    """
    # Ensure Click context exists for subcommands
    ctx.ensure_object(dict)

    # Handle version information display
    if version:
        click.echo(f"Lyricsync v{__version__}")
        return

    # Handle custom config file loading
    if config:
        reload_settings(config)
        configure_from_settings()
        click.echo(f"Loaded config: {config}")

    # Enable verbose logging if requested
    if verbose:
        ctx.obj['verbose'] = True
        get_settings().logging.level = "DEBUG"
        configure_from_settings()
        logger.info("Verbose mode enabled")

    # If no subcommand provided, show banner and help
    if ctx.invoked_subcommand is None:
        print_banner()
        click.echo(ctx.get_help())


# Live lyrics view
@cli.command()
@click.option('--no-convert', is_flag=True, help='Show lyrics without script conversion')
@handle_error
def start(no_convert):
    """
    Show synced lyrics for the current Spotify track

    Validates the configuration, makes sure a Spotify token is available
    (opening the browser if needed), then takes over the terminal. Press
    q, Esc or Ctrl+C to quit.
    """
    settings = get_settings()

    # Report configuration problems while the console is still ours
    errors = settings.validate()
    if errors:
        for error in errors:
            click.echo(click.style(f"   • {error}", fg='red'), err=True)
        raise ConfigError("Invalid configuration", details={'errors': errors})

    auth_manager = get_auth()
    if not auth_manager.get_valid_token(interactive=True):
        raise AuthenticationError("Spotify authentication failed")

    converter = None if no_convert else ScriptConverter()

    log_file = settings.get_log_file_path()
    click.echo(f"Starting lyrics view (logs: {log_file or 'disabled'})")
    reconfigure_logging_for_display(
        log_file,
        level=settings.logging.level,
        max_size=settings.logging.max_size,
        backup_count=settings.logging.backup_count
    )

    tracker = PlaybackTracker()
    signal = RedrawSignal()
    poller = PlaybackPoller(
        playback_provider=get_spotify_client(),
        lyrics_provider=get_lrclib_provider(),
        tracker=tracker,
        signal=signal,
        converter=converter,
        settings=settings
    )

    try:
        LyricsDisplay(tracker, signal, poller, settings).run()
    finally:
        # Give the console back to the user
        configure_from_settings()

    click.echo("Bye!")


# Authentication commands group
@cli.group()
def auth():
    """
    Authentication management

    Command group for managing Spotify authentication including login,
    logout and status inspection.
    """
    pass


@auth.command()
@handle_error
def login():
    """
    Authenticate with Spotify

    Initiates the OAuth flow for Spotify API authentication. Opens web browser
    for user authorization and stores resulting tokens securely for future use.
    Will check if already authenticated before starting new flow.
    """
    click.echo("Starting Spotify authentication...")

    # Get authentication manager
    auth_manager = get_auth()

    # Check if already authenticated
    if auth_manager.is_authenticated():
        click.echo(f"Already authenticated as: {_display_name(auth_manager.get_user_info())}")
        return

    token = auth_manager.get_valid_token(interactive=True)
    if not token:
        raise AuthenticationError("Authentication failed")

    click.echo(f"Successfully authenticated as: {_display_name(auth_manager.get_user_info())}")


@auth.command()
@handle_error
def logout():
    """
    Remove stored authentication

    Clears the stored OAuth token. Useful for troubleshooting authentication
    issues or switching accounts. The next `start` will open the browser again.
    """
    click.echo("Removing stored authentication...")

    # Get authentication manager and revoke tokens
    auth_manager = get_auth()
    auth_manager.revoke_token()
    reset_auth()

    click.echo("Successfully logged out")


@auth.command()
@handle_error
def status():
    """
    Check authentication status

    Displays whether a usable token is stored and which account it belongs to.
    """
    # Get authentication manager
    auth_manager = get_auth()

    # Check and display authentication status
    if auth_manager.is_authenticated():
        user_info = auth_manager.get_user_info()
        if user_info:
            click.echo("Authentication Status: Authenticated")
            click.echo(f"   User: {_display_name(user_info)}")
            click.echo(f"   Country: {user_info.get('country', 'Unknown')}")
            click.echo(f"   Product: {user_info.get('product', 'Unknown')}")
        else:
            click.echo("Authentication Status: Authenticated (limited info)")
    else:
        click.echo("Authentication Status: Not authenticated")
        click.echo("   Run 'lyricsync auth login' to authenticate")


# Lyrics commands group
@cli.group()
def lyrics():
    """
    Lyrics lookups

    Command group for querying the lyrics source and inspecting local LRC
    files without starting the full-screen view.
    """
    pass


@lyrics.command()
@click.argument('track')
@click.argument('artist')
@click.option('--album', default="", help='Album name')
@click.option('--duration', type=int, help='Track length in seconds')
@click.option('--show/--no-show', default=True, help='Print the selected lyrics')
@handle_error
def search(track, artist, album, duration, show):
    """
    Search LRCLIB for a track and show which lyrics would be used

    Lists every candidate returned by the search, then runs the same
    selection as the live view (synced first, plain as fallback).
    Without --duration only plain lyrics can match reliably.
    """
    provider = get_lrclib_provider()
    candidates = provider.search(track, artist, album, duration)

    click.echo(f"Found {len(candidates)} candidates for {artist} - {track}:\n")
    for candidate in candidates:
        kinds = []
        if candidate.has_synced:
            kinds.append("synced")
        if candidate.has_plain:
            kinds.append("plain")
        click.echo(
            f"   • {candidate.artist_name} - {candidate.track_name}"
            f" [{candidate.album_name or '-'}] {format_duration(candidate.duration_sec)}"
            f" ({', '.join(kinds) or 'instrumental'})"
        )

    try:
        document = provider.fetch_document(track, artist, album, duration or 0)
    except LyricsNotFoundError as e:
        click.echo(click.style(f"\n{e}", fg='yellow'))
        return

    document = ScriptConverter().convert_document(document)
    click.echo(click.style(f"\nSelected {document.mode.value} lyrics ({len(document)} lines)", fg='green'))
    if show:
        click.echo("")
        _print_document(document)


@lyrics.command()
@click.argument('lrc_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--convert/--no-convert', default=False, help='Apply script conversion')
@handle_error
def parse(lrc_file, convert):
    """
    Parse a local LRC file and print the resulting lines

    Useful to check how a file would be timed and which lines become
    interlude markers.
    """
    settings = get_settings()
    document = parse_lrc_file(lrc_file, glyph=settings.lyrics.interlude_glyph)
    if convert:
        document = ScriptConverter().convert_document(document)

    click.echo(f"{lrc_file}: {document.mode.value}, {len(document)} lines\n")
    _print_document(document)


# Configuration commands group
@cli.group()
def config():
    """
    Configuration management

    Command group for viewing and modifying application configuration including
    Spotify credentials, lyrics matching, polling cadence and display colors.
    """
    pass


@config.command()
@handle_error
def show():
    """
    Show current configuration

    Displays all current configuration settings in a structured format.
    Secrets are masked.
    """
    # Get current settings
    settings = get_settings()

    click.echo("Current Configuration:\n")

    # Spotify settings section
    client_id = settings.spotify.client_id
    click.echo("Spotify:")
    click.echo(f"   Client ID: {client_id[:6] + '...' if client_id else 'not set'}")
    click.echo(f"   Client secret: {'set' if settings.spotify.client_secret else 'not set'}")
    click.echo(f"   Redirect URL: {settings.spotify.redirect_url}")

    # Lyrics settings section
    click.echo("\nLyrics:")
    click.echo(f"   Source: {settings.lyrics.base_url}")
    click.echo(f"   Duration tolerance: {settings.lyrics.duration_tolerance}s")
    click.echo(f"   Spam markers: {', '.join(settings.lyrics.spam_markers) or 'none'}")
    click.echo(f"   Interlude glyph: {settings.lyrics.interlude_glyph}")
    click.echo(f"   Script conversion: {settings.lyrics.script_conversion or 'off'}")

    # Polling settings section
    click.echo("\nPolling:")
    click.echo(f"   Interval: {settings.polling.interval}s")
    click.echo(f"   Retry delay: {settings.polling.retry_delay}s")
    click.echo(f"   Idle delay: {settings.polling.idle_delay}s")

    # Display settings section
    click.echo("\nDisplay:")
    click.echo(f"   Colors: before={settings.display.before_color}, "
               f"current={settings.display.current_color}, after={settings.display.after_color}")
    click.echo(f"   Bold current line: {settings.display.bold_current}")
    click.echo(f"   Refresh: {settings.display.refresh_ms}ms")

    click.echo(f"\nConfig directory: {settings.get_config_directory()}")


@config.command()
@click.option('--no-browser', is_flag=True, help='Do not open the Spotify developer dashboard')
@handle_error
def init(no_browser):
    """
    Set up Spotify API credentials

    Opens the Spotify developer dashboard, where an app with the redirect URL
    shown below must be registered, then stores the client ID and secret in
    the user's `.env` file.
    """
    settings = get_settings()

    click.echo("Create an app on the Spotify developer dashboard and add this redirect URI:")
    click.echo(click.style(f"   {settings.spotify.redirect_url}", fg='cyan'))
    if not no_browser:
        webbrowser.open(SPOTIFY_DASHBOARD_URL)
    else:
        click.echo(f"Dashboard: {SPOTIFY_DASHBOARD_URL}")

    client_id = click.prompt("Client ID").strip()
    client_secret = click.prompt("Client secret", hide_input=True).strip()
    if not client_id or not client_secret:
        raise ConfigError("Client ID and secret must not be empty")

    env_file = settings.get_env_file_path()
    env_file.parent.mkdir(parents=True, exist_ok=True)
    env_file.touch(mode=0o600, exist_ok=True)
    set_key(str(env_file), "SPOTIFY_CLIENT_ID", client_id)
    set_key(str(env_file), "SPOTIFY_CLIENT_SECRET", client_secret)

    # Credentials changed, cached token belongs to another app
    reload_settings()
    reset_auth()

    click.echo(f"Credentials saved to {env_file}")
    click.echo("Run 'lyricsync auth login' to authenticate")


@config.command()
@click.option('--interval', type=float, help='Set polling interval in seconds')
@click.option('--tolerance', type=click.IntRange(min=0), help='Set duration tolerance in seconds')
@click.option('--conversion', help='Set OpenCC conversion id ("" to disable)')
@click.option('--lyrics-url', help='Set LRCLIB base URL')
@click.option('--current-color', type=click.Choice(['black', 'red', 'green', 'yellow', 'blue',
                                                    'magenta', 'cyan', 'white', 'default']),
              help='Set color of the current line')
@handle_error
def set(interval, tolerance, conversion, lyrics_url, current_color):
    """
    Update configuration settings

    Allows modification of key configuration parameters through command line.
    Changes are saved to the user config file and persist across restarts.
    """
    # Get current settings
    settings = get_settings()
    changes = []

    if interval is not None:
        if interval <= 0:
            raise click.BadParameter("must be positive", param_hint='--interval')
        settings.polling.interval = interval
        changes.append(f"Polling interval: {interval}s")

    if tolerance is not None:
        settings.lyrics.duration_tolerance = tolerance
        changes.append(f"Duration tolerance: {tolerance}s")

    if conversion is not None:
        settings.lyrics.script_conversion = conversion
        changes.append(f"Script conversion: {conversion or 'off'}")

    if lyrics_url:
        settings.lyrics.base_url = lyrics_url.rstrip('/')
        reset_lrclib_provider()
        changes.append(f"Lyrics source: {settings.lyrics.base_url}")

    if current_color:
        settings.display.current_color = current_color
        changes.append(f"Current line color: {current_color}")

    # Save changes and provide feedback
    if changes:
        path = settings.save_config()
        click.echo(f"Configuration updated ({path}):")
        for change in changes:
            click.echo(f"   • {change}")
    else:
        click.echo("No changes specified")


# System diagnostic commands
@cli.command()
@handle_error
def doctor():
    """
    Run system diagnostics

    Checks credentials, authentication, lyrics source reachability, script
    conversion and the terminal. Useful for troubleshooting setup issues.
    """
    click.echo("Running diagnostics...\n")

    # List to collect any issues found during diagnostics
    issues = []
    settings = get_settings()

    # Check configuration
    config_errors = settings.validate()
    if config_errors:
        click.echo("Configuration: Invalid")
        issues.extend(config_errors)
    else:
        click.echo("Configuration: OK")

    # Check authentication status
    auth_manager = get_auth()
    if auth_manager.is_authenticated():
        click.echo("Spotify authentication: OK")
    else:
        click.echo("Spotify authentication: Not authenticated")
        issues.append("Run 'lyricsync auth login' to authenticate")

    # Check lyrics source availability
    provider = get_lrclib_provider()
    if provider.is_available():
        click.echo(f"Lyrics source: OK ({provider.base_url})")
    else:
        click.echo(f"Lyrics source: Unreachable ({provider.base_url})")
        issues.append(f"Cannot reach {provider.base_url}")

    # Check script conversion
    converter = ScriptConverter()
    if not converter.conversion:
        click.echo("Script conversion: Disabled")
    elif converter.enabled:
        click.echo(f"Script conversion: OK ({converter.conversion})")
    else:
        click.echo(f"Script conversion: Unavailable ({converter.conversion})")
        issues.append(f"OpenCC conversion '{converter.conversion}' could not be loaded")

    # Check terminal
    if sys.stdout.isatty():
        columns, rows = shutil.get_terminal_size()
        click.echo(f"Terminal: {columns}x{rows}")
    else:
        click.echo("Terminal: Not a TTY")
        issues.append("The lyrics view needs an interactive terminal")

    # Check current logging configuration
    current_log = get_current_log_file()
    if current_log:
        click.echo(f"Logging: {current_log}")
    else:
        click.echo(f"Logging: Console only (view sessions log to {settings.get_log_file_path()})")

    # Display summary of any issues found
    if issues:
        click.echo(f"\nFound {len(issues)} issues:")
        for issue in issues:
            click.echo(f"   • {issue}")
    else:
        click.echo("\nAll systems operational!")


# Entry point for module execution
if __name__ == '__main__':
    cli()
