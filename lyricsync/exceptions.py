"""
Exception classes for Lyricsync.

Exception Hierarchy:
    LyricsyncError (base)
        ConfigError - Configuration file or credential issues
        AuthenticationError - No usable Spotify access token
        TransientFetchError - Network/API failures retried on the next poll
            PlaybackFetchError - Spotify playback state could not be read
            LyricsFetchError - Lyrics search request failed
        LyricsNotFoundError - No lyric candidate matched the playing track

Only ConfigError and AuthenticationError are allowed to stop the program,
and only at CLI start-up. Everything raised while the display is running is
caught by the poller, logged, and turned into "no change" or "no lyrics".
"""


class LyricsyncError(Exception):
    """
    Base exception for all Lyricsync errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (track, url, status...).

    Example:
        try:
            document = provider.fetch_document(track, artist, album, duration)
        except LyricsyncError as e:
            logger.warning(f"Lyrics unavailable: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary containing additional context about
                     the error, useful for logging and debugging.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(LyricsyncError):
    """
    Raised when the configuration is unusable.

    This is a CRITICAL error that stops the `start` command.

    Common causes:
        - Spotify client_id / client_secret not configured
        - Invalid values (negative polling interval, unknown colors)
        - config.yaml could not be written
    """
    pass


class AuthenticationError(LyricsyncError):
    """
    Raised when no valid Spotify access token can be obtained.

    Common causes:
        - Authorization was denied in the browser
        - The callback never arrived (timeout)
        - The stored refresh token was revoked
    """
    pass


class TransientFetchError(LyricsyncError):
    """
    Base for failures at the network boundary.

    These are NON-CRITICAL: the poller leaves its state untouched and
    retries on the next cycle.
    """
    pass


class PlaybackFetchError(TransientFetchError):
    """
    Raised when the Spotify playback state cannot be fetched.

    Attributes:
        status_code: HTTP status returned by Spotify, if any.
    """

    def __init__(self, message: str, status_code: int | None = None, details: dict | None = None) -> None:
        details = details or {}
        if status_code is not None:
            details['status_code'] = status_code
        super().__init__(message, details)
        self.status_code = status_code


class LyricsFetchError(TransientFetchError):
    """Raised when the lyrics search request fails or returns garbage."""
    pass


class LyricsNotFoundError(LyricsyncError):
    """
    Raised when no candidate passes either selection pass.

    The display treats this as "no lyrics for this track" and shows an
    empty view instead of crashing.

    Attributes:
        track: Track name that was searched.
        artist: Artist name that was searched.
    """

    def __init__(self, track: str, artist: str, details: dict | None = None) -> None:
        super().__init__(f"No lyrics found for {track} - {artist}", details)
        self.track = track
        self.artist = artist
