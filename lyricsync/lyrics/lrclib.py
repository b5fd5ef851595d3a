"""
LRCLIB lyrics provider

LRCLIB (https://lrclib.net) is a free, open lyrics database that serves both
synced (LRC) and plain lyrics without an API key. Any server exposing the
same `/api/search` endpoint (public mirrors, a self-hosted instance) can be
used by changing `lyrics.base_url`.

The provider only fetches candidates; deciding which one matches the playing
track is the selector's job.

Usage:

    provider = get_lrclib_provider()
    document = provider.fetch_document("Song", "Artist", "Album", 215)
"""

from typing import Any, List, Optional

import requests

from .models import Candidate, LyricDocument
from .selector import select_lyrics
from ..config.settings import get_settings
from ..exceptions import LyricsFetchError
from ..utils.helpers import retry_on_failure
from ..utils.logger import get_logger, log_performance


class LrcLibProvider:
    """
    Lyric-candidate provider backed by the LRCLIB search API

    One `requests.Session` is kept for connection reuse across track changes.
    Transport errors are retried once on a fixed cadence, then surfaced as
    LyricsFetchError.
    """

    SEARCH_PATH = "/api/search"

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None):
        """
        Initialize provider

        Args:
            base_url: Server root, defaults to `lyrics.base_url` from settings
            session: Pre-configured HTTP session (tests inject a mock here)
        """
        self.settings = get_settings()
        self.logger = get_logger(__name__)
        self.base_url = (base_url or self.settings.lyrics.base_url).rstrip("/")
        self.timeout = self.settings.lyrics.timeout

        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": self.settings.network.user_agent,
            "Accept": "application/json",
        })

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{self.SEARCH_PATH}"

    @retry_on_failure(max_attempts=2, delay=0.5, backoff=1.0, exceptions=(requests.ConnectionError, requests.Timeout))
    def _get(self, params: dict) -> requests.Response:
        return self.session.get(self.search_url, params=params, timeout=self.timeout)

    def search(self, track: str, artist: str, album: str = "", duration_sec: Optional[int] = None) -> List[Candidate]:
        """
        Search LRCLIB for lyric candidates

        Args:
            track: Track name
            artist: Artist name
            album: Album name, sent when known to improve ranking
            duration_sec: Unused by the search endpoint, accepted for interface symmetry

        Returns:
            Candidates in the order returned by the server

        Raises:
            LyricsFetchError: On transport errors, HTTP errors or malformed JSON
        """
        params = {"track_name": track, "artist_name": artist}
        if album:
            params["album_name"] = album

        self.logger.debug(f"Searching LRCLIB for: {artist} - {track} ({album})")

        try:
            response = self._get(params)
            response.raise_for_status()
            payload: Any = response.json()
        except requests.RequestException as e:
            raise LyricsFetchError(
                f"Lyrics search failed for {track} - {artist}: {e}",
                details={'url': self.search_url, 'params': params}
            )
        except ValueError as e:
            raise LyricsFetchError(
                f"Lyrics search returned invalid JSON: {e}",
                details={'url': self.search_url, 'params': params}
            )

        if not isinstance(payload, list):
            self.logger.debug(f"Unexpected LRCLIB payload type: {type(payload).__name__}")
            return []

        candidates = [Candidate.from_lrclib_data(item) for item in payload if isinstance(item, dict)]
        self.logger.debug(f"LRCLIB returned {len(candidates)} candidates for {artist} - {track}")
        return candidates

    @log_performance
    def fetch_document(self, track: str, artist: str, album: str, duration_sec: int) -> LyricDocument:
        """
        Search and select the lyrics for a track

        Returns:
            Selected lyric document

        Raises:
            LyricsFetchError: If the search request failed
            LyricsNotFoundError: If no candidate matched
        """
        candidates = self.search(track, artist, album, duration_sec)
        lyrics_config = self.settings.lyrics
        return select_lyrics(
            candidates,
            track,
            artist,
            album,
            duration_sec,
            tolerance=lyrics_config.duration_tolerance,
            spam_markers=lyrics_config.spam_markers,
            glyph=lyrics_config.interlude_glyph
        )

    def is_available(self) -> bool:
        """Lightweight reachability check used by `lyricsync doctor`"""
        try:
            response = self.session.get(self.search_url, params={"q": "test"}, timeout=self.timeout)
            return response.status_code < 500
        except requests.RequestException:
            return False


# Global provider instance
_lrclib_provider: Optional[LrcLibProvider] = None


def get_lrclib_provider() -> LrcLibProvider:
    """Get global LRCLIB provider instance"""
    global _lrclib_provider
    if not _lrclib_provider:
        _lrclib_provider = LrcLibProvider()
    return _lrclib_provider


def reset_lrclib_provider() -> None:
    """Reset global provider instance (after settings changes)"""
    global _lrclib_provider
    _lrclib_provider = None
