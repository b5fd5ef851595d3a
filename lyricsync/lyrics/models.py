"""
Data models for lyric documents and lyric search candidates

- LyricLine: one display line with its cue time
- LyricsMode: whether a document advances with playback (SYNCED) or not (PLAIN)
- LyricDocument: immutable ordered sequence of lines for one track
- Candidate: one search result from a lyrics source, alive only during selection

Documents are never mutated: a track change builds a new document and the
previous one is dropped. Post-processing (script conversion) goes through
`LyricDocument.map_text`, which returns a new document with the same line
count and order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple


class LyricsMode(Enum):
    """
    Timing mode of a lyric document

    SYNCED documents carry meaningful cue times and follow the playback
    position. PLAIN documents have every offset at 0 and never advance.
    """
    SYNCED = "synced"
    PLAIN = "plain"


@dataclass(frozen=True)
class LyricLine:
    """
    One lyric line

    Attributes:
        time_ms: Cue time in milliseconds from track start (0 when unsynced)
        text: Line text, untrimmed
    """
    time_ms: int
    text: str


@dataclass(frozen=True)
class LyricDocument:
    """
    Ordered lyric lines for a single track

    Lines keep the order in which they were found in the source; out-of-order
    timestamps are passed through as-is.
    """
    lines: Tuple[LyricLine, ...] = ()
    mode: LyricsMode = LyricsMode.PLAIN

    @classmethod
    def empty(cls) -> 'LyricDocument':
        """Document shown when a track has no lyrics"""
        return cls(lines=(), mode=LyricsMode.PLAIN)

    @property
    def is_synced(self) -> bool:
        return self.mode is LyricsMode.SYNCED

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def map_text(self, func: Callable[[str], str]) -> 'LyricDocument':
        """
        Return a copy with `func` applied to every line's text

        Cue times, line count, order and mode are preserved.
        """
        return LyricDocument(
            lines=tuple(LyricLine(line.time_ms, func(line.text)) for line in self.lines),
            mode=self.mode
        )

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class Candidate:
    """
    One lyrics search result with its declared metadata

    Missing lyric bodies are None rather than empty strings so that "this
    source has no synced lyrics" is an explicit state.

    Attributes:
        track_name: Track title declared by the source
        artist_name: Artist declared by the source
        album_name: Album declared by the source
        duration_sec: Declared track length in seconds (may be fractional)
        synced_lyrics: LRC body, if any
        plain_lyrics: Plain text body, if any
        source_id: Identifier of the record at the source, for logging
    """
    track_name: str
    artist_name: str
    album_name: str = ""
    duration_sec: float = 0.0
    synced_lyrics: Optional[str] = None
    plain_lyrics: Optional[str] = None
    source_id: Optional[Any] = field(default=None, compare=False)

    @classmethod
    def from_lrclib_data(cls, data: Dict[str, Any]) -> 'Candidate':
        """
        Create a candidate from an LRCLIB search result object

        Args:
            data: One element of the `/api/search` JSON array

        Returns:
            Candidate with absent or null fields normalized
        """
        try:
            duration = float(data.get('duration') or 0)
        except (TypeError, ValueError):
            duration = 0.0

        return cls(
            track_name=str(data.get('trackName') or data.get('name') or ''),
            artist_name=str(data.get('artistName') or ''),
            album_name=str(data.get('albumName') or ''),
            duration_sec=duration,
            synced_lyrics=data.get('syncedLyrics') or None,
            plain_lyrics=data.get('plainLyrics') or None,
            source_id=data.get('id'),
        )

    @property
    def has_synced(self) -> bool:
        return bool(self.synced_lyrics)

    @property
    def has_plain(self) -> bool:
        return bool(self.plain_lyrics)
