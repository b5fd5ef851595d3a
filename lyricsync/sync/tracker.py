"""
Playback position tracking against a lyric document
Maps the playback position to the active lyric line and detects changes
"""
import threading
from dataclasses import dataclass
from typing import Sequence

from ..lyrics.models import LyricDocument, LyricLine
from ..utils.logger import get_logger


@dataclass(frozen=True)
class TrackerSnapshot:
    """
    Consistent view of the tracker state

    Attributes:
        document: Lyrics of the current track
        active_index: Index of the active line, -1 when no line is active yet
    """
    document: LyricDocument
    active_index: int = -1


def find_active_index(lines: Sequence[LyricLine], progress_ms: int) -> int:
    """
    Locate the line that should be highlighted at `progress_ms`

    Lines are scanned from the last one backwards and the first line whose
    cue time is <= progress_ms wins, so with out-of-order cues the latest
    qualifying line in document order is chosen.

    Args:
        lines: Lines in document order
        progress_ms: Playback position in milliseconds

    Returns:
        Active line index, or -1 if the position precedes every cue
    """
    for index in range(len(lines) - 1, -1, -1):
        if lines[index].time_ms <= progress_ms:
            return index
    return -1


class PlaybackTracker:
    """
    Thread-safe holder of the current document and active line

    The background poller is the only writer; the display reads snapshots.
    Document swaps and index updates are atomic with respect to readers.
    """

    def __init__(self, document: LyricDocument = None):
        self.logger = get_logger(__name__)
        self._lock = threading.Lock()
        self._state = TrackerSnapshot(document or LyricDocument.empty(), -1)

    def set_document(self, document: LyricDocument) -> None:
        """Install a new document and reset the active index to -1"""
        with self._lock:
            self._state = TrackerSnapshot(document, -1)
        self.logger.debug(f"Tracker document set: {len(document)} lines, {document.mode.value}")

    def advance(self, progress_ms: int) -> bool:
        """
        Update the active index for a new playback position

        Plain documents never advance.

        Args:
            progress_ms: Playback position in milliseconds

        Returns:
            True if the active index changed
        """
        with self._lock:
            state = self._state
            if not state.document.is_synced:
                return False

            new_index = find_active_index(state.document.lines, progress_ms)
            if new_index == state.active_index:
                return False

            self._state = TrackerSnapshot(state.document, new_index)
            return True

    def snapshot(self) -> TrackerSnapshot:
        """Return the current (document, active_index) pair"""
        with self._lock:
            return self._state

    @property
    def active_index(self) -> int:
        return self.snapshot().active_index

    @property
    def document(self) -> LyricDocument:
        return self.snapshot().document
