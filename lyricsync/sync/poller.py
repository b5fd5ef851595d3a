"""
Background playback poller

PlaybackPoller runs on its own thread and is the only writer of the shared
PlaybackTracker. Each tick it:

1. Reads the current playback state from the playback provider
2. On a track change, fetches and post-processes the lyrics, then swaps the
   document into the tracker
3. Advances the tracker to the current position
4. Wakes the display through the RedrawSignal when something visible changed

Failures never stop the loop: a failed playback read leaves everything as it
was and retries shortly, a failed lyrics lookup shows an empty document.
"""

import queue
import threading
from typing import Callable, Optional

from ..config.settings import Settings, get_settings
from ..exceptions import LyricsyncError, LyricsNotFoundError
from ..lyrics.models import LyricDocument
from ..utils.logger import get_logger
from .tracker import PlaybackTracker


class RedrawSignal:
    """
    Single-slot redraw notification

    Any number of notify() calls between two wait() calls collapse into a
    single pending wake-up.
    """

    def __init__(self):
        self._queue: queue.Queue = queue.Queue(maxsize=1)

    def notify(self) -> None:
        """Request a redraw without ever blocking the caller"""
        try:
            self._queue.put_nowait(None)
        except queue.Full:
            pass

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Consume a pending notification

        Args:
            timeout: Seconds to wait; 0 checks without blocking

        Returns:
            True if a notification was consumed
        """
        try:
            if timeout is not None and timeout <= 0:
                self._queue.get_nowait()
            else:
                self._queue.get(timeout=timeout)
            return True
        except queue.Empty:
            return False

    def pending(self) -> bool:
        return not self._queue.empty()


class PlaybackPoller(threading.Thread):
    """
    Playback polling thread driving the tracker

    Args:
        playback_provider: Object with get_playback_state() -> Optional[PlaybackState]
        lyrics_provider: Object with fetch_document(track, artist, album, duration_sec)
        tracker: Shared tracker updated by this thread only
        signal: Redraw signal notified after visible changes
        converter: Optional object with convert_document(document)
        settings: Settings instance (defaults to the global one)
    """

    def __init__(
        self,
        playback_provider,
        lyrics_provider,
        tracker: PlaybackTracker,
        signal: RedrawSignal,
        converter=None,
        settings: Optional[Settings] = None,
        on_track_change: Optional[Callable[[str], None]] = None
    ):
        super().__init__(name="lyricsync-poller", daemon=True)
        self.playback_provider = playback_provider
        self.lyrics_provider = lyrics_provider
        self.tracker = tracker
        self.signal = signal
        self.converter = converter
        self.settings = settings or get_settings()
        self.on_track_change = on_track_change
        self.logger = get_logger(__name__)

        self.current_track_key: Optional[str] = None
        self._stop_event = threading.Event()

    def _load_document(self, state) -> LyricDocument:
        """Fetch lyrics for a track, returning an empty document on failure"""
        try:
            document = self.lyrics_provider.fetch_document(
                state.track, state.artist, state.album, state.duration_sec
            )
        except LyricsNotFoundError as e:
            self.logger.info(str(e))
            return LyricDocument.empty()
        except LyricsyncError as e:
            self.logger.warning(f"Lyrics lookup failed for {state.track_key}: {e}")
            return LyricDocument.empty()
        except Exception as e:
            self.logger.error(f"Unexpected error loading lyrics for {state.track_key}: {e}", exc_info=True)
            return LyricDocument.empty()

        if self.converter is not None:
            try:
                document = self.converter.convert_document(document)
            except Exception as e:
                self.logger.error(f"Script conversion failed for {state.track_key}: {e}", exc_info=True)

        self.logger.info(f"Loaded {document.mode.value} lyrics for {state.track_key} ({len(document)} lines)")
        return document

    def poll_once(self) -> float:
        """
        Run one polling tick

        Returns:
            Seconds to sleep before the next tick
        """
        polling = self.settings.polling

        try:
            state = self.playback_provider.get_playback_state()
        except LyricsyncError as e:
            self.logger.debug(f"Playback fetch failed: {e}")
            return polling.retry_delay

        if state is None:
            return polling.idle_delay

        changed = False
        if state.track_key != self.current_track_key:
            self.logger.info(f"Now playing: {state.track_key}")
            self.current_track_key = state.track_key
            self.tracker.set_document(self._load_document(state))
            changed = True
            if self.on_track_change:
                self.on_track_change(state.track_key)

        if self.tracker.advance(state.progress_ms):
            changed = True

        if changed:
            self.signal.notify()

        return polling.interval

    def run(self) -> None:
        self.logger.debug("Poller started")
        while not self._stop_event.is_set():
            try:
                delay = self.poll_once()
            except Exception as e:
                # Keep the view alive; the next tick starts from a clean read
                self.logger.error(f"Unexpected poller error: {e}", exc_info=True)
                delay = self.settings.polling.retry_delay
            self._stop_event.wait(delay)
        self.logger.debug("Poller stopped")

    def stop(self) -> None:
        """Ask the loop to exit; interrupts a pending sleep"""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()
