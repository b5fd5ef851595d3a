# tests/test_tracker.py
"""Test playback tracking"""

import threading

from lyricsync.lyrics.models import LyricDocument, LyricLine, LyricsMode
from lyricsync.sync.tracker import PlaybackTracker, find_active_index


class TestFindActiveIndex:
    """Test the backward scan"""

    def test_boundaries(self, synced_document):
        """Test cue times are inclusive"""
        lines = synced_document.lines
        assert find_active_index(lines, 0) == 0
        assert find_active_index(lines, 999) == 0
        assert find_active_index(lines, 4999) == 1
        assert find_active_index(lines, 5000) == 2
        assert find_active_index(lines, 999999) == 2

    def test_before_first_cue(self):
        """Test positions before every cue give -1"""
        lines = (LyricLine(1000, "a"), LyricLine(5000, "b"))
        assert find_active_index(lines, 500) == -1

    def test_empty(self):
        """Test empty line list"""
        assert find_active_index((), 1000) == -1

    def test_out_of_order_latest_in_document_wins(self):
        """Test tie-break picks the last qualifying line in document order"""
        lines = (LyricLine(5000, "late"), LyricLine(1000, "early"))
        assert find_active_index(lines, 6000) == 1


class TestPlaybackTracker:
    """Test tracker state changes"""

    def test_initial_state(self):
        """Test a new tracker holds an empty document"""
        tracker = PlaybackTracker()
        snapshot = tracker.snapshot()
        assert snapshot.document.is_empty
        assert snapshot.active_index == -1

    def test_advance_reports_changes(self, synced_document):
        """Test advance returns True only when the index moves"""
        tracker = PlaybackTracker()
        tracker.set_document(synced_document)

        assert tracker.advance(4999) is True
        assert tracker.active_index == 1
        assert tracker.advance(4500) is False
        assert tracker.advance(5000) is True
        assert tracker.active_index == 2
        assert tracker.advance(0) is True
        assert tracker.active_index == 0

    def test_advance_before_first_cue(self):
        """Test rewinding before the first cue clears the active line"""
        tracker = PlaybackTracker(LyricDocument(
            lines=(LyricLine(1000, "a"), LyricLine(5000, "b")), mode=LyricsMode.SYNCED
        ))

        assert tracker.advance(500) is False
        assert tracker.active_index == -1
        tracker.advance(1500)
        assert tracker.advance(500) is True
        assert tracker.active_index == -1

    def test_set_document_resets_index(self, synced_document):
        """Test swapping documents always resets to -1"""
        tracker = PlaybackTracker()
        tracker.set_document(synced_document)
        tracker.advance(5000)

        tracker.set_document(synced_document)
        assert tracker.active_index == -1

    def test_plain_document_never_advances(self, plain_document):
        """Test plain documents keep index -1"""
        tracker = PlaybackTracker(plain_document)

        assert tracker.advance(0) is False
        assert tracker.advance(100000) is False
        assert tracker.active_index == -1

    def test_snapshot_is_consistent(self, synced_document):
        """Test readers always see a valid index for the document they see"""
        tracker = PlaybackTracker()
        small = LyricDocument(lines=(LyricLine(0, "only"),), mode=LyricsMode.SYNCED)
        errors = []

        def writer():
            for i in range(500):
                tracker.set_document(synced_document if i % 2 else small)
                tracker.advance(6000)

        def reader():
            for _ in range(500):
                snapshot = tracker.snapshot()
                if not -1 <= snapshot.active_index < max(len(snapshot.document), 1):
                    errors.append(snapshot)

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
