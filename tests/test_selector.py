# tests/test_selector.py
"""Test lyric candidate selection"""

import pytest

from lyricsync.exceptions import LyricsNotFoundError
from lyricsync.lyrics.models import Candidate, LyricsMode
from lyricsync.lyrics.selector import (
    contains_spam_marker,
    duration_matches,
    select_lyrics
)

SYNCED_BODY = "[00:01.00]synced one\n[00:02.00]synced two"
PLAIN_BODY = "plain one\nplain two"


class TestHelpers:
    """Test matching helpers"""

    def test_duration_matches(self):
        """Test rounded duration within tolerance"""
        assert duration_matches(210.4, 210)
        assert duration_matches(212.0, 210)
        assert duration_matches(207.6, 210)
        assert not duration_matches(212.6, 210)
        assert not duration_matches(207.4, 210)

    def test_duration_rounds_half_up(self):
        """Test declared durations ending in .5 round up consistently"""
        assert duration_matches(182.5, 185)
        assert duration_matches(183.5, 186)
        assert not duration_matches(182.5, 180)
        assert not duration_matches(183.5, 181)

    def test_spam_marker_case_insensitive(self):
        """Test decoy detection ignores case"""
        assert contains_spam_marker("[00:01.00]Never gonna RickRolling you")
        assert not contains_spam_marker("[00:01.00]ordinary words")


class TestSelectLyrics:
    """Test two-pass selection"""

    def test_synced_preferred_over_earlier_plain(self, make_candidate):
        """Test a matching synced candidate wins over a higher-ranked plain one"""
        candidates = [
            make_candidate(plain_lyrics=PLAIN_BODY),
            make_candidate(duration_sec=211.6, synced_lyrics=SYNCED_BODY),
        ]

        document = select_lyrics(candidates, "Test Song", "Test Artist", "Test Album", 210)

        assert document.mode is LyricsMode.SYNCED
        assert [line.text for line in document.lines] == ["synced one", "synced two"]

    def test_name_match_is_case_insensitive(self, make_candidate):
        """Test track and artist comparison ignores case"""
        candidates = [make_candidate(track_name="TEST SONG", artist_name="test artist",
                                     synced_lyrics=SYNCED_BODY)]
        document = select_lyrics(candidates, "Test Song", "Test Artist", "", 210)
        assert document.is_synced

    def test_duration_mismatch_falls_back_to_plain(self, make_candidate):
        """Test synced body outside tolerance is not used"""
        candidates = [
            make_candidate(duration_sec=200.0, synced_lyrics=SYNCED_BODY, plain_lyrics=PLAIN_BODY),
        ]

        document = select_lyrics(candidates, "Test Song", "Test Artist", "", 210)

        assert document.mode is LyricsMode.PLAIN
        assert document.lines[0].text == "plain one"

    def test_decoy_skipped(self, make_candidate):
        """Test spam-marked synced body is skipped and the pass continues"""
        candidates = [
            make_candidate(synced_lyrics="[00:01.00]rickRolling"),
            make_candidate(synced_lyrics=SYNCED_BODY),
        ]

        document = select_lyrics(candidates, "Test Song", "Test Artist", "", 210)
        assert document.lines[0].text == "synced one"

    def test_custom_tolerance(self, make_candidate):
        """Test tolerance parameter widens the duration window"""
        candidates = [make_candidate(duration_sec=215.0, synced_lyrics=SYNCED_BODY)]
        document = select_lyrics(candidates, "Test Song", "Test Artist", "", 210, tolerance=5)
        assert document.is_synced

    def test_plain_ignores_duration(self, make_candidate):
        """Test plain pass checks names only"""
        candidates = [make_candidate(duration_sec=0.0, album_name="Other", plain_lyrics=PLAIN_BODY)]
        document = select_lyrics(candidates, "Test Song", "Test Artist", "Test Album", 210)
        assert document.mode is LyricsMode.PLAIN

    def test_wrong_artist_not_found(self, make_candidate):
        """Test candidates for another artist are rejected"""
        candidates = [make_candidate(artist_name="Someone Else", synced_lyrics=SYNCED_BODY,
                                     plain_lyrics=PLAIN_BODY)]

        with pytest.raises(LyricsNotFoundError) as exc_info:
            select_lyrics(candidates, "Test Song", "Test Artist", "", 210)

        assert exc_info.value.track == "Test Song"
        assert exc_info.value.artist == "Test Artist"
        assert "Test Song" in str(exc_info.value)

    def test_no_candidates(self):
        """Test empty search result raises"""
        with pytest.raises(LyricsNotFoundError):
            select_lyrics([], "Test Song", "Test Artist", "", 210)


class TestCandidate:
    """Test candidate construction from LRCLIB payloads"""

    def test_from_lrclib_data(self):
        """Test field mapping and null normalization"""
        candidate = Candidate.from_lrclib_data({
            'id': 42,
            'trackName': 'Song',
            'artistName': 'Artist',
            'albumName': None,
            'duration': 180.7,
            'syncedLyrics': None,
            'plainLyrics': 'words',
        })

        assert candidate.track_name == 'Song'
        assert candidate.album_name == ''
        assert candidate.duration_sec == 180.7
        assert not candidate.has_synced
        assert candidate.has_plain
        assert candidate.source_id == 42

    def test_numeric_names_coerced(self):
        """Test numeric titles from the API still match by name"""
        candidate = Candidate.from_lrclib_data({
            'trackName': 1999,
            'artistName': 'Prince',
            'albumName': 1999,
            'duration': 379.0,
            'syncedLyrics': '[00:01.00]party',
        })

        assert candidate.track_name == '1999'
        document = select_lyrics([candidate], "1999", "Prince", "1999", 379)
        assert document.mode is LyricsMode.SYNCED
