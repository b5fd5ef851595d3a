"""Test configuration and fixtures"""

import pytest
import tempfile
from pathlib import Path
from unittest.mock import Mock

from lyricsync.lyrics.models import Candidate, LyricDocument, LyricLine, LyricsMode


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def mock_settings():
    """Mock settings for testing"""
    settings = Mock()
    settings.polling.interval = 0.5
    settings.polling.retry_delay = 0.25
    settings.polling.idle_delay = 1.0
    settings.lyrics.duration_tolerance = 2
    settings.lyrics.spam_markers = ["rickrolling"]
    settings.lyrics.interlude_glyph = "♪"
    settings.lyrics.script_conversion = "t2s"
    settings.display.before_color = "white"
    settings.display.current_color = "blue"
    settings.display.after_color = "default"
    settings.display.bold_current = True
    settings.display.dim_before = True
    settings.display.refresh_ms = 100
    return settings


@pytest.fixture
def sample_lrc():
    """Synced lyrics body with a metadata tag and an instrumental break"""
    return (
        "[ar:Test Artist]\n"
        "[00:01.00]First line\n"
        "[00:05.50]Second line\n"
        "[00:09.00]\n"
        "[00:12.345]Third line\n"
        "[00:15.00]Last line"
    )


@pytest.fixture
def sample_playback_data():
    """Sample `currently playing` payload"""
    return {
        'is_playing': True,
        'progress_ms': 42000,
        'currently_playing_type': 'track',
        'item': {
            'id': 'test_track_123',
            'name': 'Test Song',
            'artists': [
                {'id': 'artist_123', 'name': 'Test Artist'},
                {'id': 'artist_456', 'name': 'Guest Artist'}
            ],
            'album': {'id': 'album_123', 'name': 'Test Album'},
            'duration_ms': 210500,
        }
    }


@pytest.fixture
def make_candidate():
    """Factory for search candidates matching 'Test Song' by 'Test Artist'"""
    def factory(**overrides):
        values = {
            'track_name': 'Test Song',
            'artist_name': 'Test Artist',
            'album_name': 'Test Album',
            'duration_sec': 210.0,
            'synced_lyrics': None,
            'plain_lyrics': None,
        }
        values.update(overrides)
        return Candidate(**values)
    return factory


@pytest.fixture
def synced_document():
    """Synced document with cues at 0s, 1s and 5s"""
    return LyricDocument(
        lines=(LyricLine(0, "zero"), LyricLine(1000, "one"), LyricLine(5000, "five")),
        mode=LyricsMode.SYNCED
    )


@pytest.fixture
def plain_document():
    """Plain document with two lines"""
    return LyricDocument(
        lines=(LyricLine(0, "verse"), LyricLine(0, "chorus")),
        mode=LyricsMode.PLAIN
    )
