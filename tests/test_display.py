# tests/test_display.py
"""Test the curses renderer and display loop with a fake screen"""

import curses
from unittest.mock import Mock, patch

import pytest

from lyricsync.display.renderer import (
    CursesRenderer,
    LyricsDisplay,
    resolve_color
)
from lyricsync.display.viewport import RowStyle
from lyricsync.lyrics.models import LyricDocument
from lyricsync.sync.poller import RedrawSignal
from lyricsync.sync.tracker import PlaybackTracker, TrackerSnapshot


@pytest.fixture
def stdscr():
    screen = Mock()
    screen.getmaxyx.return_value = (3, 10)
    return screen


@pytest.fixture
def renderer(stdscr, mock_settings):
    with patch('lyricsync.display.renderer.curses.has_colors', return_value=False):
        return CursesRenderer(stdscr, mock_settings.display)


class TestResolveColor:
    """Test color name mapping"""

    def test_known_colors(self):
        """Test names map to curses colors"""
        assert resolve_color("blue") == curses.COLOR_BLUE
        assert resolve_color("WHITE") == curses.COLOR_WHITE

    def test_default_and_unknown(self):
        """Test terminal default for 'default' and unknown names"""
        assert resolve_color("default") == -1
        assert resolve_color("chartreuse") == -1
        assert resolve_color("") == -1


class TestCursesRenderer:
    """Test painting"""

    def test_attributes(self, renderer):
        """Test bold current line, dim context above, plain below"""
        assert renderer.attr_for(RowStyle.ACTIVE_EMPHASIZED) & curses.A_BOLD
        assert renderer.attr_for(RowStyle.BEFORE) & curses.A_DIM
        assert renderer.attr_for(RowStyle.ACTIVE_PLAIN) == renderer.attr_for(RowStyle.AFTER)

    def test_draw_rows(self, renderer, stdscr, synced_document):
        """Test one addstr per row with the row style"""
        renderer.draw(TrackerSnapshot(synced_document, 1))

        stdscr.erase.assert_called_once()
        stdscr.refresh.assert_called_once()
        calls = stdscr.addstr.call_args_list
        assert [c.args[0] for c in calls] == [0, 1, 2]
        assert calls[1].args[2] == renderer.attr_for(RowStyle.ACTIVE_EMPHASIZED)
        assert calls[1].args[1].strip() == "one"

    def test_empty_document_draws_nothing(self, renderer, stdscr):
        """Test an empty document clears the screen without painting rows"""
        snapshot = TrackerSnapshot(LyricDocument.empty(), -1)

        renderer.draw(snapshot)

        assert renderer.compose(snapshot, 20, 5) == []
        stdscr.erase.assert_called_once()
        stdscr.refresh.assert_called_once()
        stdscr.addstr.assert_not_called()

    def test_curses_errors_ignored(self, renderer, stdscr, synced_document):
        """Test writing the bottom-right cell does not crash the view"""
        stdscr.addstr.side_effect = curses.error("out of bounds")

        renderer.draw(TrackerSnapshot(synced_document, 0))

        assert stdscr.addstr.call_count == 3


class TestLyricsDisplay:
    """Test the foreground loop"""

    def test_quit_keys(self):
        """Test q, Q and Esc quit"""
        assert LyricsDisplay.is_quit_key(ord('q'))
        assert LyricsDisplay.is_quit_key(ord('Q'))
        assert LyricsDisplay.is_quit_key(27)
        assert not LyricsDisplay.is_quit_key(ord('x'))
        assert not LyricsDisplay.is_quit_key(-1)

    def test_loop_redraws_on_signal_and_quits(self, stdscr, mock_settings, synced_document):
        """Test redraw after a notification, then quit on 'q'"""
        tracker = PlaybackTracker(synced_document)
        signal = RedrawSignal()
        display = LyricsDisplay(tracker, signal, settings=mock_settings)

        keys = iter([-1, -1, ord('q')])

        def getch():
            key = next(keys)
            if key == -1:
                signal.notify()
            return key

        stdscr.getch.side_effect = getch

        with patch('lyricsync.display.renderer.curses.curs_set'), \
                patch('lyricsync.display.renderer.curses.has_colors', return_value=False), \
                patch.object(CursesRenderer, 'draw') as mock_draw:
            display._loop(stdscr)

        # Initial paint plus one per notification
        assert mock_draw.call_count == 3
        stdscr.timeout.assert_called_once_with(100)

    def test_run_stops_poller(self, mock_settings):
        """Test the poller is stopped and joined when the view exits"""
        poller = Mock()
        poller.is_alive.side_effect = [False, True]
        display = LyricsDisplay(PlaybackTracker(), RedrawSignal(), poller=poller, settings=mock_settings)

        with patch('lyricsync.display.renderer.curses.wrapper', side_effect=KeyboardInterrupt):
            display.run()

        poller.start.assert_called_once()
        poller.stop.assert_called_once()
        poller.join.assert_called_once_with(timeout=2.0)
