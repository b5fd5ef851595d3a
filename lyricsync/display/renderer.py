"""
Terminal lyrics view built on curses

CursesRenderer paints ViewportRows with the configured colors and
LyricsDisplay owns the foreground loop: it waits for redraw notifications
from the poller (or a terminal resize), paints a fresh tracker snapshot and
exits when the user presses q, Esc or Ctrl+C.
"""

import curses
from typing import Dict, List, Optional

from ..config.settings import DisplayConfig, Settings, get_settings
from ..sync.poller import PlaybackPoller, RedrawSignal
from ..sync.tracker import PlaybackTracker, TrackerSnapshot
from ..utils.logger import get_logger
from .viewport import RowStyle, ViewportCompositor, ViewportRow

# Terminal color names accepted in the display section
COLOR_MAP: Dict[str, int] = {
    'black': curses.COLOR_BLACK,
    'red': curses.COLOR_RED,
    'green': curses.COLOR_GREEN,
    'yellow': curses.COLOR_YELLOW,
    'blue': curses.COLOR_BLUE,
    'magenta': curses.COLOR_MAGENTA,
    'cyan': curses.COLOR_CYAN,
    'white': curses.COLOR_WHITE,
    'default': -1,
}

PAIR_BEFORE = 1
PAIR_CURRENT = 2
PAIR_AFTER = 3

KEY_ESCAPE = 27
QUIT_KEYS = (ord('q'), ord('Q'), KEY_ESCAPE)


def resolve_color(name: str) -> int:
    """Map a configured color name to a curses color number (-1 = terminal default)"""
    return COLOR_MAP.get((name or 'default').lower(), -1)


class CursesRenderer:
    """Paints composed rows onto a curses window"""

    def __init__(self, stdscr, display_config: DisplayConfig, compositor: Optional[ViewportCompositor] = None):
        self.stdscr = stdscr
        self.config = display_config
        self.compositor = compositor or ViewportCompositor()
        self.logger = get_logger(__name__)
        self._attrs: Dict[RowStyle, int] = {}
        self._init_colors()

    def _init_colors(self) -> None:
        """Create the color pairs; falls back to attributes only on mono terminals"""
        before = current = after = curses.A_NORMAL

        if curses.has_colors():
            curses.start_color()
            try:
                curses.use_default_colors()
            except curses.error:
                pass
            curses.init_pair(PAIR_BEFORE, resolve_color(self.config.before_color), -1)
            curses.init_pair(PAIR_CURRENT, resolve_color(self.config.current_color), -1)
            curses.init_pair(PAIR_AFTER, resolve_color(self.config.after_color), -1)
            before = curses.color_pair(PAIR_BEFORE)
            current = curses.color_pair(PAIR_CURRENT)
            after = curses.color_pair(PAIR_AFTER)

        if self.config.dim_before:
            before |= curses.A_DIM
        if self.config.bold_current:
            current |= curses.A_BOLD

        self._attrs = {
            RowStyle.BEFORE: before,
            RowStyle.ACTIVE_EMPHASIZED: current,
            RowStyle.ACTIVE_PLAIN: after,
            RowStyle.AFTER: after,
        }

    def attr_for(self, style: RowStyle) -> int:
        return self._attrs.get(style, curses.A_NORMAL)

    def compose(self, snapshot: TrackerSnapshot, width: int, height: int) -> List[ViewportRow]:
        """Rows for a snapshot; an empty document yields no rows"""
        return self.compositor.compose(snapshot.document.lines, snapshot.active_index, width, height)

    def draw(self, snapshot: TrackerSnapshot) -> None:
        """Clear the screen and paint a snapshot"""
        height, width = self.stdscr.getmaxyx()
        self.stdscr.erase()

        for y, row in enumerate(self.compose(snapshot, width, height)):
            try:
                self.stdscr.addstr(y, 0, row.text, self.attr_for(row.style))
            except curses.error:
                # Writing the bottom-right cell moves the cursor off-screen
                pass

        self.stdscr.refresh()


class LyricsDisplay:
    """
    Foreground display loop

    Args:
        tracker: Shared tracker read through snapshots
        signal: Redraw signal fed by the poller
        poller: Poller to stop and join on exit (optional)
        settings: Settings instance (defaults to the global one)
    """

    def __init__(
        self,
        tracker: PlaybackTracker,
        signal: RedrawSignal,
        poller: Optional[PlaybackPoller] = None,
        settings: Optional[Settings] = None
    ):
        self.tracker = tracker
        self.signal = signal
        self.poller = poller
        self.settings = settings or get_settings()
        self.logger = get_logger(__name__)
        self.renderer: Optional[CursesRenderer] = None

    @staticmethod
    def is_quit_key(key: int) -> bool:
        return key in QUIT_KEYS

    def _loop(self, stdscr) -> None:
        display_config = self.settings.display

        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.keypad(True)
        stdscr.timeout(max(int(display_config.refresh_ms), 1))

        self.renderer = CursesRenderer(stdscr, display_config)
        self.renderer.draw(self.tracker.snapshot())

        while True:
            key = stdscr.getch()
            if self.is_quit_key(key):
                self.logger.debug("Quit requested")
                break

            resized = key == curses.KEY_RESIZE
            if self.signal.wait(0) or resized:
                self.renderer.draw(self.tracker.snapshot())

    def run(self) -> None:
        """Run until the user quits, then stop and join the poller"""
        if self.poller is not None and not self.poller.is_alive():
            self.poller.start()

        try:
            curses.wrapper(self._loop)
        except KeyboardInterrupt:
            self.logger.debug("Interrupted")
        finally:
            if self.poller is not None:
                self.poller.stop()
                if self.poller.is_alive():
                    self.poller.join(timeout=2.0)
