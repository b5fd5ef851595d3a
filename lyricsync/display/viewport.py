"""
Viewport composition for the lyrics view

Turns (lines, active index, terminal size) into exactly `height` rows of
exactly `width` cells. The active line is word-wrapped and vertically
centered; the lines before it fill the rows above, the lines after it the
rows below. Rows without a source line are blank.

The compositor is pure: it never touches curses, which keeps the layout
testable and lets the renderer stay a thin painting layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from ..lyrics.models import LyricLine
from ..utils.helpers import center_text, wrap_text


class RowStyle(Enum):
    """Visual role of a viewport row"""
    BEFORE = "before"
    ACTIVE_EMPHASIZED = "active_emphasized"
    ACTIVE_PLAIN = "active_plain"  # nothing sung yet; painted like AFTER
    AFTER = "after"


@dataclass(frozen=True)
class ViewportRow:
    """
    One screen row

    Attributes:
        text: Row content, centered and padded to the viewport width
        style: How the row should be painted
        source_index: Index of the lyric line shown, None for blank rows
    """
    text: str
    style: RowStyle
    source_index: Optional[int] = None

    @property
    def is_blank(self) -> bool:
        return self.source_index is None


class ViewportCompositor:
    """Lays lyric lines out around the active one"""

    def _blank(self, width: int, style: RowStyle) -> ViewportRow:
        return ViewportRow(" " * width, style, None)

    def _line_row(self, lines: Sequence[LyricLine], index: int, width: int, style: RowStyle) -> ViewportRow:
        # Context lines are never wrapped; center_text truncates overflow
        return ViewportRow(center_text(lines[index].text, width), style, index)

    def compose(self, lines: Sequence[LyricLine], active_index: int, width: int, height: int) -> List[ViewportRow]:
        """
        Compute the rows of a `width` x `height` viewport

        Args:
            lines: Lyric lines in document order
            active_index: Active line index; -1 (or any value outside the
                document) is clamped for centering purposes
            width: Viewport width in terminal cells
            height: Viewport height in rows

        Returns:
            Exactly `height` rows, or an empty list when there is nothing
            to lay out or no room to do it
        """
        if width <= 0 or height <= 0 or not lines:
            return []

        count = len(lines)
        center_idx = min(max(active_index, 0), count - 1)
        active_style = RowStyle.ACTIVE_EMPHASIZED if active_index >= 0 else RowStyle.ACTIVE_PLAIN

        wrapped = wrap_text(lines[center_idx].text, width)[:height]
        active_height = len(wrapped)
        top_pad = (height - active_height) // 2
        bottom_pad = height - top_pad - active_height

        rows: List[ViewportRow] = []

        for row in range(top_pad):
            source = center_idx - (top_pad - row)
            if source < 0:
                rows.append(self._blank(width, RowStyle.BEFORE))
            else:
                rows.append(self._line_row(lines, source, width, RowStyle.BEFORE))

        for chunk in wrapped:
            rows.append(ViewportRow(center_text(chunk, width), active_style, center_idx))

        for offset in range(1, bottom_pad + 1):
            source = center_idx + offset
            if source >= count:
                rows.append(self._blank(width, RowStyle.AFTER))
            else:
                rows.append(self._line_row(lines, source, width, RowStyle.AFTER))

        return rows
