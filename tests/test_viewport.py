# tests/test_viewport.py
"""Test viewport composition"""

import pytest

from lyricsync.display.viewport import RowStyle, ViewportCompositor
from lyricsync.lyrics.models import LyricLine
from lyricsync.utils.helpers import display_width


def make_lines(*texts):
    return tuple(LyricLine(i * 1000, text) for i, text in enumerate(texts))


@pytest.fixture
def compositor():
    return ViewportCompositor()


@pytest.fixture
def five_lines():
    return make_lines("line 0", "line 1", "line 2", "line 3", "line 4")


class TestCompose:
    """Test row layout around the active line"""

    def test_active_line_centered(self, compositor, five_lines):
        """Test five single-row lines with index 2 in a five-row viewport"""
        rows = compositor.compose(five_lines, 2, 20, 5)

        assert [row.source_index for row in rows] == [0, 1, 2, 3, 4]
        assert [row.style for row in rows] == [
            RowStyle.BEFORE, RowStyle.BEFORE, RowStyle.ACTIVE_EMPHASIZED, RowStyle.AFTER, RowStyle.AFTER
        ]
        assert rows[2].text.strip() == "line 2"

    def test_rows_are_centered_and_padded(self, compositor, five_lines):
        """Test every row spans the full width with the text centered"""
        rows = compositor.compose(five_lines, 2, 20, 5)

        for row in rows:
            assert len(row.text) == 20
        assert rows[2].text == "       line 2       "

    def test_nothing_active_yet(self, compositor, five_lines):
        """Test index -1 centers the first line without emphasis"""
        rows = compositor.compose(five_lines, -1, 20, 5)

        assert rows[0].is_blank and rows[1].is_blank
        assert rows[2].source_index == 0
        assert rows[2].style is RowStyle.ACTIVE_PLAIN
        assert [row.source_index for row in rows[3:]] == [1, 2]

    def test_last_line_active(self, compositor, five_lines):
        """Test rows past the end are blank"""
        rows = compositor.compose(five_lines, 4, 20, 5)

        assert [row.source_index for row in rows] == [2, 3, 4, None, None]
        assert rows[3].text == " " * 20

    def test_index_past_end_clamped(self, compositor, five_lines):
        """Test out-of-range index is clamped to the last line"""
        rows = compositor.compose(five_lines, 10, 20, 5)

        assert rows[2].source_index == 4
        assert rows[2].style is RowStyle.ACTIVE_EMPHASIZED

    def test_wrapped_active_line(self, compositor):
        """Test a long active line occupies several centered rows"""
        lines = make_lines("before", "hello world", "after")
        rows = compositor.compose(lines, 1, 5, 5)

        assert len(rows) == 5
        assert [row.source_index for row in rows] == [0, 1, 1, 2, None]
        assert [row.text for row in rows[1:3]] == ["hello", "world"]

    def test_wide_characters(self, compositor):
        """Test CJK text is wrapped by display cells"""
        lines = make_lines("你好世界")
        rows = compositor.compose(lines, 0, 4, 4)

        active = [row for row in rows if row.source_index == 0]
        assert [row.text for row in active] == ["你好", "世界"]
        for row in rows:
            assert display_width(row.text) == 4

    def test_active_height_clamped(self, compositor):
        """Test wrapped rows never exceed the viewport height"""
        lines = make_lines("one two three four five six")
        rows = compositor.compose(lines, 0, 3, 2)

        assert len(rows) == 2
        assert all(row.source_index == 0 for row in rows)

    def test_context_lines_truncated(self, compositor):
        """Test non-active lines longer than the width are cut, not wrapped"""
        lines = make_lines("a very long previous line", "now", "a very long next line")
        rows = compositor.compose(lines, 1, 6, 3)

        assert len(rows) == 3
        assert rows[0].text == "a very"
        assert rows[2].text == "a very"

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, -1)])
    def test_degenerate_sizes(self, compositor, five_lines, width, height):
        """Test empty result for unusable viewport sizes"""
        assert compositor.compose(five_lines, 2, width, height) == []

    def test_no_lines(self, compositor):
        """Test empty document gives no rows"""
        assert compositor.compose((), -1, 20, 5) == []

    @pytest.mark.parametrize("height", [1, 2, 3, 4, 7, 10])
    def test_row_count_always_matches_height(self, compositor, five_lines, height):
        """Test exactly `height` rows for any active index"""
        for index in range(-1, 6):
            assert len(compositor.compose(five_lines, index, 12, height)) == height
