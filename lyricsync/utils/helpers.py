"""
Utility functions and helpers for Lyricsync
Terminal text measurement, wrapping and general-purpose helpers
"""

import functools
import textwrap
import time
from typing import List, Union

from wcwidth import wcswidth, wcwidth


def display_width(text: str) -> int:
    """
    Number of terminal cells a string occupies

    CJK and other wide characters count as two cells. Strings containing
    non-printable characters, for which wcswidth reports -1, fall back to the
    sum of the printable characters' widths.

    Args:
        text: String to measure

    Returns:
        Width in terminal cells
    """
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in text)


def truncate_to_width(text: str, width: int) -> str:
    """
    Cut a string so that it fits in `width` terminal cells

    Args:
        text: String to truncate
        width: Available cells

    Returns:
        Longest prefix of text whose display width is <= width
    """
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text

    used = 0
    result = []
    for char in text:
        char_width = max(wcwidth(char), 0)
        if used + char_width > width:
            break
        result.append(char)
        used += char_width
    return "".join(result)


def center_text(text: str, width: int) -> str:
    """
    Center a string inside `width` cells, padding both sides with spaces

    Text wider than the available space is truncated first. When the
    remaining space is odd, the extra space goes to the right.

    Args:
        text: String to center
        width: Total cells of the resulting row

    Returns:
        Row of exactly `width` cells
    """
    if width <= 0:
        return ""
    text = truncate_to_width(text, width)
    free = width - display_width(text)
    left = free // 2
    return " " * left + text + " " * (free - left)


def _split_wide_chunk(chunk: str, width: int) -> List[str]:
    # textwrap counts characters; break chunks that still overflow in cells
    pieces = []
    current = ""
    for char in chunk:
        if current and display_width(current + char) > width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, width: int) -> List[str]:
    """
    Word-wrap a lyric line to `width` terminal cells

    Wrapping happens at word boundaries where possible; words longer than the
    width and runs of wide characters are broken at the cell boundary. No
    hyphenation is added. A blank line wraps to a single empty row.

    Args:
        text: Line to wrap
        width: Maximum cells per row

    Returns:
        List of rows (at least one)
    """
    if width <= 0:
        return [""]
    if not text.strip():
        return [""]

    rows = []
    for chunk in textwrap.wrap(text, width, break_long_words=True, break_on_hyphens=False):
        if display_width(chunk) > width:
            rows.extend(_split_wide_chunk(chunk, width))
        else:
            rows.append(chunk)
    return rows or [""]


def format_timestamp_ms(time_ms: int) -> str:
    """
    Format a lyric offset in LRC style

    Args:
        time_ms: Offset in milliseconds

    Returns:
        String like "01:05.30"
    """
    if time_ms < 0:
        time_ms = 0
    minutes, rest = divmod(time_ms, 60000)
    seconds, millis = divmod(rest, 1000)
    return f"{minutes:02d}:{seconds:02d}.{millis // 10:02d}"


def format_duration(seconds: Union[int, float]) -> str:
    """
    Format duration in seconds to human-readable string

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds < 0:
        return "0:00"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    else:
        return f"{minutes}:{secs:02d}"


def retry_on_failure(max_attempts: int = 3, delay: float = 1.0, backoff: float = 2.0, exceptions: tuple = (Exception,)):
    """
    Decorator for retrying functions on failure

    Args:
        max_attempts: Maximum number of attempts
        delay: Initial delay between attempts
        backoff: Delay multiplier (1.0 keeps a fixed cadence)
        exceptions: Exception types that trigger a retry; others propagate at once
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 1
            current_delay = delay

            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions:
                    if attempt >= max_attempts:
                        raise

                    time.sleep(current_delay)
                    current_delay *= backoff
                    attempt += 1
        return wrapper
    return decorator
