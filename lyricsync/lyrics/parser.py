"""
LRC timestamp parsing and lyric document building

Supported input is the common subset of the LRC format: one leading
`[mm:ss]`, `[mm:ss.xx]` or `[mm:ss.xxx]` tag per line followed by the line
text. Lines without such a tag (metadata tags like `[ar:...]`, comments,
blank lines in the synced body) are skipped silently. Plain lyrics are raw
text with one line per LF (a CR before it is dropped).

Both builders replace a blank line sitting between two non-blank lines with
a musical note so that instrumental breaks stay visible on screen.
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .models import LyricDocument, LyricLine, LyricsMode

DEFAULT_INTERLUDE_GLYPH = "♪"

TIMESTAMP_PATTERN = re.compile(r'\[(\d+):(\d+)(?:\.(\d+))?\](.*)', re.DOTALL)


def parse_timestamped_line(line: str) -> Optional[Tuple[int, str]]:
    """
    Parse one LRC line into (offset in milliseconds, text)

    A two-digit fraction is read as centiseconds, a three-digit fraction as
    milliseconds; fractions of any other length are ignored.

    Args:
        line: Raw line, with or without trailing line break removed

    Returns:
        (time_ms, text) or None when the line has no leading timestamp tag
    """
    match = TIMESTAMP_PATTERN.match(line)
    if not match:
        return None

    minutes, seconds, fraction, text = match.groups()

    fraction_ms = 0
    if fraction:
        if len(fraction) == 2:
            fraction_ms = int(fraction) * 10
        elif len(fraction) == 3:
            fraction_ms = int(fraction)

    return int(minutes) * 60000 + int(seconds) * 1000 + fraction_ms, text


def substitute_interludes(texts: List[str], glyph: str = DEFAULT_INTERLUDE_GLYPH) -> List[str]:
    """
    Mark instrumental breaks between lyric lines

    An interior blank line becomes `glyph` when both of its neighbours have
    text. The first and last lines are never replaced.

    Args:
        texts: Line texts in document order
        glyph: Replacement text

    Returns:
        New list of texts
    """
    result = list(texts)
    for i in range(1, len(texts) - 1):
        if (not texts[i].strip()
                and texts[i - 1].strip()
                and texts[i + 1].strip()):
            result[i] = glyph
    return result


def _split_lines(raw: Optional[str]) -> List[str]:
    """Split on newline only; a trailing CR is dropped and so is one trailing empty line"""
    if not raw:
        return []
    pieces = [piece[:-1] if piece.endswith("\r") else piece for piece in raw.split("\n")]
    if raw.endswith("\n"):
        pieces.pop()
    return pieces


def _assemble(entries: Iterable[Tuple[int, str]], mode: LyricsMode, glyph: str) -> LyricDocument:
    entries = list(entries)
    texts = substitute_interludes([text for _, text in entries], glyph)
    lines = tuple(LyricLine(time_ms, text) for (time_ms, _), text in zip(entries, texts))
    return LyricDocument(lines=lines, mode=mode)


def build_synced_document(raw: Optional[str], glyph: str = DEFAULT_INTERLUDE_GLYPH) -> LyricDocument:
    """
    Build a synced document from an LRC body

    Args:
        raw: LRC text
        glyph: Interlude replacement text

    Returns:
        SYNCED document with the parsable lines in source order
    """
    entries = []
    for line in _split_lines(raw):
        parsed = parse_timestamped_line(line)
        if parsed is not None:
            entries.append(parsed)
    return _assemble(entries, LyricsMode.SYNCED, glyph)


def build_plain_document(raw: Optional[str], glyph: str = DEFAULT_INTERLUDE_GLYPH) -> LyricDocument:
    """
    Build a plain document from newline-separated text

    Every line, blank or not, becomes a LyricLine at offset 0.

    Args:
        raw: Plain lyrics text
        glyph: Interlude replacement text

    Returns:
        PLAIN document
    """
    return _assemble(((0, line) for line in _split_lines(raw)), LyricsMode.PLAIN, glyph)


def parse_lrc_file(path: Union[str, Path], glyph: str = DEFAULT_INTERLUDE_GLYPH) -> LyricDocument:
    """
    Read a local .lrc file into a synced document

    Files without a single timestamp tag are read as plain lyrics instead.

    Args:
        path: File to read (UTF-8, a BOM is tolerated)
        glyph: Interlude replacement text

    Raises:
        OSError: If the file cannot be read
    """
    raw = Path(path).read_text(encoding='utf-8-sig')
    document = build_synced_document(raw, glyph)
    if document.is_empty:
        return build_plain_document(raw, glyph)
    return document
