# lyricsync/lyrics/__init__.py
"""
Lyrics package: parsing, candidate selection, search and post-processing

Key components:
- parser: LRC timestamp parser and synced/plain document builders
- selector: synced-first, plain-fallback candidate selection
- LrcLibProvider: candidate search against the LRCLIB API
- ScriptConverter: OpenCC based text conversion of a finished document

Usage:
    provider = get_lrclib_provider()
    document = provider.fetch_document(track, artist, album, duration_sec)
    document = ScriptConverter().convert_document(document)
"""

from .models import LyricLine, LyricDocument, LyricsMode, Candidate
from .parser import (
    parse_timestamped_line,
    build_synced_document,
    build_plain_document,
    parse_lrc_file
)
from .selector import select_lyrics
from .lrclib import get_lrclib_provider, reset_lrclib_provider, LrcLibProvider
from .converter import ScriptConverter

__all__ = [
    # Models
    'LyricLine',
    'LyricDocument',
    'LyricsMode',
    'Candidate',

    # Parsing and selection
    'parse_timestamped_line',
    'build_synced_document',
    'build_plain_document',
    'parse_lrc_file',
    'select_lyrics',

    # Providers
    'get_lrclib_provider',
    'reset_lrclib_provider',
    'LrcLibProvider',
    'ScriptConverter'
]
