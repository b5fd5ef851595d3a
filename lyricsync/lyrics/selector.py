"""
Lyric candidate selection

Search results come back ranked by relevance but not filtered, so the
selector decides which one (if any) actually belongs to the playing track.

Selection runs two passes over the candidates in their original order:

1. Synced pass: the first candidate with an LRC body whose track and artist
   match case-insensitively and whose declared duration, rounded to whole
   seconds, is within the tolerance of the playing track. Bodies containing
   a known spam marker are skipped and the pass continues.
2. Plain pass (only when the synced pass found nothing): the first candidate
   with a plain body whose track and artist match. Album and duration are
   deliberately not checked here.

Synced lyrics are always preferred, even over a plain-only candidate ranked
higher by the source.
"""

import math
from typing import Iterable, Optional, Sequence

from .models import Candidate, LyricDocument
from .parser import DEFAULT_INTERLUDE_GLYPH, build_plain_document, build_synced_document
from ..exceptions import LyricsNotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_DURATION_TOLERANCE = 2
DEFAULT_SPAM_MARKERS = ("rickrolling",)


def _same(declared: str, target: str) -> bool:
    return (declared or "").casefold() == (target or "").casefold()


def contains_spam_marker(body: str, markers: Iterable[str] = DEFAULT_SPAM_MARKERS) -> bool:
    """True when the lyric body contains any marker, ignoring case"""
    lowered = body.casefold()
    return any(marker.casefold() in lowered for marker in markers if marker)


def duration_matches(declared_sec: float, target_sec: int, tolerance: int = DEFAULT_DURATION_TOLERANCE) -> bool:
    """Compare the declared duration, rounded half up, against the target in whole seconds"""
    return abs(math.floor(declared_sec + 0.5) - target_sec) <= tolerance


def find_synced_candidate(
    candidates: Sequence[Candidate],
    track: str,
    artist: str,
    duration_sec: int,
    tolerance: int = DEFAULT_DURATION_TOLERANCE,
    spam_markers: Iterable[str] = DEFAULT_SPAM_MARKERS
) -> Optional[Candidate]:
    """
    First candidate usable as synced lyrics

    Returns:
        Matching candidate or None
    """
    spam_markers = tuple(spam_markers)
    for candidate in candidates:
        if not candidate.has_synced:
            continue
        if not (_same(candidate.track_name, track) and _same(candidate.artist_name, artist)):
            continue
        if not duration_matches(candidate.duration_sec, duration_sec, tolerance):
            continue
        if contains_spam_marker(candidate.synced_lyrics, spam_markers):
            logger.debug(f"Skipping decoy lyrics for {track} - {artist} (id={candidate.source_id})")
            continue
        return candidate
    return None


def find_plain_candidate(candidates: Sequence[Candidate], track: str, artist: str) -> Optional[Candidate]:
    """
    First candidate usable as plain lyrics

    Returns:
        Matching candidate or None
    """
    for candidate in candidates:
        if candidate.has_plain and _same(candidate.track_name, track) and _same(candidate.artist_name, artist):
            return candidate
    return None


def select_lyrics(
    candidates: Sequence[Candidate],
    track: str,
    artist: str,
    album: str,
    duration_sec: int,
    tolerance: int = DEFAULT_DURATION_TOLERANCE,
    spam_markers: Iterable[str] = DEFAULT_SPAM_MARKERS,
    glyph: str = DEFAULT_INTERLUDE_GLYPH
) -> LyricDocument:
    """
    Pick the best candidate and build its lyric document

    Args:
        candidates: Search results in source order
        track: Playing track name
        artist: Playing artist name
        album: Playing album name (informational, not matched)
        duration_sec: Playing track length in whole seconds
        tolerance: Allowed duration difference in seconds for synced lyrics
        spam_markers: Substrings that disqualify a synced body
        glyph: Interlude replacement text

    Returns:
        SYNCED document when possible, PLAIN document otherwise

    Raises:
        LyricsNotFoundError: If no candidate passes either pass
    """
    synced = find_synced_candidate(candidates, track, artist, duration_sec, tolerance, spam_markers)
    if synced is not None:
        logger.debug(f"Selected synced lyrics for {track} - {artist} (id={synced.source_id})")
        return build_synced_document(synced.synced_lyrics, glyph)

    plain = find_plain_candidate(candidates, track, artist)
    if plain is not None:
        logger.debug(f"Selected plain lyrics for {track} - {artist} (id={plain.source_id})")
        return build_plain_document(plain.plain_lyrics, glyph)

    raise LyricsNotFoundError(
        track,
        artist,
        details={'album': album, 'duration_sec': duration_sec, 'candidates': len(candidates)}
    )
