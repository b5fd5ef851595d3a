"""
Data models for Spotify playback information

PlaybackState is a read-only snapshot of what the user is listening to,
built from the Web API "currently playing" payload on every poll. Only the
fields needed to find and synchronize lyrics are kept.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PlaybackState:
    """
    Current playback snapshot

    Attributes:
        track: Track name
        artist: First (primary) artist name
        album: Album name
        duration_ms: Track length in milliseconds
        progress_ms: Playback position in milliseconds
        is_playing: False while paused
    """
    track: str
    artist: str
    album: str
    duration_ms: int
    progress_ms: int
    is_playing: bool = True

    @classmethod
    def from_spotify_data(cls, data: Optional[Dict[str, Any]]) -> Optional['PlaybackState']:
        """
        Create a snapshot from a `currently_playing` response

        Args:
            data: Parsed JSON payload, or None when Spotify answered 204

        Returns:
            PlaybackState, or None when nothing usable is playing (no item,
            no name, or no artists as with podcast episodes and ads)
        """
        if not data:
            return None

        item = data.get('item') or {}
        name = item.get('name') or ''
        artists = item.get('artists') or []
        if not name or not artists:
            return None

        return cls(
            track=name,
            artist=artists[0].get('name', ''),
            album=(item.get('album') or {}).get('name', ''),
            duration_ms=int(item.get('duration_ms') or 0),
            progress_ms=int(data.get('progress_ms') or 0),
            is_playing=bool(data.get('is_playing', True))
        )

    @property
    def duration_sec(self) -> int:
        """Track length in whole seconds (truncated)"""
        return self.duration_ms // 1000

    @property
    def track_key(self) -> str:
        """Identity used to detect track changes"""
        return f"{self.track} - {self.artist}"

    @property
    def progress_str(self) -> str:
        """Position as "m:ss / m:ss" for status output"""
        def fmt(ms: int) -> str:
            minutes, seconds = divmod(max(ms, 0) // 1000, 60)
            return f"{minutes}:{seconds:02d}"
        return f"{fmt(self.progress_ms)} / {fmt(self.duration_ms)}"
