"""
Lyricsync: time-synced Spotify lyrics in the terminal

Lyricsync follows whatever is playing on your Spotify account and shows the
matching lyrics as a centered, continuously scrolling view in the terminal.
The line currently being sung is highlighted and kept in the middle of the
screen; earlier lines fade out above it and upcoming lines wait below.

## Core Architecture

**Configuration Management (`lyricsync/config/`)**
- Settings from YAML files, environment variables and `.env` files
- Spotify OAuth2 authorization with persisted, auto-refreshed tokens

**Spotify Integration (`lyricsync/spotify/`)**
- Rate-limited Web API client reporting the current playback state
- `PlaybackState` model built from the "currently playing" payload

**Lyrics (`lyricsync/lyrics/`)**
- Timestamp parser and lyric document builder (synced LRC and plain text)
- Candidate selector with synced-first, plain-fallback matching
- LRCLIB search provider and OpenCC script conversion

**Synchronization (`lyricsync/sync/`)**
- Playback tracker mapping progress to the active line
- Background poller driving track changes and redraws

**Display (`lyricsync/display/`)**
- Viewport compositor centering the active line in a character grid
- Curses renderer and the foreground display loop

**Utilities (`lyricsync/utils/`)**
- Colored console and rotating file logging
- Text width, wrapping and retry helpers

## Quick Start
```bash
pip install -e .
lyricsync config init
lyricsync auth login
lyricsync start
```
"""

# Version information for the Lyricsync package
__version__ = "0.3.0"

__author__ = "Lyricsync Team"

__description__ = "Time-synced Spotify lyrics in a centered, scrolling terminal view"

__all__ = [
    "__version__",
    "__author__",
    "__description__"
]
