"""
Synchronization between playback and lyrics
Active-line tracking and the background playback poller
"""

from .tracker import PlaybackTracker, TrackerSnapshot, find_active_index
from .poller import PlaybackPoller, RedrawSignal

__all__ = [
    'PlaybackTracker',
    'TrackerSnapshot',
    'find_active_index',
    'PlaybackPoller',
    'RedrawSignal'
]
