"""
Terminal display package
Viewport layout and the curses lyrics view
"""

from .viewport import RowStyle, ViewportRow, ViewportCompositor
from .renderer import CursesRenderer, LyricsDisplay

__all__ = [
    'RowStyle',
    'ViewportRow',
    'ViewportCompositor',
    'CursesRenderer',
    'LyricsDisplay'
]
