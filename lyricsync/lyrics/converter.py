"""
Script conversion for lyric text

Chinese lyrics on LRCLIB come in both Traditional and Simplified script,
often for the same song. ScriptConverter rewrites every line through OpenCC
so that the display is consistent (Traditional to Simplified by default,
`lyrics.script_conversion: ""` turns it off, any OpenCC config id such as
`s2t` or `t2tw` is accepted).

Conversion is purely cosmetic: it never changes the number or order of lines.
"""

from typing import Optional

from opencc import OpenCC

from .models import LyricDocument
from ..config.settings import get_settings
from ..utils.logger import get_logger


class ScriptConverter:
    """Line-by-line text post-processor backed by OpenCC"""

    def __init__(self, conversion: Optional[str] = None):
        """
        Args:
            conversion: OpenCC config id; defaults to `lyrics.script_conversion`
        """
        self.logger = get_logger(__name__)
        if conversion is None:
            conversion = get_settings().lyrics.script_conversion
        self.conversion = conversion or ""
        self._opencc: Optional[OpenCC] = None

        if self.conversion:
            try:
                self._opencc = OpenCC(self.conversion)
            except (OSError, ValueError, KeyError) as e:
                self.logger.warning(f"Script conversion '{self.conversion}' unavailable, lyrics shown as-is: {e}")
                self._opencc = None

    @property
    def enabled(self) -> bool:
        return self._opencc is not None

    def convert_text(self, text: str) -> str:
        if not self._opencc or not text:
            return text
        return self._opencc.convert(text)

    def convert_document(self, document: LyricDocument) -> LyricDocument:
        """Return the document with every line converted"""
        if not self.enabled or document.is_empty:
            return document
        return document.map_text(self.convert_text)
