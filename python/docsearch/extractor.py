"""
Extractor - Routes a file to the right format extractor.

Reads the file bytes once and hands them to the extractor registered for
the file's extension. Read and parse failures are logged and turn into
empty text, so a broken file simply never matches.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from extractors import BaseExtractor, HtmlExtractor, TexExtractor, PlainTextExtractor

from .errors import log_skipped


logger = logging.getLogger(__name__)


# Register extractors (add new ones here)
EXTRACTORS: List[BaseExtractor] = [
    HtmlExtractor(),
    TexExtractor(),
    PlainTextExtractor(),
]


class FileTextExtractor:
    """
    Maps a file to normalized searchable text by extension.

    Any extension without a registered extractor is read as plain text;
    the extension filter has already decided it is a target.
    """

    def __init__(self, extractors: Optional[List[BaseExtractor]] = None):
        self._fallback = PlainTextExtractor()
        self._by_extension: Dict[str, BaseExtractor] = {}
        for extractor in extractors or EXTRACTORS:
            for ext in extractor.supported_extensions:
                self._by_extension.setdefault(ext, extractor)

    def extractor_for(self, extension: str) -> BaseExtractor:
        return self._by_extension.get(extension.lower(), self._fallback)

    def extract(self, path: Path, extension: Optional[str] = None) -> str:
        """
        Extract text from a file.

        Args:
            path: File to read
            extension: Lower-cased extension (default: path suffix)

        Returns:
            The extracted text, or "" if the file could not be read or parsed
        """
        ext = (extension or path.suffix).lower()
        extractor = self.extractor_for(ext)

        try:
            data = path.read_bytes()
            return extractor.extract(data)
        except Exception as e:
            log_skipped(e, path, f"extract {ext}")
            return ""
