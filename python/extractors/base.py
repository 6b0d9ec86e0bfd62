"""
Base class for all text extractors.
Each extractor turns the raw bytes of one file format into searchable text.
"""

import re
from abc import ABC, abstractmethod
from typing import Set


_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def decode(data: bytes) -> str:
    """Decode file bytes as UTF-8, replacing anything undecodable."""
    return data.decode("utf-8", errors="replace")


class BaseExtractor(ABC):
    """
    Base class for all text extractors.

    To add a new format:
    1. Create a new class extending BaseExtractor
    2. Implement supported_extensions and extract
    3. Register an instance in docsearch.extractor.EXTRACTORS
    """

    @property
    @abstractmethod
    def supported_extensions(self) -> Set[str]:
        """
        File extensions this extractor handles (e.g., {'.html', '.htm'}).
        Lower-case, including the dot.
        """
        pass

    def can_handle(self, extension: str) -> bool:
        return extension.lower() in self.supported_extensions

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """
        Convert a file's raw content into plain searchable text.

        Args:
            data: Raw file bytes

        Returns:
            The normalized text (may be empty)
        """
        pass
