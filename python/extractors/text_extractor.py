"""
Plain text extractor for the input (.inp) and operator (.op) formats.
"""

from typing import Set

from .base import BaseExtractor, decode


class PlainTextExtractor(BaseExtractor):
    """Returns the file content as-is. No whitespace normalization."""

    @property
    def supported_extensions(self) -> Set[str]:
        return {'.inp', '.op'}

    def extract(self, data: bytes) -> str:
        return decode(data)
