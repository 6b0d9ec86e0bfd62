"""
HTML extractor - visible body text via BeautifulSoup.
"""

from typing import Set

from bs4 import BeautifulSoup

from .base import BaseExtractor, decode, normalize_whitespace


class HtmlExtractor(BaseExtractor):
    """Extracts the visible text of an HTML document."""

    @property
    def supported_extensions(self) -> Set[str]:
        return {'.html', '.htm'}

    def extract(self, data: bytes) -> str:
        soup = BeautifulSoup(decode(data), 'html.parser')

        # Script and style content must never be searchable
        for element in soup(['script', 'style']):
            element.decompose()

        body = soup.body
        text = body.get_text() if body is not None else soup.get_text()
        return normalize_whitespace(text)
