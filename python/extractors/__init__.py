"""
Extractors Package - per-format conversion of file bytes to searchable text.

Modules:
    - base: BaseExtractor and shared text helpers
    - html_extractor: .html / .htm (BeautifulSoup)
    - tex_extractor: .tex (regex stripping)
    - text_extractor: .inp / .op and any other targeted plain-text format
"""

from .base import BaseExtractor
from .html_extractor import HtmlExtractor
from .tex_extractor import TexExtractor
from .text_extractor import PlainTextExtractor

__all__ = ["BaseExtractor", "HtmlExtractor", "TexExtractor", "PlainTextExtractor"]
