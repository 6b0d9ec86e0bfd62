"""
LaTeX extractor - strips comments, environments, math and commands.

This is deliberately shallow: it does not parse LaTeX, it removes the
markup that would otherwise interrupt phrases in the running text.
"""

import re
from typing import Set

from .base import BaseExtractor, decode, normalize_whitespace


# Order matters: environments and math go before commands, otherwise
# \begin{...} and macros inside math would be eaten as plain commands first.
# A % starts a comment unless an odd number of backslashes escapes it
_COMMENT_RE = re.compile(r"(?<!\\)(?:\\\\)*%.*$", re.MULTILINE)
_ENVIRONMENT_RE = re.compile(r"\\begin\{[a-zA-Z*]+\}.*?\\end\{[a-zA-Z*]+\}", re.DOTALL)
_DISPLAY_MATH_RE = re.compile(r"\$\$.*?\$\$", re.DOTALL)
_INLINE_MATH_RE = re.compile(r"\$[^$\n]*\$")
_BRACKET_MATH_RE = re.compile(r"\\\[.*?\\\]", re.DOTALL)
# A command with at most one {argument} and one [optional argument]
_COMMAND_RE = re.compile(r"\\[a-zA-Z]+(\s*\{[^}]*\})?(\s*\[[^\]]*\])?")

_STRIP_PATTERNS = (
    _COMMENT_RE,
    _ENVIRONMENT_RE,
    _DISPLAY_MATH_RE,
    _INLINE_MATH_RE,
    _BRACKET_MATH_RE,
    _COMMAND_RE,
)


class TexExtractor(BaseExtractor):
    """Extracts running text from LaTeX sources."""

    @property
    def supported_extensions(self) -> Set[str]:
        return {'.tex'}

    def extract(self, data: bytes) -> str:
        content = decode(data)
        for pattern in _STRIP_PATTERNS:
            content = pattern.sub('', content)
        return normalize_whitespace(content)
