"""
Search errors and skip logging.

Per-file and per-subtree I/O problems never stop a search: the item is
skipped and the problem is logged at a level that depends on how
surprising it is. Only a root that cannot be listed raises `WalkError`.
"""

import logging
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


# (exception type, log level, message); first isinstance match wins
SKIP_LOG_RULES = (
    (PermissionError, logging.WARNING, "Permission denied: {file}"),
    (FileNotFoundError, logging.DEBUG, "Vanished during search: {file}"),
    (UnicodeDecodeError, logging.DEBUG, "Undecodable content: {file}"),
    (IsADirectoryError, logging.DEBUG, "Is a directory: {file}"),
    (OSError, logging.WARNING, "I/O error on {file}: {error}"),
)

UNEXPECTED_LOG_RULE = (logging.ERROR, "Unexpected error on {file}: {error}")


class SearchError(Exception):
    """Base exception for search errors."""


class WalkError(SearchError):
    """The directory walk could not run (the search root cannot be listed)."""

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read directory {path}: {cause}")


def log_skipped(error: Exception, path: Optional[Path] = None, context: str = "") -> None:
    """Log that `path` was skipped because of `error`."""
    level, template = UNEXPECTED_LOG_RULE
    for error_type, rule_level, rule_template in SKIP_LOG_RULES:
        if isinstance(error, error_type):
            level, template = rule_level, rule_template
            break

    message = template.format(file=path if path else "<unknown>", error=error)
    if context:
        message = f"[{context}] {message}"
    logger.log(level, message)
