"""
Error Handling Tests - Verify skip logging and the walk error.
"""

import logging
from pathlib import Path

import pytest

from docsearch.errors import WalkError, log_skipped


class TestLogSkipped:
    """Tests for log_skipped."""

    @pytest.mark.parametrize("error, level", [
        (PermissionError("denied"), logging.WARNING),
        (FileNotFoundError("gone"), logging.DEBUG),
        (UnicodeDecodeError("utf-8", b"\xff", 0, 1, "bad"), logging.DEBUG),
        (IsADirectoryError("dir"), logging.DEBUG),
        (OSError("disk"), logging.WARNING),
        (RuntimeError("parser bug"), logging.ERROR),
    ])
    def test_level_by_exception_type(self, caplog, error, level):
        caplog.set_level(logging.DEBUG, logger="docsearch.errors")
        log_skipped(error, Path("/docs/a.tex"))

        assert [r.levelno for r in caplog.records] == [level]
        assert "/docs/a.tex" in caplog.records[0].getMessage()

    def test_subclass_uses_its_own_rule(self, caplog):
        """PermissionError is an OSError but keeps its own message."""
        caplog.set_level(logging.DEBUG, logger="docsearch.errors")
        log_skipped(PermissionError("denied"), Path("/docs/secret"))
        assert caplog.records[0].getMessage() == "Permission denied: /docs/secret"

    def test_context_prefix_and_unknown_path(self, caplog):
        caplog.set_level(logging.DEBUG, logger="docsearch.errors")
        log_skipped(OSError("disk"), context="scan_entry")
        assert caplog.records[0].getMessage() == "[scan_entry] I/O error on <unknown>: disk"


class TestWalkError:
    """Tests for WalkError."""

    def test_carries_path_and_cause(self):
        cause = PermissionError("denied")
        error = WalkError(Path("/root/docs"), cause)

        assert error.path == Path("/root/docs")
        assert error.cause is cause
        assert str(error) == "Cannot read directory /root/docs: denied"
