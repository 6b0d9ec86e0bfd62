"""
Scanner - Depth-first directory traversal with exclusion pruning.

Yields the files a search should look at, in the order the file system
lists them. Excluded paths are pruned before they are inspected, so an
excluded subtree is never read.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Set

from .models import FileInfo
from .errors import log_skipped, WalkError


logger = logging.getLogger(__name__)


def is_excluded(path: Path, exclusions: Iterable[Path]) -> bool:
    """
    True if `path` is an excluded path or lies beneath one.

    Compared segment by segment, so /foo/bar-extra is not under /foo/bar.
    """
    return any(path == ex or ex in path.parents for ex in exclusions)


class Scanner:
    """
    Recursive file scanner for one search call.

    Only files whose lower-cased extension is in `target_extensions` are
    yielded. Symlinked directories are not followed.
    """

    def __init__(self, exclusions: Iterable[Path], target_extensions: Iterable[str]):
        self.exclusions: List[Path] = [Path(os.path.abspath(ex)) for ex in exclusions]
        self.target_extensions: Set[str] = {ext.lower() for ext in target_extensions}
        self.files_seen = 0
        self.errors = 0

    def scan(self, root: Path) -> Iterator[FileInfo]:
        """
        Walk `root` depth-first.

        Raises:
            WalkError: if `root` itself cannot be listed
        """
        try:
            entries = self._list_directory(root)
        except OSError as e:
            raise WalkError(root, e) from e

        yield from self._scan_entries(entries)

    def _scan_directory(self, directory: Path) -> Iterator[FileInfo]:
        """Recursively scan a directory below the root. Listing errors skip the subtree."""
        try:
            entries = self._list_directory(directory)
        except OSError as e:
            self.errors += 1
            log_skipped(e, directory, "scan_directory")
            return

        yield from self._scan_entries(entries)

    def _scan_entries(self, entries: List[os.DirEntry]) -> Iterator[FileInfo]:
        for entry in entries:
            path = Path(entry.path)

            # Prune before touching the entry
            if is_excluded(path, self.exclusions):
                logger.debug(f"Skipping excluded: {path}")
                continue

            try:
                if entry.is_dir(follow_symlinks=False):
                    yield from self._scan_directory(path)

                elif entry.is_file():
                    self.files_seen += 1
                    if self._is_target(entry.name):
                        yield FileInfo.from_path(path)

            except OSError as e:
                self.errors += 1
                log_skipped(e, path, "scan_entry")
                continue

    @staticmethod
    def _list_directory(directory: Path) -> List[os.DirEntry]:
        # Materialize the listing so the handle is closed before recursing
        with os.scandir(directory) as it:
            return list(it)

    def _is_target(self, name: str) -> bool:
        return Path(name).suffix.lower() in self.target_extensions
