"""
Search Engine - Case-insensitive substring search over a directory tree.

For every target file under the (possibly narrowed) root, the engine
extracts normalized text, looks for the first occurrence of the query and
emits a result with a snippet around it. Results come back in walk order.

Nothing outlives a call: every search builds its own scanner and result
list, so concurrent calls from the UI bridge and the chat relay are safe.
"""

import logging
import os
import re
import time
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .config import get_config, normalize_extension, SearchConfig
from .models import FileInfo, SearchOptions, SearchResult, SearchFailure
from .extractor import FileTextExtractor
from .scanner import Scanner, is_excluded
from .errors import log_skipped, WalkError


logger = logging.getLogger(__name__)


SearchOutcome = Union[List[SearchResult], SearchFailure]


def find_match(text: str, query: str) -> Optional[re.Match]:
    """First case-insensitive occurrence of `query` in `text`, or None."""
    return re.search(re.escape(query), text, re.IGNORECASE)


def build_snippet(
    text: str,
    match_start: int,
    match_end: int,
    context_window: int,
    max_length: int,
) -> str:
    """
    Cut an excerpt around a match.

    Takes `context_window` characters on each side, marks clipped ends
    with "...", then hard-caps the result at `max_length` characters.
    """
    start = max(0, match_start - context_window)
    end = min(len(text), match_end + context_window)

    snippet = text[start:end]
    if start > 0:
        snippet = "..." + snippet
    if end < len(text):
        snippet = snippet + "..."
    if len(snippet) > max_length:
        snippet = snippet[:max_length - 3] + "..."
    return snippet


def resolve_effective_root(root: Path, sub_directory: Optional[str]) -> Optional[Path]:
    """
    Join `sub_directory` onto `root`.

    The sub directory is always relative to the root: leading separators
    are dropped, and anything that normalizes outside the root is refused
    (returns None).
    """
    if not sub_directory or not sub_directory.strip():
        return root

    relative = sub_directory.strip().lstrip("/\\")
    candidate = Path(os.path.normpath(root / relative))
    if candidate != root and root not in candidate.parents:
        logger.warning(f"Sub directory escapes the search root: {sub_directory}")
        return None
    return candidate


class SearchEngine:
    """
    Format-aware local file search.

    Snippet sizes and default extensions come from the config passed in,
    so tests can override them per engine.
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        extractor: Optional[FileTextExtractor] = None,
    ):
        self.config = config or get_config()
        self._extractor = extractor or FileTextExtractor()

    def search(self, options: SearchOptions) -> SearchOutcome:
        """
        Run one search.

        Returns:
            A list of SearchResult in walk order (possibly empty), or a
            SearchFailure if the walk could not run.
        """
        # Blank queries are rejected, but matching uses the query as given
        query = options.query or ""
        if not query.strip() or not options.root_directory:
            logger.debug("Search query and root directory are required.")
            return []

        root = Path(os.path.abspath(options.root_directory))
        exclusions = [Path(os.path.abspath(ex)) for ex in options.exclusions]

        effective_root = resolve_effective_root(root, options.sub_directory)
        if effective_root is None:
            return []

        if not effective_root.is_dir():
            logger.warning(f"Cannot access search directory: {effective_root}")
            return []

        if is_excluded(effective_root, exclusions):
            logger.info(f"Search directory is excluded: {effective_root}")
            return []

        scanner = Scanner(exclusions, self._target_extensions(options.target_extensions))
        results: List[SearchResult] = []
        start_time = time.monotonic()

        try:
            for file_info in scanner.scan(effective_root):
                result = self._match_file(file_info, root, query)
                if result is not None:
                    results.append(result)
        except WalkError as e:
            logger.error(f"Search could not start: {e}")
            return SearchFailure(error="Search failed", details=str(e))
        except Exception as e:
            logger.exception("Error during search execution")
            return SearchFailure(error="Search failed", details=str(e))

        duration = time.monotonic() - start_time
        logger.info(
            f"Found {len(results)} matches for {query!r} "
            f"in {scanner.files_seen} files ({duration:.2f}s)"
        )
        return results

    def _target_extensions(self, requested: Optional[Sequence[str]]) -> List[str]:
        if requested is None:
            return list(self.config.default_extensions)
        return [normalize_extension(ext) for ext in requested if ext and ext.strip()]

    def _match_file(self, file_info: FileInfo, root: Path, query: str) -> Optional[SearchResult]:
        try:
            text = self._extractor.extract(file_info.path, file_info.extension)
            match = find_match(text, query)
            if match is None:
                return None

            snippet = build_snippet(
                text,
                match.start(),
                match.end(),
                self.config.snippet_context_window,
                self.config.max_snippet_length,
            )
            return SearchResult(
                absolute_path=file_info.path,
                relative_path=file_info.path.relative_to(root),
                file_name=file_info.name,
                snippet=snippet,
            )
        except Exception as e:
            log_skipped(e, file_info.path, "match")
            return None


def search(
    query: str,
    root_directory: Path,
    exclusions: Iterable[Path] = (),
    target_extensions: Optional[Sequence[str]] = None,
    sub_directory: Optional[str] = None,
    config: Optional[SearchConfig] = None,
) -> SearchOutcome:
    """
    Convenience function to run a single search.

    Usage:
        results = search("hello", Path("/data/docs"), exclusions=[Path("/data/docs/tmp")])
        for r in results:
            print(r.relative_path, r.snippet)
    """
    options = SearchOptions(
        query=query,
        root_directory=Path(root_directory) if root_directory else None,
        exclusions=tuple(Path(ex) for ex in exclusions),
        target_extensions=tuple(target_extensions) if target_extensions is not None else None,
        sub_directory=sub_directory,
    )
    return SearchEngine(config).search(options)


def handle_search_query(query, config: Optional[SearchConfig] = None) -> Union[List[dict], dict]:
    """
    Search the configured project root on behalf of the UI.

    Returns:
        A list of result dicts, or {"error", "details"} if the search failed
    """
    if not isinstance(query, str) or not query.strip():
        logger.info("Search query is empty or invalid.")
        return []

    config = config or get_config()
    logger.info(f"Searching for {query!r} in root: {config.root_directory}")

    try:
        outcome = search(
            query,
            config.root_directory,
            exclusions=config.exclusions,
            config=config,
        )
    except Exception as e:
        logger.error(f"Error handling search query {query!r}: {e}")
        return SearchFailure(error="Search failed", details=str(e)).to_dict()

    if isinstance(outcome, SearchFailure):
        return outcome.to_dict()

    for result in outcome:
        logger.debug(f"  - {result.relative_path}")
    return [result.to_dict() for result in outcome]
