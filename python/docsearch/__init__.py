"""
docsearch - Format-aware full-text search over a local document tree.

Modules:
    - config: Centralized configuration
    - models: SearchOptions, SearchResult, SearchFailure
    - scanner: Depth-first traversal with exclusion pruning
    - extractor: Per-extension routing to the format extractors
    - engine: Matching, snippets and the public search entry points
    - errors: Error policies and exceptions

Flow:
    Resolve root → Walk (prune exclusions) → Filter extension → Extract → Match → Snippet

Usage:
    from docsearch import SearchEngine, SearchOptions

    engine = SearchEngine()
    results = engine.search(SearchOptions(query="hamiltonian", root_directory=root))
"""

from .engine import SearchEngine, search, handle_search_query
from .models import SearchOptions, SearchResult, SearchFailure

__all__ = [
    "SearchEngine",
    "SearchOptions",
    "SearchResult",
    "SearchFailure",
    "search",
    "handle_search_query",
]
