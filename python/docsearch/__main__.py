#!/usr/bin/env python3
"""
Run a one-off search from the command line.

Usage:
    python -m docsearch "hamiltonian"
    python -m docsearch "operator" --root ~/mctdh --ext .op --ext .inp
    python -m docsearch "basis" --sub inputs --exclude ~/mctdh/docs_tool --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import get_config
from .engine import search
from .models import SearchFailure


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="docsearch",
        description="Search HTML, LaTeX, .inp and .op files under a directory.",
    )
    parser.add_argument("query", help="Text to search for (case-insensitive)")
    parser.add_argument("--root", type=Path, help="Directory to search (default: configured root)")
    parser.add_argument(
        "--exclude", type=Path, action="append", default=None,
        help="Path to skip; may be given more than once",
    )
    parser.add_argument(
        "--ext", action="append", default=None,
        help="File extension to search; may be given more than once",
    )
    parser.add_argument("--sub", help="Sub directory of the root to restrict the search to")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='[docsearch] %(message)s',
    )

    config = get_config()
    root = args.root.expanduser() if args.root else config.root_directory
    exclusions = [p.expanduser() for p in args.exclude] if args.exclude is not None else config.exclusions

    outcome = search(
        args.query,
        root,
        exclusions=exclusions,
        target_extensions=args.ext,
        sub_directory=args.sub,
        config=config,
    )

    if isinstance(outcome, SearchFailure):
        print(f"{outcome.error}: {outcome.details}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([r.to_dict() for r in outcome], indent=2))
    else:
        for result in outcome:
            print(f"{result.relative_path}: {result.snippet}")
        print(f"{len(outcome)} result(s)", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
