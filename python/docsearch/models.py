"""
Data Models - Type definitions for a search call.

These dataclasses are created fresh for every search and carry no state
beyond that call.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class SearchOptions:
    """
    Input for a single search.

    `target_extensions` of None means "use the configured defaults".
    `sub_directory` narrows where the walk starts; relative paths and
    exclusions are still computed against `root_directory`.
    """
    query: str
    root_directory: Optional[Path]
    exclusions: Tuple[Path, ...] = ()
    target_extensions: Optional[Tuple[str, ...]] = None
    sub_directory: Optional[str] = None


@dataclass
class FileInfo:
    """A candidate file found by the scanner."""
    path: Path
    name: str
    extension: str

    @classmethod
    def from_path(cls, path: Path) -> "FileInfo":
        return cls(path=path, name=path.name, extension=path.suffix.lower())


@dataclass
class SearchResult:
    """One matching file."""
    absolute_path: Path
    relative_path: Path
    file_name: str
    snippet: str

    def to_dict(self) -> dict:
        """Payload for local consumers (the UI bridge)."""
        return {
            "path": str(self.absolute_path),
            "relativePath": str(self.relative_path),
            "fileName": self.file_name,
            "snippet": self.snippet,
        }

    def to_tool_payload(self) -> dict:
        """Payload that may leave the machine. Never includes the absolute path."""
        return {
            "fileName": self.file_name,
            "relativePath": str(self.relative_path),
            "snippet": self.snippet,
        }


@dataclass
class SearchFailure:
    """The search could not complete (distinct from "no matches")."""
    error: str
    details: str = ""

    def to_dict(self) -> dict:
        return {"error": self.error, "details": self.details}
