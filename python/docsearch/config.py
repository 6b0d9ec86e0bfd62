"""
Search Configuration - Centralized settings for the search system.

Uses environment variables with sensible defaults. All paths are resolved
to absolute paths for reliability.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple


DEFAULT_SEARCHABLE_EXTENSIONS: Tuple[str, ...] = (".html", ".htm", ".tex", ".inp", ".op")
MAX_SNIPPET_LENGTH = 300      # Max characters for a snippet
SNIPPET_CONTEXT_WINDOW = 100  # Characters before/after the match


@dataclass
class SearchConfig:
    """
    Configuration for the search system.

    By default the application searches the current working directory.
    Nothing is derived from where the package is installed.
    """

    # --- Paths ---
    root_directory: Path = field(default_factory=Path.cwd)
    exclusions: List[Path] = field(default_factory=list)
    app_root: Path = field(default_factory=Path.cwd)  # Base for relative /open paths
    config_dir: Path = field(default_factory=lambda: Path.home() / ".docsearch")

    # --- Matching ---
    default_extensions: Tuple[str, ...] = DEFAULT_SEARCHABLE_EXTENSIONS
    snippet_context_window: int = SNIPPET_CONTEXT_WINDOW
    max_snippet_length: int = MAX_SNIPPET_LENGTH

    # --- Chat ---
    chat_model: str = "claude-3-haiku-20240307"
    chat_max_tokens: int = 1024
    max_tool_results: int = 10   # Results forwarded to the model per tool call
    max_tool_rounds: int = 3

    # --- Server ---
    server_host: str = "localhost"
    server_port: int = 8765
    # The one browser origin (the desktop UI) allowed to call the server
    allowed_origin: Optional[str] = None

    def __post_init__(self):
        """Ensure all paths are absolute and extensions are normalized."""
        self.root_directory = Path(os.path.abspath(Path(self.root_directory).expanduser()))
        self.app_root = Path(os.path.abspath(Path(self.app_root).expanduser()))
        self.config_dir = Path(os.path.abspath(Path(self.config_dir).expanduser()))
        self.exclusions = [Path(os.path.abspath(Path(p).expanduser())) for p in self.exclusions]
        self.default_extensions = tuple(normalize_extension(e) for e in self.default_extensions)

    @property
    def credentials_path(self) -> Path:
        return self.config_dir / "credentials.json"

    @classmethod
    def from_env(cls) -> "SearchConfig":
        """
        Create config from environment variables.

        Supported env vars:
            DOCSEARCH_ROOT: Directory to search
            DOCSEARCH_EXCLUSIONS: Comma-separated list of excluded paths
            DOCSEARCH_APP_ROOT: Base directory for relative paths opened externally
            DOCSEARCH_EXTENSIONS: Comma-separated list of extensions
            DOCSEARCH_CONFIG_DIR: Where credentials are stored
            DOCSEARCH_CHAT_MODEL: Remote model name
            DOCSEARCH_PORT: Port for the local request server
            DOCSEARCH_ALLOWED_ORIGIN: Browser origin allowed to call the server
        """
        config = cls()

        if root := os.environ.get("DOCSEARCH_ROOT"):
            config.root_directory = Path(root)

        if app_root := os.environ.get("DOCSEARCH_APP_ROOT"):
            config.app_root = Path(app_root)

        if exclusions := os.environ.get("DOCSEARCH_EXCLUSIONS"):
            config.exclusions = [Path(p.strip()) for p in exclusions.split(",") if p.strip()]

        if extensions := os.environ.get("DOCSEARCH_EXTENSIONS"):
            config.default_extensions = tuple(
                e.strip() for e in extensions.split(",") if e.strip()
            )

        if config_dir := os.environ.get("DOCSEARCH_CONFIG_DIR"):
            config.config_dir = Path(config_dir)

        if model := os.environ.get("DOCSEARCH_CHAT_MODEL"):
            config.chat_model = model

        if port := os.environ.get("DOCSEARCH_PORT"):
            config.server_port = int(port)

        if origin := os.environ.get("DOCSEARCH_ALLOWED_ORIGIN"):
            config.allowed_origin = origin.rstrip("/")

        config.__post_init__()
        return config


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and make sure it starts with a dot."""
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


# Singleton default config
_default_config: SearchConfig | None = None


def get_config() -> SearchConfig:
    """Get the default configuration (singleton)."""
    global _default_config
    if _default_config is None:
        _default_config = SearchConfig.from_env()
    return _default_config


def set_config(config: SearchConfig | None) -> None:
    """Override the default configuration (for testing)."""
    global _default_config
    _default_config = config
