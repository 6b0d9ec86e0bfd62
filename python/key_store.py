"""
Key Store - Local storage for the chat model API key.

The key lives in a small JSON file in the config directory, readable by
the owner only. The ANTHROPIC_API_KEY environment variable is used when
nothing has been stored.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from docsearch.config import get_config


logger = logging.getLogger(__name__)

API_KEY_FIELD = "anthropic_api_key"


class KeyStore:
    """Get, set and clear the stored API key."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or get_config().credentials_path

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read credentials file {self.path}: {e}")
            return {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Create with owner-only permissions before writing the secret
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.chmod(self.path, 0o600)

    def get_api_key(self) -> Optional[str]:
        return self._load().get(API_KEY_FIELD) or None

    def set_api_key(self, api_key) -> dict:
        if not isinstance(api_key, str) or not api_key.strip():
            logger.error("Invalid API key provided for setting.")
            return {"success": False, "error": "Invalid API key format"}
        try:
            data = self._load()
            data[API_KEY_FIELD] = api_key.strip()
            self._save(data)
            return {"success": True}
        except OSError as e:
            logger.error(f"Error storing API key: {e}")
            return {"success": False, "error": str(e)}

    def clear_api_key(self) -> dict:
        try:
            data = self._load()
            if data.pop(API_KEY_FIELD, None) is not None:
                self._save(data)
            return {"success": True}
        except OSError as e:
            logger.error(f"Error clearing API key: {e}")
            return {"success": False, "error": str(e)}

    def resolve_api_key(self) -> Optional[str]:
        """Stored key first, then the ANTHROPIC_API_KEY environment variable."""
        return self.get_api_key() or os.environ.get("ANTHROPIC_API_KEY") or None
