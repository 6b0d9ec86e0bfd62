#!/usr/bin/env python3
"""
Search Server
A lightweight local HTTP server that brokers calls between the desktop UI
and the search engine / chat relay.

Usage:
    python search_server.py

The server runs on http://localhost:8765 and provides:
    POST   /search   - Search the project directory
    POST   /chat     - Send a chat message (the model may search locally)
    POST   /open     - Open a result path with the system's default handler
    GET    /api_key  - Report whether an API key is configured (never the key)
    POST   /api_key  - Store an API key
    DELETE /api_key  - Clear the stored API key
    GET    /health   - Health check endpoint

Browsers may only call it from the configured UI origin (allowed_origin);
requests carrying any other Origin header are refused with 403, and POST
bodies must be sent as application/json.
"""

import json
import logging
import os
import webbrowser
from http.server import ThreadingHTTPServer, BaseHTTPRequestHandler
from pathlib import Path
from typing import Optional

from docsearch.config import get_config, SearchConfig
from docsearch.engine import handle_search_query
from chat_service import ChatService
from key_store import KeyStore


logger = logging.getLogger(__name__)


def open_external_path(file_path: str, app_root: Path) -> bool:
    """
    Open a path with the system's default application.

    Relative paths are resolved against the application root.
    """
    absolute = Path(os.path.abspath(Path(app_root) / file_path))
    url = absolute.as_uri()
    logger.info(f"Opening {url}")
    try:
        return bool(webbrowser.open(url))
    except webbrowser.Error as e:
        logger.error(f"Error opening {url}: {e}")
        return False


class SearchServer(ThreadingHTTPServer):
    """HTTP server that carries the config and key store for its handlers."""

    def __init__(self, address, config: Optional[SearchConfig] = None, key_store: Optional[KeyStore] = None):
        self.config = config or get_config()
        self.key_store = key_store or KeyStore(self.config.credentials_path)
        super().__init__(address, RequestHandler)


class RequestHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the search server"""

    server: SearchServer

    def log_message(self, format, *args):
        """Override to use our logger"""
        logger.info("%s - %s" % (self.address_string(), format % args))

    def send_cors_headers(self):
        """Echo the origin only when it is the configured UI origin."""
        origin = self.headers.get("Origin")
        if origin and self.origin_allowed():
            self.send_header("Access-Control-Allow-Origin", origin)
            self.send_header("Vary", "Origin")

    def origin_allowed(self) -> bool:
        """Requests without an Origin header come from local, non-browser clients."""
        origin = self.headers.get("Origin")
        if origin is None:
            return True
        allowed = self.server.config.allowed_origin
        return allowed is not None and origin.rstrip("/") == allowed

    def reject_foreign_origin(self) -> bool:
        """Send 403 and return True when the request comes from another site."""
        if self.origin_allowed():
            return False
        logger.warning(f"Refused {self.command} {self.path} from origin {self.headers.get('Origin')}")
        self.send_json({"error": "Origin not allowed"}, 403)
        return True

    def send_json(self, data, status: int = 200):
        """Send a JSON response"""
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_cors_headers()
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def read_body(self) -> bytes:
        """Read the whole request body, so refused requests still get a clean reply."""
        content_length = int(self.headers.get("Content-Length", 0))
        return self.rfile.read(content_length) if content_length > 0 else b""

    @staticmethod
    def parse_json(body: bytes) -> dict:
        """Parse a request body as a JSON object (empty body reads as {})."""
        data = json.loads(body.decode()) if body else {}
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")
        return data

    def do_OPTIONS(self):
        """Handle CORS preflight"""
        if self.reject_foreign_origin():
            return
        self.send_response(204)
        self.send_cors_headers()
        self.send_header("Access-Control-Allow-Methods", "POST, GET, DELETE, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type")
        self.end_headers()

    def do_GET(self):
        """Handle GET requests"""
        if self.reject_foreign_origin():
            return
        if self.path == "/health":
            self.send_json({"status": "ok", "root": str(self.server.config.root_directory)})
        elif self.path == "/api_key":
            self.send_json({"configured": self.server.key_store.get_api_key() is not None})
        else:
            self.send_json({"error": "Not found"}, 404)

    def do_DELETE(self):
        """Handle DELETE requests"""
        if self.reject_foreign_origin():
            return
        if self.path == "/api_key":
            result = self.server.key_store.clear_api_key()
            self.send_json(result, 200 if result["success"] else 500)
        else:
            self.send_json({"error": "Not found"}, 404)

    def do_POST(self):
        """Handle POST requests"""
        body = self.read_body()
        if self.reject_foreign_origin():
            return

        routes = {
            "/search": self.handle_search,
            "/chat": self.handle_chat,
            "/open": self.handle_open,
            "/api_key": self.handle_set_api_key,
        }
        handler = routes.get(self.path)
        if handler is None:
            self.send_json({"error": "Not found"}, 404)
            return

        # JSON bodies only
        if self.headers.get_content_type() != "application/json":
            self.send_json({"error": "Content-Type must be application/json"}, 415)
            return

        try:
            data = self.parse_json(body)
        except ValueError:
            self.send_json({"error": "Invalid JSON"}, 400)
            return

        try:
            handler(data)
        except Exception as e:
            logger.error(f"Error handling {self.path}: {e}")
            self.send_json({"error": "Request failed", "details": str(e)}, 500)

    def handle_search(self, data: dict):
        query = data.get("query", "")
        logger.info(f"Received search query {query!r}")

        outcome = handle_search_query(query, self.server.config)
        if isinstance(outcome, dict):
            self.send_json(outcome, 500)
        else:
            self.send_json({"results": outcome})

    def handle_chat(self, data: dict):
        message = data.get("message", "")
        history = data.get("history") or []

        api_key = self.server.key_store.resolve_api_key()
        if not api_key:
            logger.warning("API key not found for chat message.")
            self.send_json({"error": "API key not configured. Please set it in Settings."})
            return

        result = ChatService(api_key, self.server.config).send_message(message, history)
        self.send_json(result)

    def handle_open(self, data: dict):
        file_path = data.get("path")
        if not file_path or not isinstance(file_path, str):
            logger.error("Invalid file path received for open.")
            self.send_json({"success": False, "error": "Invalid path"}, 400)
            return

        opened = open_external_path(file_path, self.server.config.app_root)
        self.send_json({"success": opened})

    def handle_set_api_key(self, data: dict):
        result = self.server.key_store.set_api_key(data.get("api_key"))
        self.send_json(result, 200 if result["success"] else 400)


def main():
    """Start the search server"""
    logging.basicConfig(level=logging.INFO, format='[docsearch] %(message)s')

    config = get_config()
    server = SearchServer((config.server_host, config.server_port), config)

    logger.info(f"Starting search server on http://{config.server_host}:{config.server_port}")
    logger.info(f"Search root: {config.root_directory}")
    logger.info(f"Excluded: {', '.join(str(p) for p in config.exclusions) or '(none)'}")
    logger.info(f"Allowed browser origin: {config.allowed_origin or '(none)'}")
    logger.info("Press Ctrl+C to stop")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("\nShutting down...")
        server.shutdown()


if __name__ == "__main__":
    main()
