"""
Chat Service - Relays a conversation to a remote model that can call the
local file search as a tool.

The model sees `local_file_search`; when it asks for it, the search runs
here over the configured root and only file names, relative paths and
snippets are sent back. Absolute paths never leave the machine.

Every public call returns {"text": ...} or {"error": ...}; nothing raises.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import anthropic

from docsearch.config import get_config, SearchConfig
from docsearch.engine import SearchEngine
from docsearch.models import SearchOptions, SearchFailure


logger = logging.getLogger(__name__)


LOCAL_FILE_SEARCH_TOOL = {
    "name": "local_file_search",
    "description": (
        "Searches for keywords in local project files (HTML, TeX, INP, OP) "
        "within the project directory. Can also search a specific "
        "subdirectory and filter by file extension."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "search_query": {
                "type": "string",
                "description": "The keywords or phrases to search for in the files.",
            },
            "file_extensions": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    'Optional. Specific file extensions to target (e.g. [".inp", ".op"]). '
                    "Defaults to .html, .htm, .tex, .inp and .op."
                ),
            },
            "sub_directory": {
                "type": "string",
                "description": (
                    'Optional. A subdirectory of the project to focus on (e.g. "inputs", '
                    '"docs/latex"). Searches the whole project when omitted.'
                ),
            },
        },
        "required": ["search_query"],
    },
}


def normalize_history(chat_history: Optional[List[dict]]) -> List[dict]:
    """Keep only well-formed user/assistant turns. "model" is accepted as assistant."""
    messages = []
    for turn in chat_history or []:
        role = turn.get("role")
        content = turn.get("content")
        if role == "model":
            role = "assistant"
        if role not in ("user", "assistant") or not content:
            continue
        messages.append({"role": role, "content": content})
    return messages


class ChatService:
    """
    One chat turn against the remote model, with tool execution.

    The client is created from the API key unless one is injected (tests).
    """

    def __init__(
        self,
        api_key: Optional[str],
        config: Optional[SearchConfig] = None,
        engine: Optional[SearchEngine] = None,
        client: Optional[Any] = None,
    ):
        self.api_key = api_key
        self.config = config or get_config()
        self.engine = engine or SearchEngine(self.config)
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def send_message(self, user_message: str, chat_history: Optional[List[dict]] = None) -> Dict[str, str]:
        """
        Send a message and return the model's final text.

        Args:
            user_message: The user's current message
            chat_history: Previous turns, [{"role": "user"|"assistant", "content": str}]

        Returns:
            {"text": reply} or {"error": message}
        """
        if not self.api_key:
            logger.error("API key is missing.")
            return {"error": "API key is missing. Please set it in settings."}
        if not user_message or not user_message.strip():
            logger.error("User message is empty.")
            return {"error": "Cannot send an empty message."}

        messages = normalize_history(chat_history)
        messages.append({"role": "user", "content": user_message})
        logger.info(f"Sending to model: {user_message[:50]}...")

        try:
            for _ in range(self.config.max_tool_rounds + 1):
                response = self._get_client().messages.create(
                    model=self.config.chat_model,
                    max_tokens=self.config.chat_max_tokens,
                    tools=[LOCAL_FILE_SEARCH_TOOL],
                    messages=messages,
                )

                if response.stop_reason != "tool_use":
                    return self._text_reply(response)

                messages.append({"role": "assistant", "content": response.content})
                messages.append({"role": "user", "content": self._run_tools(response.content)})

            logger.error("Model kept requesting tools past the round limit.")
            return {"error": "The model did not provide a text response after tool execution."}

        except anthropic.RateLimitError:
            logger.warning("Rate limited by the model API.")
            return {"error": "Rate limited by the model API. Please wait and try again."}
        except anthropic.APIStatusError as e:
            logger.error(f"Model API error: {e.status_code} {e.message}")
            return {"error": f"API error: {e.message} (status {e.status_code})"}
        except anthropic.APIConnectionError as e:
            logger.error(f"Cannot reach model API: {e}")
            return {"error": "Could not connect to the model API."}

    def _text_reply(self, response) -> Dict[str, str]:
        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        ).strip()
        if not text:
            logger.error(f"Model response had no text (stop_reason={response.stop_reason})")
            return {"error": "Failed to parse response from the model."}
        logger.info(f"Model response: {text[:50]}...")
        return {"text": text}

    def _run_tools(self, content) -> List[dict]:
        """Execute every tool_use block and build the matching tool_result blocks."""
        tool_results = []
        for block in content:
            if getattr(block, "type", None) != "tool_use":
                continue

            if block.name == LOCAL_FILE_SEARCH_TOOL["name"]:
                payload, is_error = self.local_file_search(block.input or {})
            else:
                logger.warning(f"Model requested unknown tool: {block.name}")
                payload, is_error = {"status": "error", "error": f"Unknown tool: {block.name}"}, True

            tool_results.append({
                "type": "tool_result",
                "tool_use_id": block.id,
                "content": json.dumps(payload),
                "is_error": is_error,
            })
        return tool_results

    def local_file_search(self, arguments: dict) -> tuple[dict, bool]:
        """
        Run the search the model asked for.

        Returns:
            (payload for the model, whether it is an error)
        """
        logger.info(f"Executing local_file_search with params: {arguments}")

        extensions = arguments.get("file_extensions") or None
        options = SearchOptions(
            query=str(arguments.get("search_query") or ""),
            root_directory=self.config.root_directory,
            exclusions=tuple(self.config.exclusions),
            target_extensions=tuple(extensions) if extensions else None,
            sub_directory=arguments.get("sub_directory") or None,
        )
        outcome = self.engine.search(options)

        if isinstance(outcome, SearchFailure):
            return {"status": "error", **outcome.to_dict()}, True

        logger.info(f"Local search found {len(outcome)} items.")
        return {
            "status": "success",
            "files_found": [r.to_tool_payload() for r in outcome[:self.config.max_tool_results]],
        }, False


def send_chat_message(
    api_key: Optional[str],
    user_message: str,
    chat_history: Optional[List[dict]] = None,
) -> Dict[str, str]:
    """Convenience function: one chat turn with the default config."""
    return ChatService(api_key).send_message(user_message, chat_history)
