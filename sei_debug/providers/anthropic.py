"""Anthropic Claude provider using anthropic SDK with native async and server tools."""

import asyncio
import logging
import os
import time
from collections.abc import Callable
from typing import Any

import anthropic as anthropic_sdk

from config.config_loader import ModelConfig
from sei_debug.models import Citation, RawModelResponse, Segment
from sei_debug.providers.base import CODE_EXECUTION, WEB_SEARCH, AIProvider, ProviderError

logger = logging.getLogger(__name__)

_WEB_SEARCH_TOOL_TYPE = "web_search_20250305"
_CODE_EXECUTION_TOOL_TYPE = "code_execution_20250522"
_CODE_EXECUTION_BETA = "code-execution-2025-05-22"

_TOOL_PROGRESS = {
    WEB_SEARCH: "Searching the web...",
    CODE_EXECUTION: "Executing Python analysis...",
}


def _build_tools(
    tools: frozenset[str],
    search_max_uses: int | None,
    allowed_domains: list[str] | None,
) -> list[dict[str, Any]]:
    """Translate tool names into Anthropic server tool definitions."""
    definitions: list[dict[str, Any]] = []
    if WEB_SEARCH in tools:
        search_tool: dict[str, Any] = {"type": _WEB_SEARCH_TOOL_TYPE, "name": WEB_SEARCH}
        if search_max_uses is not None:
            search_tool["max_uses"] = search_max_uses
        if allowed_domains:
            search_tool["allowed_domains"] = list(allowed_domains)
        definitions.append(search_tool)
    if CODE_EXECUTION in tools:
        definitions.append({"type": _CODE_EXECUTION_TOOL_TYPE, "name": CODE_EXECUTION})
    return definitions


def _to_citation(raw: Any) -> Citation:
    return Citation(
        url=getattr(raw, "url", None) or "",
        title=getattr(raw, "title", None) or "",
        excerpt=getattr(raw, "cited_text", None),
    )


def _to_raw_response(message: Any) -> RawModelResponse:
    """Convert an SDK message into a RawModelResponse."""
    segments: list[Segment] = []
    used_tools: set[str] = set()
    for block in message.content or []:
        if block.type == "text":
            citations = tuple(_to_citation(c) for c in (getattr(block, "citations", None) or []))
            segments.append(Segment(kind="text", text=block.text, citations=citations))
            continue
        if block.type == "server_tool_use":
            used_tools.add(block.name)
        segments.append(Segment(kind=block.type))
    return RawModelResponse(
        segments=tuple(segments),
        model_id=message.model,
        used_tools=frozenset(used_tools),
    )


class AnthropicProvider(AIProvider):
    """Anthropic Claude provider via anthropic SDK, one instance per model tier."""

    def __init__(self, config: ModelConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(self.name(), f"Missing API key: {config.api_key_env}")
        self._client = anthropic_sdk.AsyncAnthropic(api_key=api_key)

    def name(self) -> str:
        return f"claude-{self._config.tier}"

    def model_string(self) -> str:
        return self._config.model

    async def generate(
        self,
        prompt: str,
        *,
        tools: frozenset[str] = frozenset(),
        search_max_uses: int | None = None,
        allowed_domains: list[str] | None = None,
        on_progress: Callable[[str], None] | None = None,
    ) -> RawModelResponse:
        request: dict[str, Any] = {
            "model": self._config.model,
            "max_tokens": self._config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        tool_definitions = _build_tools(tools, search_max_uses, allowed_domains)
        if tool_definitions:
            request["tools"] = tool_definitions

        # Code execution is still a beta tool and must go through the beta namespace.
        if CODE_EXECUTION in tools:
            messages_api = self._client.beta.messages
            request["betas"] = [_CODE_EXECUTION_BETA]
        else:
            messages_api = self._client.messages

        start = time.monotonic()
        try:
            if on_progress is None:
                call = messages_api.create(**request)
            else:
                call = self._stream(messages_api, request, on_progress)
            message = await asyncio.wait_for(call, timeout=self._config.timeout_sec)
        except TimeoutError as exc:
            raise ProviderError(self.name(), f"Request timed out after {self._config.timeout_sec}s") from exc
        except Exception as exc:
            raise ProviderError(self.name(), f"API call failed: {exc}") from exc

        latency = time.monotonic() - start
        response = _to_raw_response(message)

        token_count: int | None = None
        usage = getattr(message, "usage", None)
        if usage:
            token_count = usage.input_tokens + usage.output_tokens

        logger.info(
            "%s: %.2fs, %s tokens, tools=%s",
            self.name(),
            latency,
            token_count,
            sorted(response.used_tools) or "none",
        )
        return response

    async def _stream(
        self,
        messages_api: Any,
        request: dict[str, Any],
        on_progress: Callable[[str], None],
    ) -> Any:
        async with messages_api.stream(**request) as stream:
            async for event in stream:
                if event.type == "text":
                    logger.debug("%s", event.text)
                elif event.type == "content_block_start" and event.content_block.type == "server_tool_use":
                    tool_name = event.content_block.name
                    on_progress(_TOOL_PROGRESS.get(tool_name, f"Running {tool_name}..."))
            return await stream.get_final_message()
