"""Chat client: thin async wrapper around an OpenAI-compatible chat-completions endpoint."""

import asyncio
import json
import logging
import re
from typing import Any, Dict, Iterator, List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from .config import ChatConfig
from .errors import (
    ApiError,
    ChatTimeoutError,
    ExtractionError,
    NoContentError,
    TransportError,
)
from .models import ChatResult, ToolCall, Usage

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)


class ChatClient:
    """
    Stateless request/response client.

    Holds no conversation state: every call sends the full message list it is
    given. Each request is bounded by ``config.request_timeout`` and is never
    retried here.
    """

    def __init__(self, config: ChatConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.request_timeout,
            max_retries=0,
            default_headers=dict(config.headers),
            http_client=http_client,
        )

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    async def complete(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[str] = None,
        json_mode: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> ChatResult:
        """Make one chat-completion request and normalize the first choice."""
        kwargs: Dict[str, Any] = {"model": model, "messages": messages}
        if tools:
            kwargs["tools"] = tools
        if tool_choice:
            kwargs["tool_choice"] = tool_choice
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        temperature = temperature if temperature is not None else self.config.temperature
        if temperature is not None:
            kwargs["temperature"] = temperature
        max_tokens = max_tokens if max_tokens is not None else self.config.max_tokens
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        logger.info(
            f"→ {self.config.base_url}/chat/completions model={model} "
            f"messages={len(messages)} tools={len(tools or [])}"
        )

        timeout = self.config.request_timeout
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(**kwargs), timeout=timeout
            )
        except (asyncio.TimeoutError, APITimeoutError) as e:
            logger.error(f"❌ Chat request timed out after {timeout:g}s")
            raise ChatTimeoutError(timeout) from e
        except APIStatusError as e:
            body = e.response.text
            logger.error(f"❌ Chat API error response: {e.status_code} {body}")
            raise ApiError(e.status_code, body) from e
        except APIConnectionError as e:
            raise TransportError(f"Chat request failed: {e}") from e

        if not response.choices:
            raise NoContentError("Chat response contained no choices")

        choice = response.choices[0]
        message = choice.message
        tool_calls = [
            ToolCall(id=tc.id, name=tc.function.name, arguments=tc.function.arguments or "")
            for tc in (message.tool_calls or [])
            if tc.type == "function" and tc.function
        ]
        usage = None
        if response.usage:
            usage = Usage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )
            logger.info(f"✓ Response received ({choice.finish_reason}, {usage.total_tokens} tokens)")
        else:
            logger.info(f"✓ Response received ({choice.finish_reason})")

        return ChatResult(
            content=message.content,
            tool_calls=tool_calls,
            finish_reason=choice.finish_reason or "unknown",
            usage=usage,
            model=response.model,
        )

    async def chat(self, model: str, messages: List[Dict[str, Any]], **kwargs) -> str:
        """Plain completion; the response must carry text."""
        result = await self.complete(model, messages, **kwargs)
        if not result.content:
            raise NoContentError("No content in response")
        return result.content

    async def chat_json(self, model: str, messages: List[Dict[str, Any]], **kwargs) -> Dict[str, Any]:
        """JSON-mode completion, returning the first JSON object found in the reply."""
        result = await self.complete(model, messages, json_mode=True, **kwargs)
        if not result.content:
            raise NoContentError("No content in response")
        return extract_json(result.content)


def first_balanced_object(text: str) -> Optional[str]:
    """Return the first brace-balanced ``{...}`` span, ignoring braces inside string literals."""
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def json_candidates(text: str) -> Iterator[str]:
    """Fenced block, then first balanced object, then the whole trimmed text."""
    stripped = (text or "").strip()
    fenced = _FENCE_RE.search(stripped)
    if fenced:
        yield fenced.group(1).strip()
    span = first_balanced_object(stripped)
    if span:
        yield span
    yield stripped


def extract_json(text: str) -> Dict[str, Any]:
    last_error: Optional[json.JSONDecodeError] = None
    for candidate in json_candidates(text):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
            continue
        if isinstance(value, dict):
            return value
    raise ExtractionError("No parseable JSON object in model response", text) from last_error
