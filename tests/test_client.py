import asyncio
import json

import httpx
import pytest

from screenwright.client import ChatClient, extract_json, first_balanced_object
from screenwright.config import ChatConfig
from screenwright.errors import (
    ApiError,
    ChatTimeoutError,
    ErrorKind,
    ExtractionError,
    NoContentError,
    TransportError,
)


def completion(message, finish_reason="stop", usage=True):
    body = {
        "id": "gen-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "test/model",
        "choices": [{"index": 0, "message": {"role": "assistant", **message}, "finish_reason": finish_reason}],
    }
    if usage:
        body["usage"] = {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
    return body


def make_client(handler, **config):
    config = ChatConfig(api_key="test-key", base_url="https://llm.test/api/v1", **config)
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ChatClient(config, http_client=http)


async def test_text_completion():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=completion({"content": "hello"}))

    async with make_client(handler) as client:
        result = await client.complete("test/model", [{"role": "user", "content": "hi"}])

    assert result.content == "hello"
    assert result.tool_calls == []
    assert result.finish_reason == "stop"
    assert result.usage.total_tokens == 15
    assert result.model == "test/model"

    request = seen[0]
    assert request.url.path == "/api/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer test-key"
    assert request.headers["x-title"] == "Screenwright"
    body = json.loads(request.content)
    assert body["model"] == "test/model"
    assert "tools" not in body
    assert "response_format" not in body


async def test_tool_calls_and_request_options():
    seen = []
    tool_calls = [{
        "id": "call_1",
        "type": "function",
        "function": {"name": "tap_at", "arguments": '{"x": 1, "y": 2}'},
    }]

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json=completion({"content": None, "tool_calls": tool_calls}, "tool_calls"))

    tools = [{"type": "function", "function": {"name": "tap_at", "parameters": {"type": "object"}}}]
    async with make_client(handler, temperature=0.2, max_tokens=256) as client:
        result = await client.complete("m", [], tools=tools, tool_choice="auto")

    assert result.content is None
    assert [(tc.id, tc.name, tc.arguments) for tc in result.tool_calls] == [("call_1", "tap_at", '{"x": 1, "y": 2}')]
    assert seen[0]["tools"] == tools
    assert seen[0]["tool_choice"] == "auto"
    assert seen[0]["temperature"] == 0.2
    assert seen[0]["max_tokens"] == 256


async def test_json_mode_sets_response_format():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json=completion({"content": 'Sure:\n```json\n{"a": {"b": "}"}}\n```'}))

    async with make_client(handler) as client:
        data = await client.chat_json("m", [{"role": "user", "content": "json please"}])

    assert data == {"a": {"b": "}"}}
    assert seen[0]["response_format"] == {"type": "json_object"}


async def test_error_status_surfaces_body():
    def handler(request):
        return httpx.Response(404, text="Not found")

    async with make_client(handler) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.complete("m", [])

    message = str(exc_info.value)
    assert "404" in message
    assert "Not found" in message
    assert exc_info.value.status_code == 404
    assert exc_info.value.kind is ErrorKind.TRANSPORT


async def test_server_error_is_not_retried():
    hits = []

    def handler(request):
        hits.append(request)
        return httpx.Response(500, json={"error": {"message": "upstream down"}})

    async with make_client(handler) as client:
        with pytest.raises(ApiError, match="upstream down"):
            await client.complete("m", [])

    assert len(hits) == 1


async def test_slow_endpoint_times_out():
    async def handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, json=completion({"content": "late"}))

    async with make_client(handler, request_timeout=0.05) as client:
        with pytest.raises(ChatTimeoutError) as exc_info:
            await client.complete("m", [])

    assert isinstance(exc_info.value, TransportError)
    assert exc_info.value.timeout == 0.05


async def test_connection_failure_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(TransportError):
            await client.complete("m", [])


async def test_chat_requires_content():
    def handler(request):
        return httpx.Response(200, json=completion({"content": ""}))

    async with make_client(handler) as client:
        with pytest.raises(NoContentError):
            await client.chat("m", [])


async def test_empty_choices():
    def handler(request):
        body = completion({"content": "x"})
        body["choices"] = []
        return httpx.Response(200, json=body)

    async with make_client(handler) as client:
        with pytest.raises(NoContentError):
            await client.complete("m", [])


def test_balanced_object_ignores_braces_in_strings():
    text = 'Result: {"msg": "a } b", "nested": {"k": "{"}} trailing }'
    assert first_balanced_object(text) == '{"msg": "a } b", "nested": {"k": "{"}}'
    assert first_balanced_object("no braces") is None
    assert first_balanced_object("{ unclosed") is None


def test_extract_json_strategies():
    assert extract_json('{"a": 1}') == {"a": 1}
    assert extract_json('prefix {"a": 1} suffix') == {"a": 1}
    assert extract_json('```\n{"a": 1}\n```') == {"a": 1}


def test_extract_json_failure_reports_text():
    with pytest.raises(ExtractionError) as exc_info:
        extract_json("definitely not json")

    assert "19 chars" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)
    assert exc_info.value.kind is ErrorKind.EXTRACTION
