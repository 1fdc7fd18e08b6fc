"""Perception module: turns tool results into transcript messages the model can read."""

import json
from typing import Any, Dict, List

from .controller import ToolOutcome
from .errors import ToolExecutionError
from .models import ElementList, ScreenshotResult, ToolCall

SCREENSHOT_NOTE = "Screenshot captured and attached as image"


def tool_messages(call: ToolCall, outcome: ToolOutcome) -> List[Dict[str, Any]]:
    """
    Build the replies for one executed tool call.

    Screenshots produce two messages: a ``tool`` summary without the
    payload, and a ``user`` message carrying the image, since image parts
    are only accepted in user turns.
    """
    result = outcome.result
    if isinstance(result, ScreenshotResult):
        summary = {
            "success": True,
            "format": result.format,
            "width": result.width,
            "height": result.height,
            "message": SCREENSHOT_NOTE,
        }
        return [
            _tool_message(call, summary),
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": f"Screenshot from {call.name} ({call.id}):"},
                    {"type": "image_url", "image_url": {"url": data_url(result)}},
                ],
            },
        ]
    if isinstance(result, ElementList):
        return [_tool_message(call, summarize_elements(result))]
    return [_tool_message(call, result.model_dump(by_alias=True, exclude_none=True))]


def error_message(call: ToolCall, error: ToolExecutionError) -> Dict[str, Any]:
    return _tool_message(call, {"error": str(error)})


def summarize_elements(elements: ElementList) -> Dict[str, Any]:
    """Element list with precomputed centers; the model is told to tap centers."""
    items = []
    for el in elements.elements:
        item = el.model_dump(by_alias=True, exclude_none=True)
        cx, cy = el.center
        item["centerX"] = round(cx, 1)
        item["centerY"] = round(cy, 1)
        items.append(item)
    return {"count": len(items), "elements": items}


def data_url(shot: ScreenshotResult) -> str:
    return f"data:image/{shot.format or 'png'};base64,{shot.screenshot}"


def redact_screenshot(payload: Dict[str, Any], keep: int = 50) -> Dict[str, Any]:
    """Copy of a result payload with base64 data truncated, for logging."""
    copy = dict(payload)
    shot = copy.get("screenshot")
    if isinstance(shot, str):
        copy["screenshot"] = f"[{len(shot)} chars] {shot[:keep]}..."
    return copy


def _tool_message(call: ToolCall, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "role": "tool",
        "tool_call_id": call.id,
        "content": json.dumps(payload, ensure_ascii=False),
    }
