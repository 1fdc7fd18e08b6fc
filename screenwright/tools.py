"""Closed tool catalogue exposed to the planner model.

Each tool is keyed by ``ToolName`` and owns an argument model; the JSON
schemas sent to the model are generated from those models so the two
cannot drift apart.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownToolError
from .models import Direction

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    TAKE_SCREENSHOT = "take_screenshot"
    LIST_ELEMENTS = "list_elements"
    TAP_AT = "tap_at"
    SWIPE = "swipe"
    TYPE_KEYS = "type_keys"


class ToolArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")


class NoArgs(ToolArgs):
    pass


class TapArgs(ToolArgs):
    x: float = Field(description="X coordinate (element center)")
    y: float = Field(description="Y coordinate (element center)")


class SwipeArgs(ToolArgs):
    direction: Direction = Field(description="Swipe direction")


class TypeKeysArgs(ToolArgs):
    text: str = Field(description="Text to type")
    submit: bool = Field(default=False, description="Whether to submit after typing")


@dataclass(frozen=True)
class ToolDefinition:
    name: ToolName
    description: str
    args_model: Type[ToolArgs]

    def spec(self) -> Dict[str, Any]:
        """OpenAI function spec."""
        schema = self.args_model.model_json_schema()
        return {
            "type": "function",
            "function": {
                "name": self.name.value,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": schema.get("properties", {}),
                    "required": schema.get("required", []),
                    "additionalProperties": False,
                },
            },
        }


TOOL_DEFINITIONS: Dict[ToolName, ToolDefinition] = {
    ToolName.TAKE_SCREENSHOT: ToolDefinition(
        ToolName.TAKE_SCREENSHOT,
        "Capture the current device display. The image is attached to the next message.",
        NoArgs,
    ),
    ToolName.LIST_ELEMENTS: ToolDefinition(
        ToolName.LIST_ELEMENTS,
        "Get all UI elements on screen with coordinates (x, y is the top-left corner) and attributes.",
        NoArgs,
    ),
    ToolName.TAP_AT: ToolDefinition(
        ToolName.TAP_AT,
        "Tap at the specified coordinates. Tap the CENTER of an element.",
        TapArgs,
    ),
    ToolName.SWIPE: ToolDefinition(
        ToolName.SWIPE,
        "Swipe in a direction.",
        SwipeArgs,
    ),
    ToolName.TYPE_KEYS: ToolDefinition(
        ToolName.TYPE_KEYS,
        "Type text into the focused field.",
        TypeKeysArgs,
    ),
}


def tool_specs() -> List[Dict[str, Any]]:
    return [definition.spec() for definition in TOOL_DEFINITIONS.values()]


def parse_tool_name(name: str) -> ToolName:
    try:
        return ToolName(name)
    except ValueError:
        raise UnknownToolError(name) from None


def parse_arguments(raw: Optional[str]) -> Dict[str, Any]:
    """
    Decode a tool-call argument string.

    Missing, malformed or non-object JSON becomes ``{}`` so one bad call
    degrades to a no-arg call instead of ending the conversation.
    """
    if not raw or not raw.strip():
        return {}
    try:
        args = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"⚠ Failed to parse tool arguments, using {{}}: {raw[:200]}")
        return {}
    if not isinstance(args, dict):
        logger.warning(f"⚠ Tool arguments are not an object, using {{}}: {raw[:200]}")
        return {}
    return args
