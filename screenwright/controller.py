"""Execution module: runs the model's tool calls against the device."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Protocol

from pydantic import BaseModel, ValidationError

from .errors import ScreenwrightError, ToolExecutionError
from .models import ActionResult, Button, Direction, ElementList, ScreenshotResult, ToolCall
from .tools import (
    TOOL_DEFINITIONS,
    SwipeArgs,
    TapArgs,
    ToolArgs,
    ToolName,
    TypeKeysArgs,
    parse_arguments,
    parse_tool_name,
)

logger = logging.getLogger(__name__)


class CapabilityPort(Protocol):
    """
    Device automation surface supplied by the caller.

    Results may be plain dicts in the documented shape or the matching
    result models; they are validated on the way in.
    """

    async def take_screenshot(self, device_id: str) -> Any: ...

    async def list_elements(self, device_id: str) -> Any: ...

    async def tap_at(self, device_id: str, x: float, y: float) -> Any: ...

    async def swipe(self, device_id: str, direction: Direction) -> Any: ...

    async def type_text(self, device_id: str, text: str, submit: bool = False) -> Any: ...

    async def terminate_all_apps(self, device_id: str) -> None: ...

    async def press_button(self, device_id: str, button: Button) -> None: ...


@dataclass
class ToolOutcome:
    tool: ToolName
    arguments: ToolArgs
    result: BaseModel


class Controller:
    """Maps tool calls onto the capability port for one device."""

    def __init__(self, port: CapabilityPort, device_id: str):
        self.port = port
        self.device_id = device_id
        self._handlers: Dict[ToolName, Callable[[Any], Awaitable[BaseModel]]] = {
            ToolName.TAKE_SCREENSHOT: self._take_screenshot,
            ToolName.LIST_ELEMENTS: self._list_elements,
            ToolName.TAP_AT: self._tap_at,
            ToolName.SWIPE: self._swipe,
            ToolName.TYPE_KEYS: self._type_keys,
        }
        missing = set(ToolName) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for tools: {sorted(t.value for t in missing)}")

    async def execute(self, call: ToolCall) -> ToolOutcome:
        """
        Execute one tool call.

        Unknown tool names raise ``UnknownToolError``. Bad arguments or a
        failing port raise ``ToolExecutionError``, which the planner reports
        back to the model.
        """
        tool = parse_tool_name(call.name)
        raw_args = parse_arguments(call.arguments)
        try:
            args = TOOL_DEFINITIONS[tool].args_model.model_validate(raw_args)
        except ValidationError as e:
            raise ToolExecutionError(tool.value, f"invalid arguments {raw_args}: {e}") from e

        try:
            result = await self._handlers[tool](args)
        except ScreenwrightError:
            raise
        except Exception as e:
            logger.error(f"❌ Tool {tool.value} failed: {e}")
            raise ToolExecutionError(tool.value, str(e)) from e
        return ToolOutcome(tool=tool, arguments=args, result=result)

    async def _take_screenshot(self, args: ToolArgs) -> ScreenshotResult:
        logger.info("📸 Taking screenshot...")
        return ScreenshotResult.model_validate(await self.port.take_screenshot(self.device_id))

    async def _list_elements(self, args: ToolArgs) -> ElementList:
        logger.info("🔍 Listing UI elements...")
        return ElementList.model_validate(await self.port.list_elements(self.device_id))

    async def _tap_at(self, args: TapArgs) -> ActionResult:
        logger.info(f"👆 TESTING TAP at ({args.x:g}, {args.y:g})")
        return ActionResult.model_validate(await self.port.tap_at(self.device_id, args.x, args.y))

    async def _swipe(self, args: SwipeArgs) -> ActionResult:
        logger.info(f"👉 TESTING SWIPE {args.direction.upper()}")
        return ActionResult.model_validate(await self.port.swipe(self.device_id, args.direction))

    async def _type_keys(self, args: TypeKeysArgs) -> ActionResult:
        logger.info(f'⌨️  TESTING TYPE: "{args.text}"{" + SUBMIT" if args.submit else ""}')
        return ActionResult.model_validate(
            await self.port.type_text(self.device_id, args.text, args.submit)
        )

    async def reset_device(self, settle_seconds: float = 1.0) -> bool:
        """
        Terminate all apps and press home so a later recording starts clean.

        Failure is only logged; returns whether the reset succeeded.
        """
        logger.info("🔄 Resetting device to clean state...")
        try:
            await self.port.terminate_all_apps(self.device_id)
            await self.port.press_button(self.device_id, "home")
        except Exception as e:
            logger.warning(f"⚠ Failed to reset device: {e}")
            logger.warning("⚠ Recording may start from incorrect state")
            return False
        logger.info("✓ Returned to home screen")
        if settle_seconds > 0:
            await asyncio.sleep(settle_seconds)
        return True
