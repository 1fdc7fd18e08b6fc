import json

from screenwright.controller import ToolOutcome
from screenwright.errors import ToolExecutionError
from screenwright.models import ActionResult, ElementList, ScreenshotResult, UIElement
from screenwright.perception import SCREENSHOT_NOTE, error_message, redact_screenshot, tool_messages
from screenwright.tools import NoArgs, TapArgs, ToolName

from .fakes import tool_call


def test_screenshot_becomes_summary_and_image():
    call = tool_call("take_screenshot", call_id="s1")
    shot = ScreenshotResult(screenshot="QUJD", format="jpeg", width=393, height=852)

    summary, image = tool_messages(call, ToolOutcome(ToolName.TAKE_SCREENSHOT, NoArgs(), shot))

    assert summary["role"] == "tool"
    assert summary["tool_call_id"] == "s1"
    assert json.loads(summary["content"]) == {
        "success": True, "format": "jpeg", "width": 393, "height": 852, "message": SCREENSHOT_NOTE,
    }
    assert image["role"] == "user"
    text_part, image_part = image["content"]
    assert text_part["type"] == "text"
    assert image_part == {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,QUJD"}}


def test_element_list_includes_centers():
    call = tool_call("list_elements", call_id="e1")
    elements = ElementList(elements=[UIElement(type="Button", label="Send", x=10, y=20, width=30, height=40)])

    (message,) = tool_messages(call, ToolOutcome(ToolName.LIST_ELEMENTS, NoArgs(), elements))

    payload = json.loads(message["content"])
    assert payload["count"] == 1
    assert payload["elements"][0]["label"] == "Send"
    assert (payload["elements"][0]["centerX"], payload["elements"][0]["centerY"]) == (25, 40)


def test_action_result_is_dumped():
    call = tool_call("tap_at", {"x": 1, "y": 1}, call_id="t1")

    (message,) = tool_messages(call, ToolOutcome(ToolName.TAP_AT, TapArgs(x=1, y=1), ActionResult()))

    assert json.loads(message["content"]) == {"success": True}


def test_error_message_carries_reason():
    call = tool_call("tap_at", call_id="t1")

    message = error_message(call, ToolExecutionError("tap_at", "device offline"))

    assert message["tool_call_id"] == "t1"
    assert json.loads(message["content"]) == {"error": "tap_at failed: device offline"}


def test_redact_screenshot_truncates_payload():
    payload = {"screenshot": "A" * 500, "width": 1}

    redacted = redact_screenshot(payload, keep=10)

    assert redacted["screenshot"] == "[500 chars] AAAAAAAAAA..."
    assert payload["screenshot"] == "A" * 500
    assert redact_screenshot({"success": True}) == {"success": True}
