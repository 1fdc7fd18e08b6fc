from screenwright.memory import Memory
from screenwright.models import ChatResult

from .fakes import tool_call


def test_messages_are_copied_in_and_out():
    memory = Memory()
    message = {"role": "user", "content": "hi"}

    memory.append(message)
    message["content"] = "changed"
    memory.messages.append({"role": "user", "content": "sneaky"})

    assert memory.messages == [{"role": "user", "content": "hi"}]


def test_assistant_turn_keeps_tool_calls():
    memory = Memory()
    call = tool_call("swipe", {"direction": "up"}, call_id="c1")

    memory.append_assistant(ChatResult(finish_reason="tool_calls", tool_calls=[call]))
    memory.append_assistant(ChatResult(finish_reason="stop", content="done"))

    first, second = memory.messages
    assert first["content"] == ""
    assert first["tool_calls"] == [call.to_message()]
    assert second == {"role": "assistant", "content": "done"}


def test_repeated_call_detection():
    memory = Memory()
    for _ in range(2):
        memory.record("tap_at", {"x": 1, "y": 2}, "success")
    assert not memory.is_repeated_call("tap_at", {"x": 1, "y": 2})

    memory.record("tap_at", {"x": 1, "y": 2}, "success")
    assert memory.is_repeated_call("tap_at", {"x": 1, "y": 2})
    assert not memory.is_repeated_call("tap_at", {"x": 9, "y": 2})

    memory.record("swipe", {"direction": "up"}, "success")
    assert not memory.is_repeated_call("tap_at", {"x": 1, "y": 2})


def test_format_history():
    memory = Memory()
    assert memory.format_history() == "(no tool calls)"

    memory.record("take_screenshot", {}, "success")
    memory.record("tap_at", {"x": 1}, "failed")

    assert memory.format_history() == "Step 1: take_screenshot → success\nStep 2: tap_at {'x': 1} → failed"
    assert memory.format_history(last_n=1) == "Step 2: tap_at {'x': 1} → failed"
