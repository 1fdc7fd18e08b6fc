"""Memory module: the conversation transcript and the history of executed tool calls."""

import copy
from typing import Any, Dict, List, Optional

from .models import ChatResult, ToolRecord


class Memory:
    """Append-only transcript plus tool-call history for one planner run."""

    def __init__(self):
        self._messages: List[Dict[str, Any]] = []
        self.history: List[ToolRecord] = []
        self.step_counter = 0

    @property
    def messages(self) -> List[Dict[str, Any]]:
        """A copy; callers cannot mutate the transcript in place."""
        return list(self._messages)

    def append(self, *messages: Dict[str, Any]):
        for message in messages:
            self._messages.append(copy.deepcopy(message))

    def append_assistant(self, response: ChatResult):
        """Record the assistant turn, including any tool calls it emitted."""
        message: Dict[str, Any] = {"role": "assistant", "content": response.content or ""}
        if response.tool_calls:
            message["tool_calls"] = [tc.to_message() for tc in response.tool_calls]
        self.append(message)

    def record(self, tool: str, arguments: Dict[str, Any], result: str):
        """Record one executed tool call."""
        self.step_counter += 1
        self.history.append(ToolRecord(
            step_num=self.step_counter,
            tool=tool,
            arguments=arguments,
            result=result,
        ))

    def is_repeated_call(self, tool: str, arguments: Optional[Dict[str, Any]], threshold: int = 3) -> bool:
        """True when the last ``threshold`` calls were all this exact call."""
        recent = self.history[-threshold:]
        if len(recent) < threshold:
            return False
        return all(r.tool == tool and r.arguments == (arguments or {}) for r in recent)

    def format_history(self, last_n: int = 5) -> str:
        if not self.history:
            return "(no tool calls)"
        lines = []
        for rec in self.history[-last_n:]:
            args = f" {rec.arguments}" if rec.arguments else ""
            lines.append(f"Step {rec.step_num}: {rec.tool}{args} → {rec.result}")
        return "\n".join(lines)
