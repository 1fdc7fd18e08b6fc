"""Planning module: drives the model through a bounded tool-calling conversation until it emits a plan."""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .client import ChatClient
from .config import ChatConfig
from .controller import CapabilityPort, Controller
from .errors import MaxIterationsExceeded, NoContentError, ToolExecutionError
from .extraction import looks_like_plan_json, parse_plan
from .memory import Memory
from .models import ChatResult, PlannerRequest, RecordingPlan, describe_step
from .perception import error_message, redact_screenshot, tool_messages
from .prompts import JSON_FOLLOW_UP, PLANNER_SYSTEM_PROMPT, planner_user_prompt
from .tools import tool_specs

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
RULE = "━" * 40


class Planner:
    """
    Conversation loop that turns a video idea into a tested recording plan.

    Each iteration sends the system prompt plus the whole transcript. Tool
    calls are executed one at a time in the order the model emitted them.
    A text answer ends the loop: it is parsed, validated, and the device is
    reset before the plan is returned.
    """

    def __init__(
        self,
        client: ChatClient,
        model: str,
        max_iterations: int = MAX_ITERATIONS,
        settle_seconds: float = 1.0,
    ):
        self.client = client
        self.model = model
        self.max_iterations = max_iterations
        self.settle_seconds = settle_seconds

    async def generate_plan(self, request: PlannerRequest, port: CapabilityPort) -> RecordingPlan:
        idea = request.idea
        logger.info(f"Starting plan generation for '{idea.title}' on device {request.device_id}")

        controller = Controller(port, request.device_id)
        memory = Memory()
        memory.append({"role": "user", "content": planner_user_prompt(idea)})
        tools = tool_specs()

        for iteration in range(1, self.max_iterations + 1):
            logger.info(RULE)
            logger.info(f"🔄 Iteration {iteration}/{self.max_iterations}")

            response = await self.client.complete(
                self.model,
                self._transcript(memory),
                tools=tools,
                tool_choice="auto",
            )

            if response.tool_calls:
                await self._run_tool_calls(response, controller, memory)
                continue

            if response.content:
                plan = await self._finish(response, memory)
                await controller.reset_device(self.settle_seconds)
                return plan

            raise NoContentError(
                f"Unexpected response: neither tool calls nor content (finish_reason={response.finish_reason})"
            )

        logger.error(f"❌ No plan after {self.max_iterations} iterations")
        logger.error(f"Last tool calls:\n{memory.format_history()}")
        raise MaxIterationsExceeded(self.max_iterations)

    def _transcript(self, memory: Memory) -> List[Dict[str, Any]]:
        return [{"role": "system", "content": PLANNER_SYSTEM_PROMPT}] + memory.messages

    async def _run_tool_calls(self, response: ChatResult, controller: Controller, memory: Memory):
        """
        Execute every tool call of one assistant turn, sequentially.

        Tool replies are appended in emission order; screenshot images follow
        after the last tool reply so the tool replies stay contiguous.
        """
        logger.info(f"Processing {len(response.tool_calls)} tool calls")
        replies: List[Dict[str, Any]] = []
        attachments: List[Dict[str, Any]] = []

        for call in response.tool_calls:
            logger.info(f"Tool call: {call.name} {call.arguments}")
            try:
                outcome = await controller.execute(call)
            except ToolExecutionError as e:
                logger.error(f"❌ {e}")
                memory.record(call.name, {}, "failed")
                replies.append(error_message(call, e))
                continue

            args = outcome.arguments.model_dump()
            memory.record(call.name, args, "success")
            if memory.is_repeated_call(call.name, args):
                logger.warning(f"⚠ Model repeated {call.name} {args} several times in a row")
            logger.debug(f"Result: {json.dumps(redact_screenshot(outcome.result.model_dump()))}")

            for message in tool_messages(call, outcome):
                (replies if message["role"] == "tool" else attachments).append(message)

        memory.append_assistant(response)
        memory.append(*replies, *attachments)
        logger.info(f"💬 Added {len(replies) + len(attachments)} messages to conversation")

    async def _finish(self, response: ChatResult, memory: Memory) -> RecordingPlan:
        content = response.content or ""
        logger.info(f"📋 No more tool calls, extracting final plan ({len(content)} chars)")

        if not looks_like_plan_json(content):
            logger.warning("⚠ Response is not JSON, making one follow-up call in JSON mode")
            memory.append_assistant(response)
            memory.append({"role": "user", "content": JSON_FOLLOW_UP})
            follow_up = await self.client.complete(self.model, self._transcript(memory), json_mode=True)
            content = follow_up.content or ""
            logger.info(f"✓ Received JSON response ({len(content)} chars)")

        logger.debug(f"Final plan JSON:\n{content}")
        plan = parse_plan(content)
        self._log_plan(plan)
        return plan

    def _log_plan(self, plan: RecordingPlan):
        logger.info(RULE)
        logger.info("✅ Plan generated successfully!")
        logger.info(f"📊 Setup steps: {len(plan.setup_steps)}")
        logger.info(f"📊 Recording steps: {len(plan.recording_steps)}")
        logger.info(f"⏱️  Estimated duration: {plan.estimated_duration_seconds:g}s")
        for label, steps in (("🔧 SETUP", plan.setup_steps), ("🎬 RECORDING", plan.recording_steps)):
            if not steps:
                continue
            logger.info(f"{label} ACTIONS:")
            for i, step in enumerate(steps, 1):
                first, *rest = describe_step(step)
                logger.info(f"  {i}. {first}")
                for line in rest:
                    logger.info(f"     {line}")
        logger.info(RULE)


async def generate_plan(
    request: Union[PlannerRequest, Mapping[str, Any]],
    port: CapabilityPort,
    *,
    client: Optional[ChatClient] = None,
    config: Optional[ChatConfig] = None,
    **planner_options: Any,
) -> RecordingPlan:
    """
    Generate a tested recording plan.

    Without ``client`` a client is built from ``config`` (or
    ``ChatConfig.from_env()``) and closed afterwards.
    """
    if not isinstance(request, PlannerRequest):
        request = PlannerRequest.model_validate(request)
    owns_client = client is None
    if client is None:
        config = config or ChatConfig.from_env()
        client = ChatClient(config)
    model = (config or client.config).planner_model
    try:
        return await Planner(client, model, **planner_options).generate_plan(request, port)
    finally:
        if owns_client:
            await client.close()
