"""Scriptwriter: one JSON-mode request that narrates a recording and assigns per-action timings."""

import logging
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError

from .client import ChatClient
from .config import ChatConfig
from .errors import EmptyRecordingError, ExtractionError, InvalidActionIndexError
from .models import ScriptDraft, ScriptRequest, TimestampedAction, VoiceoverScript
from .prompts import SCRIPTWRITER_SYSTEM_PROMPT, scriptwriter_user_prompt

logger = logging.getLogger(__name__)


class Scriptwriter:
    """
    Turns recording steps into a voiceover script with timestamped actions.

    The model's timings are taken as given. Each returned ``actionIndex`` is
    resolved against the input steps; an index outside the input is an error.
    """

    def __init__(self, client: ChatClient, model: str):
        self.client = client
        self.model = model

    async def generate_script(self, request: ScriptRequest) -> VoiceoverScript:
        steps = request.recording_steps
        if not steps:
            raise EmptyRecordingError("recording_steps must not be empty")

        logger.info(f"Starting script generation for '{request.video_title or 'Untitled'}'")
        logger.info(f"Recording steps: {len(steps)}")

        messages = [
            {"role": "system", "content": SCRIPTWRITER_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": scriptwriter_user_prompt(
                    steps,
                    video_title=request.video_title,
                    video_description=request.video_description,
                    goal=request.prompt,
                ),
            },
        ]
        data = await self.client.chat_json(self.model, messages)

        try:
            draft = ScriptDraft.model_validate(data)
        except ValidationError as e:
            raise ExtractionError(f"Script JSON does not match the expected shape: {e}") from e

        logger.info(f"✓ Script length: {len(draft.script)} chars")
        logger.info(f"✓ Total duration: {draft.total_duration:g}ms ({draft.total_duration / 1000:.1f}s)")

        if len(draft.timestamped_actions) != len(steps):
            logger.warning(
                f"⚠ Expected {len(steps)} actions but got {len(draft.timestamped_actions)}"
            )

        actions: List[TimestampedAction] = []
        for timing in draft.timestamped_actions:
            index = timing.action_index
            if not 0 <= index < len(steps):
                raise InvalidActionIndexError(index, len(steps))
            if timing.end_time <= timing.start_time:
                logger.warning(
                    f"⚠ Action {index} has a non-positive interval "
                    f"({timing.start_time:g}ms - {timing.end_time:g}ms)"
                )
            actions.append(TimestampedAction(
                action=steps[index],
                start_time_ms=timing.start_time,
                end_time_ms=timing.end_time,
            ))

        logger.info("Timing breakdown:")
        for i, ta in enumerate(actions, 1):
            logger.info(f"  {i}. {ta.action.description or ta.action.type}")
            logger.info(f"     {ta.start_time_ms:g}ms - {ta.end_time_ms:g}ms ({ta.duration_ms:g}ms duration)")

        return VoiceoverScript(
            script=draft.script,
            total_duration_ms=draft.total_duration,
            timestamped_actions=actions,
        )


async def generate_script(
    request: Union[ScriptRequest, Mapping[str, Any]],
    *,
    client: Optional[ChatClient] = None,
    config: Optional[ChatConfig] = None,
) -> VoiceoverScript:
    """Generate a voiceover script; builds and closes a client when none is given."""
    if not isinstance(request, ScriptRequest):
        request = ScriptRequest.model_validate(request)
    owns_client = client is None
    if client is None:
        config = config or ChatConfig.from_env()
        client = ChatClient(config)
    model = (config or client.config).scriptwriter_model
    try:
        return await Scriptwriter(client, model).generate_script(request)
    finally:
        if owns_client:
            await client.close()
