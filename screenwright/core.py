"""Facade bundling one chat client with the planner, scriptwriter and content agents."""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from .client import ChatClient
from .config import ChatConfig
from .content import ContentCreator
from .controller import CapabilityPort
from .models import (
    ActionStep,
    ContentCategory,
    ExistingContent,
    PlannerRequest,
    RecordingPlan,
    ScriptRequest,
    VideoIdea,
    VoiceoverScript,
)
from .planner import MAX_ITERATIONS, Planner
from .scriptwriter import Scriptwriter


class Screenwright:
    """
    Entry point for applications.

    Usage::

        async with Screenwright.from_env() as sw:
            plan = await sw.plan("SIM-UDID", idea, port)
            script = await sw.script(plan.recording_steps, video_title=plan.title)
    """

    def __init__(self, client: ChatClient, config: ChatConfig):
        self.client = client
        self.config = config

    @classmethod
    def from_env(cls) -> "Screenwright":
        config = ChatConfig.from_env()
        return cls(ChatClient(config), config)

    async def __aenter__(self) -> "Screenwright":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.client.close()

    async def plan(
        self,
        device_id: str,
        idea: VideoIdea,
        port: CapabilityPort,
        max_iterations: int = MAX_ITERATIONS,
        settle_seconds: float = 1.0,
    ) -> RecordingPlan:
        planner = Planner(self.client, self.config.planner_model, max_iterations, settle_seconds)
        return await planner.generate_plan(PlannerRequest(device_id=device_id, idea=idea), port)

    async def script(
        self,
        recording_steps: Sequence[ActionStep],
        video_title: Optional[str] = None,
        video_description: Optional[str] = None,
        prompt: Optional[str] = None,
    ) -> VoiceoverScript:
        request = ScriptRequest(
            recording_steps=list(recording_steps),
            video_title=video_title,
            video_description=video_description,
            prompt=prompt,
        )
        return await Scriptwriter(self.client, self.config.scriptwriter_model).generate_script(request)

    async def ideas(
        self,
        project_path: Union[str, Path],
        existing: Sequence[ExistingContent] = (),
        max_ideas: int = 10,
        max_categories: int = 3,
    ) -> List[ContentCategory]:
        creator = ContentCreator(self.client, self.config.content_model)
        return await creator.generate_ideas(project_path, existing, max_ideas, max_categories)
