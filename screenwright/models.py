"""Data models.

Wire-facing shapes (model output, port results, agent inputs/outputs) are
pydantic models with camelCase aliases; internal bookkeeping records are
plain dataclasses.
"""

from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Accepts camelCase or snake_case input, dumps camelCase with ``by_alias=True``."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


Direction = Literal["up", "down", "left", "right"]
Button = Literal["home", "back"]


# ── Device ────────────────────────────────────────────────


class UIElement(WireModel):
    """One accessibility element; x/y is the top-left corner."""
    type: str
    label: Optional[str] = None
    value: Optional[str] = None
    x: float
    y: float
    width: float
    height: float
    enabled: bool = True
    visible: bool = True

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


class ScreenshotResult(WireModel):
    screenshot: str  # base64
    format: str = "png"
    width: Optional[int] = None
    height: Optional[int] = None


class ElementList(WireModel):
    elements: List[UIElement] = Field(default_factory=list)


class ActionResult(WireModel):
    success: bool = True


# ── Action steps ──────────────────────────────────────────


class Target(WireModel):
    x: float
    y: float
    element: Optional[UIElement] = None


class TapStep(WireModel):
    type: Literal["tap"] = "tap"
    description: str = ""
    target: Target


class SwipeStep(WireModel):
    type: Literal["swipe"] = "swipe"
    description: str = ""
    direction: Direction


class TypeStep(WireModel):
    type: Literal["type"] = "type"
    description: str = ""
    input: str


class WaitStep(WireModel):
    type: Literal["wait"] = "wait"
    description: str = ""
    wait_ms: int


class PressButtonStep(WireModel):
    type: Literal["press_button"] = "press_button"
    description: str = ""
    button: Button


class VerifyStep(WireModel):
    type: Literal["verify"] = "verify"
    description: str = ""
    verification: str


ActionStep = Annotated[
    Union[TapStep, SwipeStep, TypeStep, WaitStep, PressButtonStep, VerifyStep],
    Field(discriminator="type"),
]


def describe_step(step: "ActionStep") -> List[str]:
    """Human-readable lines for logging a step."""
    lines = [f"{step.type.upper()} - {step.description or 'No description'}"]
    if isinstance(step, TapStep):
        lines.append(f"→ Coordinates: ({step.target.x:g}, {step.target.y:g})")
    elif isinstance(step, TypeStep):
        lines.append(f'→ Input: "{step.input}"')
    elif isinstance(step, SwipeStep):
        lines.append(f"→ Direction: {step.direction}")
    elif isinstance(step, PressButtonStep):
        lines.append(f"→ Button: {step.button}")
    elif isinstance(step, WaitStep):
        lines.append(f"→ Wait: {step.wait_ms}ms")
    elif isinstance(step, VerifyStep):
        lines.append(f"→ Verify: {step.verification}")
    return lines


# ── Planner ───────────────────────────────────────────────


class VideoIdea(WireModel):
    """High-level idea for one tutorial video; steps are free-text hints."""
    title: str
    description: str = ""
    feature: str = ""
    setup_steps: List[str] = Field(default_factory=list)
    recording_steps: List[str] = Field(default_factory=list)


class PlannerRequest(WireModel):
    device_id: str
    idea: VideoIdea


class RecordingPlan(WireModel):
    title: str
    description: str = ""
    setup_steps: List[ActionStep] = Field(default_factory=list)
    recording_steps: List[ActionStep]
    estimated_duration_seconds: float = 0
    screenshots: List[str] = Field(default_factory=list)


# ── Scriptwriter ──────────────────────────────────────────


class ScriptRequest(WireModel):
    recording_steps: List[ActionStep]
    video_title: Optional[str] = None
    video_description: Optional[str] = None
    prompt: Optional[str] = None


class IndexedTiming(WireModel):
    """What the model returns per action: an index into the input steps."""
    action_index: int
    start_time: float
    end_time: float


class ScriptDraft(WireModel):
    script: str
    total_duration: float = 0
    timestamped_actions: List[IndexedTiming] = Field(default_factory=list)


class TimestampedAction(WireModel):
    action: ActionStep
    start_time_ms: float = Field(alias="startTime")
    end_time_ms: float = Field(alias="endTime")

    @property
    def duration_ms(self) -> float:
        return self.end_time_ms - self.start_time_ms


class VoiceoverScript(WireModel):
    script: str
    total_duration_ms: float = Field(alias="totalDuration")
    timestamped_actions: List[TimestampedAction] = Field(default_factory=list)


# ── Content ideas ─────────────────────────────────────────


class ContentIdea(VideoIdea):
    """A generated idea; ready to hand to the planner via ``to_video_idea()``."""

    def to_video_idea(self) -> VideoIdea:
        return VideoIdea.model_validate(self.model_dump())


class ContentCategory(WireModel):
    name: str
    description: str = ""
    content: List[ContentIdea] = Field(default_factory=list)


class ExistingContent(WireModel):
    title: str
    description: str = ""
    category: Optional[str] = None


# ── Internal records ──────────────────────────────────────


@dataclass
class ToolCall:
    """A function invocation emitted by the assistant."""
    id: str
    name: str
    arguments: str  # raw JSON string, may be malformed

    def to_message(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass
class Usage:
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class ChatResult:
    """Normalized chat-completion response."""
    finish_reason: str
    content: Optional[str] = None
    tool_calls: List[ToolCall] = field(default_factory=list)
    usage: Optional[Usage] = None
    model: Optional[str] = None


@dataclass
class ToolRecord:
    """One executed tool call in the planner's history."""
    step_num: int
    tool: str
    arguments: Dict[str, Any]
    result: str  # success|failed
