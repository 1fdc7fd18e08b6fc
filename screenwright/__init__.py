"""Screenwright package

Modules:
- config: immutable client configuration
- client: OpenAI-compatible chat client
- models: data models
- tools: tool catalogue and argument schemas
- perception: tool results as transcript messages
- controller: execution module (capability port dispatch)
- memory: transcript and tool-call history
- extraction: plan extraction and validation
- planner: planning module (tool-calling conversation loop)
- scriptwriter: voiceover script and timing alignment
- content: content-idea generation
- core: facade class
"""

from .client import ChatClient
from .config import ChatConfig
from .content import ContentCreator, explore_codebase
from .controller import CapabilityPort, Controller
from .core import Screenwright
from .errors import (
    ApiError,
    ChatTimeoutError,
    ConfigError,
    EmptyRecordingError,
    ErrorKind,
    ExtractionError,
    InvalidActionIndexError,
    MaxIterationsExceeded,
    NoContentError,
    PlanExtractionError,
    PlanValidationError,
    ScreenwrightError,
    ToolExecutionError,
    TransportError,
    UnknownToolError,
)
from .extraction import extract_plan, parse_plan, validate_plan
from .memory import Memory
from .models import (
    ActionStep,
    ContentCategory,
    ContentIdea,
    ExistingContent,
    PlannerRequest,
    RecordingPlan,
    ScriptRequest,
    TimestampedAction,
    VideoIdea,
    VoiceoverScript,
)
from .planner import Planner, generate_plan
from .scriptwriter import Scriptwriter, generate_script

__all__ = [
    "ChatClient",
    "ChatConfig",
    "ContentCreator",
    "explore_codebase",
    "CapabilityPort",
    "Controller",
    "Screenwright",
    "ApiError",
    "ChatTimeoutError",
    "ConfigError",
    "EmptyRecordingError",
    "ErrorKind",
    "ExtractionError",
    "InvalidActionIndexError",
    "MaxIterationsExceeded",
    "NoContentError",
    "PlanExtractionError",
    "PlanValidationError",
    "ScreenwrightError",
    "ToolExecutionError",
    "TransportError",
    "UnknownToolError",
    "extract_plan",
    "parse_plan",
    "validate_plan",
    "Memory",
    "ActionStep",
    "ContentCategory",
    "ContentIdea",
    "ExistingContent",
    "PlannerRequest",
    "RecordingPlan",
    "ScriptRequest",
    "TimestampedAction",
    "VideoIdea",
    "VoiceoverScript",
    "Planner",
    "generate_plan",
    "Scriptwriter",
    "generate_script",
]
