"""Error taxonomy: every failure carries a kind so callers can branch without string matching."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    EXTRACTION = "extraction"
    VALIDATION = "validation"
    ITERATION_LIMIT = "iteration_limit"
    CONFIG = "config"


class ScreenwrightError(Exception):
    """Base class for all errors raised by screenwright."""

    kind: ErrorKind = ErrorKind.PROTOCOL


class ConfigError(ScreenwrightError):
    kind = ErrorKind.CONFIG


# ── Transport ────────────────────────────────────────────


class TransportError(ScreenwrightError):
    """The chat endpoint could not be reached."""

    kind = ErrorKind.TRANSPORT


class ChatTimeoutError(TransportError):
    def __init__(self, timeout: float):
        super().__init__(
            f"Chat request timeout (>{timeout:g}s). "
            "Retry the operation or check the endpoint status."
        )
        self.timeout = timeout


class ApiError(TransportError):
    """Non-2xx response. The raw body is kept verbatim."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Chat API error: {status_code} {body}")
        self.status_code = status_code
        self.body = body


# ── Protocol ─────────────────────────────────────────────


class NoContentError(ScreenwrightError):
    kind = ErrorKind.PROTOCOL


class UnknownToolError(ScreenwrightError):
    kind = ErrorKind.PROTOCOL

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolExecutionError(ScreenwrightError):
    """A known tool failed. Reported back to the model, not fatal to the conversation."""

    kind = ErrorKind.PROTOCOL

    def __init__(self, tool: str, message: str):
        super().__init__(f"{tool} failed: {message}")
        self.tool = tool
        self.detail = message


# ── Extraction / validation ──────────────────────────────


class ExtractionError(ScreenwrightError):
    """No usable JSON object could be recovered from the model output."""

    kind = ErrorKind.EXTRACTION

    def __init__(self, message: str, text: Optional[str] = None):
        if text is not None:
            preview = text.strip()[:80].replace("\n", " ")
            message = f"{message} (received {len(text)} chars: {preview!r})"
        super().__init__(message)
        self.text = text


class PlanExtractionError(ExtractionError):
    pass


class EmptyRecordingError(ScreenwrightError, ValueError):
    """A script was requested for a recording with no steps."""

    kind = ErrorKind.VALIDATION


class PlanValidationError(ScreenwrightError):
    """The plan parsed but the agent never produced recording steps."""

    kind = ErrorKind.VALIDATION


class InvalidActionIndexError(ScreenwrightError):
    kind = ErrorKind.VALIDATION

    def __init__(self, index: int, count: int):
        super().__init__(
            f"Invalid actionIndex {index} - recording has only {count} steps"
        )
        self.index = index
        self.count = count


class MaxIterationsExceeded(ScreenwrightError):
    kind = ErrorKind.ITERATION_LIMIT

    def __init__(self, limit: int):
        super().__init__(f"Max iterations ({limit}) reached without generating plan")
        self.limit = limit
