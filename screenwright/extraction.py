"""Plan extraction and validation.

The planner's final answer is free text that should contain one JSON
object. Three strategies are tried in order (fenced block, a span that
covers both ``"title"`` and ``"recordingSteps"``, the whole trimmed text);
the first candidate that parses wins. A plan without recording steps is
rejected outright: it means the agent never exercised the workflow.
"""

import json
import logging
import re
from typing import Any, Dict, Iterator, Optional

from pydantic import ValidationError

from .errors import PlanExtractionError, PlanValidationError
from .models import RecordingPlan

logger = logging.getLogger(__name__)

_FENCED_RE = re.compile(r"```(?:json)?[ \t]*\n(.+?)\n[ \t]*```", re.DOTALL)
_PLAN_SPAN_RE = re.compile(r'\{[\s\S]*"title"[\s\S]*"recordingSteps"[\s\S]*\}')


def looks_like_plan_json(text: Optional[str]) -> bool:
    text = (text or "").strip()
    return text.startswith("{") and '"title"' in text


def plan_candidates(text: str) -> Iterator[str]:
    fenced = _FENCED_RE.search(text)
    if fenced:
        logger.debug("🔍 Candidate from markdown code block")
        yield fenced.group(1)
    span = _PLAN_SPAN_RE.search(text)
    if span:
        logger.debug("🔍 Candidate from JSON object in text")
        yield span.group(0)
    logger.debug("🔍 Candidate from entire content")
    yield text.strip()


def extract_plan(text: str) -> Dict[str, Any]:
    """Return the first candidate that parses as a JSON object."""
    last_error: Optional[json.JSONDecodeError] = None
    for candidate in plan_candidates(text or ""):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
            continue
        if isinstance(data, dict):
            return data
    raise PlanExtractionError("Could not parse plan JSON from model response", text or "") from last_error


def validate_plan(data: Dict[str, Any]) -> RecordingPlan:
    """Enforce the non-empty recording gate, then the schema."""
    steps = data.get("recordingSteps", data.get("recording_steps"))
    if not steps:
        logger.error("❌ VALIDATION FAILED: Plan has 0 recording steps!")
        logger.error("The agent did not test the workflow as required.")
        raise PlanValidationError(
            "Plan validation failed: recordingSteps is empty. "
            "The planner must physically test the workflow and create actionable steps."
        )
    try:
        return RecordingPlan.model_validate(data)
    except ValidationError as e:
        raise PlanExtractionError(f"Plan JSON does not match the recording plan schema: {e}") from e


def parse_plan(text: str) -> RecordingPlan:
    return validate_plan(extract_plan(text))
