import json

import pytest

from screenwright.errors import ErrorKind, PlanExtractionError, PlanValidationError
from screenwright.extraction import (
    extract_plan,
    looks_like_plan_json,
    parse_plan,
    plan_candidates,
    validate_plan,
)
from screenwright.models import PressButtonStep, TapStep, WaitStep

from .fakes import PLAN, PLAN_JSON


def test_fenced_block_is_first_candidate():
    text = f"Here you go:\n```json\n{PLAN_JSON}\n```\nGood luck!"

    assert next(plan_candidates(text)) == PLAN_JSON
    assert parse_plan(text).to_wire() == PLAN


def test_every_strategy_yields_the_same_plan():
    fenced = f"```json\n{PLAN_JSON}\n```"
    embedded = f"After testing, the final plan is {PLAN_JSON} and that is all."
    bare = f"\n  {PLAN_JSON}  \n"

    plans = [parse_plan(text) for text in (fenced, embedded, bare)]

    assert plans[0] == plans[1] == plans[2]
    assert plans[0].to_wire() == PLAN


def test_unlabelled_fence_is_accepted():
    assert extract_plan(f"```\n{PLAN_JSON}\n```") == PLAN


def test_no_json_raises_with_preview():
    text = "I could not finish testing the workflow."

    with pytest.raises(PlanExtractionError) as exc_info:
        extract_plan(text)

    message = str(exc_info.value)
    assert f"received {len(text)} chars" in message
    assert "I could not finish" in message
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)
    assert exc_info.value.kind is ErrorKind.EXTRACTION


@pytest.mark.parametrize("data", [
    dict(PLAN, recordingSteps=[]),
    {k: v for k, v in PLAN.items() if k != "recordingSteps"},
])
def test_missing_or_empty_recording_steps(data):
    with pytest.raises(PlanValidationError, match="Plan validation failed: recordingSteps is empty"):
        validate_plan(data)


def test_schema_violation_is_extraction_error():
    data = dict(PLAN, recordingSteps=[{"type": "tap", "description": "no target"}])

    with pytest.raises(PlanExtractionError, match="schema"):
        validate_plan(data)


def test_unknown_step_type_is_rejected():
    data = dict(PLAN, recordingSteps=[{"type": "shake", "description": "?"}])

    with pytest.raises(PlanExtractionError):
        validate_plan(data)


def test_all_step_variants_parse():
    data = dict(PLAN, setupSteps=[{"type": "press_button", "button": "home"}], recordingSteps=[
        {"type": "tap", "target": {"x": 1, "y": 2}},
        {"type": "swipe", "direction": "left"},
        {"type": "type", "input": "hello"},
        {"type": "wait", "waitMs": 1500},
        {"type": "press_button", "button": "back"},
        {"type": "verify", "verification": "Inbox is visible"},
    ])

    plan = validate_plan(data)

    assert isinstance(plan.setup_steps[0], PressButtonStep)
    assert isinstance(plan.recording_steps[0], TapStep)
    assert plan.recording_steps[3] == WaitStep(wait_ms=1500)
    assert [s.type for s in plan.recording_steps] == ["tap", "swipe", "type", "wait", "press_button", "verify"]


def test_looks_like_plan_json():
    assert looks_like_plan_json(PLAN_JSON)
    assert looks_like_plan_json(f"  {PLAN_JSON}")
    assert not looks_like_plan_json("Here is the plan: " + PLAN_JSON)
    assert not looks_like_plan_json('{"name": "x"}')
    assert not looks_like_plan_json(None)
