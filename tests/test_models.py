import pytest
from pydantic import TypeAdapter, ValidationError

from screenwright.models import (
    ActionStep,
    ContentIdea,
    SwipeStep,
    TapStep,
    Target,
    TimestampedAction,
    UIElement,
    VideoIdea,
    VoiceoverScript,
    describe_step,
)

steps = TypeAdapter(ActionStep)


def test_step_union_dispatches_on_type():
    assert isinstance(steps.validate_python({"type": "swipe", "direction": "down"}), SwipeStep)
    with pytest.raises(ValidationError):
        steps.validate_python({"type": "swipe", "direction": "sideways"})
    with pytest.raises(ValidationError):
        steps.validate_python({"direction": "up"})


def test_snake_and_camel_case_inputs():
    idea = VideoIdea.model_validate({"title": "t", "setupSteps": ["a"], "recording_steps": ["b"]})

    assert idea.setup_steps == ["a"]
    assert idea.recording_steps == ["b"]
    assert idea.to_wire() == {
        "title": "t", "description": "", "feature": "", "setupSteps": ["a"], "recordingSteps": ["b"],
    }


def test_element_center():
    element = UIElement(type="Button", x=206, y=751, width=68, height=68)
    assert element.center == (240, 785)


def test_describe_step():
    step = TapStep(description="Tap compose", target=Target(x=363, y=80))
    assert describe_step(step) == ["TAP - Tap compose", "→ Coordinates: (363, 80)"]
    assert describe_step(SwipeStep(direction="up")) == ["SWIPE - No description", "→ Direction: up"]


def test_voiceover_script_wire_names():
    step = SwipeStep(description="Scroll", direction="up")
    script = VoiceoverScript(
        script="Scroll down.",
        total_duration_ms=2000,
        timestamped_actions=[TimestampedAction(action=step, start_time_ms=100, end_time_ms=1100)],
    )

    wire = script.to_wire()

    assert wire["totalDuration"] == 2000
    assert wire["timestampedActions"][0]["startTime"] == 100
    assert wire["timestampedActions"][0]["endTime"] == 1100
    assert script.timestamped_actions[0].duration_ms == 1000


def test_content_idea_converts_to_video_idea():
    idea = ContentIdea(title="How to Post", feature="posting", recording_steps=["Tap +"])

    video = idea.to_video_idea()

    assert type(video) is VideoIdea
    assert video.title == "How to Post"
    assert video.recording_steps == ["Tap +"]
