import pytest

from screenwright.models import PlannerRequest, VideoIdea

from .fakes import FakePort


@pytest.fixture
def port():
    return FakePort()


@pytest.fixture
def idea():
    return VideoIdea(
        title="Sending a Message",
        description="Send your first text message",
        feature="messaging",
        setup_steps=[],
        recording_steps=["Tap Messages", "Tap compose", "Type a number"],
    )


@pytest.fixture
def plan_request(idea):
    return PlannerRequest(device_id="SIM-1", idea=idea)
