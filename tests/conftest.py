"""Pytest configuration and fixtures for wizardflow tests."""

import pytest

from wizardflow.core.builder import StepBuilder
from wizardflow.models import (
    DurationSelectionOptions,
    PhotoUploadsConfig,
    ResolutionSelectionOptions,
    ScenarioConfig,
    StepDefinition,
    StepType,
    TextInputOptions,
)
from wizardflow.state import FlowStore


@pytest.fixture
def linear_steps() -> list[StepDefinition]:
    """Five config-free steps A..E with no explicit transitions."""
    return [StepDefinition(id=step_id, type=StepType.SCENARIO_SELECTION) for step_id in "ABCDE"]


@pytest.fixture
def store(linear_steps: list[StepDefinition]) -> FlowStore:
    return FlowStore(linear_steps)


@pytest.fixture
def builder() -> StepBuilder:
    return StepBuilder()


@pytest.fixture
def video_scenario() -> ScenarioConfig:
    """One photo, a prompt, and duration/resolution pickers with defaults."""
    return ScenarioConfig(
        photo_uploads=PhotoUploadsConfig(count=1, labels=["Your Photo"]),
        text_input=TextInputOptions(enabled=True, required=True),
        duration_selection=DurationSelectionOptions(
            enabled=True, required=True, durations=[5, 10], default_duration=10
        ),
        resolution_selection=ResolutionSelectionOptions(
            enabled=True, resolutions=["720p", "1080p"], default_resolution="720p"
        ),
    )
