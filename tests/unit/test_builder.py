"""Unit tests for the dynamic step builder."""

import pytest

from wizardflow.config.settings import BuilderSettings
from wizardflow.core.builder import (
    GENERATING_ID,
    RESULT_PREVIEW_ID,
    SCENARIO_PRESETS,
    SCENARIO_PREVIEW_ID,
    StepBuilder,
    get_photo_upload_count,
    get_step,
    link_steps,
)
from wizardflow.models import (
    DurationSelectionOptions,
    FlowConfigError,
    PhotoUploadsConfig,
    ScenarioConfig,
    SelectionConfig,
    SelectionType,
    StepDefinition,
    StepTransition,
    StepType,
    StyleSelectionOptions,
    TextInputConfig,
    TextInputOptions,
)


def _ids(steps: list[StepDefinition]) -> list[str]:
    return [step.id for step in steps]


class TestBuild:
    def test_photo_slots_and_default_labels(self, builder: StepBuilder) -> None:
        scenario = ScenarioConfig(
            photo_uploads=PhotoUploadsConfig(count=3, labels=["Bride", ""]),
        )
        steps = builder.build(scenario)
        assert _ids(steps) == ["PHOTO_UPLOAD_0", "PHOTO_UPLOAD_1", "PHOTO_UPLOAD_2"]
        assert [step.label for step in steps] == ["Bride", "Photo 2", "Photo 3"]
        assert all(step.type == StepType.PARTNER_UPLOAD for step in steps)

    def test_zero_photos_yields_no_upload_steps(self, builder: StepBuilder) -> None:
        scenario = ScenarioConfig(
            photo_uploads=PhotoUploadsConfig(count=0),
            text_input=TextInputOptions(enabled=True),
        )
        assert _ids(builder.build(scenario)) == ["TEXT_INPUT"]

    def test_capability_order(self, builder: StepBuilder, video_scenario: ScenarioConfig) -> None:
        assert _ids(builder.build(video_scenario)) == [
            "PHOTO_UPLOAD_0",
            "TEXT_INPUT",
            "DURATION_SELECTION",
            "RESOLUTION_SELECTION",
        ]

    def test_disabled_capabilities_are_left_out(self, builder: StepBuilder) -> None:
        scenario = ScenarioConfig(
            text_input=TextInputOptions(enabled=False),
            style_selection=StyleSelectionOptions(enabled=True),
            duration_selection=DurationSelectionOptions(enabled=False),
        )
        assert _ids(builder.build(scenario)) == ["STYLE_SELECTION"]

    def test_text_defaults_and_overrides(self, builder: StepBuilder) -> None:
        default = builder.build(ScenarioConfig(text_input=TextInputOptions(enabled=True)))[0]
        assert isinstance(default.config, TextInputConfig)
        assert (default.config.min_length, default.config.max_length) == (0, 500)

        custom = builder.build(
            ScenarioConfig(text_input=TextInputOptions(enabled=True, min_length=10, max_length=80))
        )[0]
        assert (custom.config.min_length, custom.config.max_length) == (10, 80)

    def test_required_flag_follows_options(self, builder: StepBuilder) -> None:
        steps = builder.build(
            ScenarioConfig(
                text_input=TextInputOptions(enabled=True, required=False),
                style_selection=StyleSelectionOptions(enabled=True, required=True),
            )
        )
        assert [step.required for step in steps] == [False, True]

    def test_default_durations(self, builder: StepBuilder) -> None:
        step = builder.build(
            ScenarioConfig(duration_selection=DurationSelectionOptions(enabled=True))
        )[0]
        assert isinstance(step.config, SelectionConfig)
        assert step.config.selection_type == SelectionType.DURATION
        assert [option.value for option in step.config.options] == [4, 8, 12]
        assert [option.id for option in step.config.options] == ["4s", "8s", "12s"]
        assert step.config.default_value is None

    def test_duration_default_is_option_id(self, builder: StepBuilder, video_scenario: ScenarioConfig) -> None:
        step = get_step(builder.build(video_scenario), "DURATION_SELECTION")
        assert step.config.default_value == "10s"

    def test_builder_settings_supply_defaults(self) -> None:
        builder = StepBuilder(
            BuilderSettings(photo_label_template="Person {number}", durations=[3], resolutions=["4K"])
        )
        steps = builder.build(
            ScenarioConfig.model_validate(
                {
                    "photo_uploads": {"count": 1},
                    "duration_selection": {"enabled": True},
                    "resolution_selection": {"enabled": True},
                }
            )
        )
        assert steps[0].label == "Person 1"
        assert [o.value for o in steps[1].config.options] == [3]
        assert [o.value for o in steps[2].config.options] == ["4K"]

    def test_custom_steps_appended(self, builder: StepBuilder) -> None:
        extra = StepDefinition(id="CONSENT", type=StepType.SCENARIO_SELECTION)
        scenario = ScenarioConfig(
            style_selection=StyleSelectionOptions(enabled=True, styles=["anime"]),
            custom_steps=[extra],
        )
        assert _ids(builder.build(scenario)) == ["STYLE_SELECTION", "CONSENT"]

    def test_build_leaves_steps_unlinked(self, builder: StepBuilder, video_scenario: ScenarioConfig) -> None:
        assert all(step.next is None for step in builder.build(video_scenario))


class TestLinking:
    def test_links_each_step_to_its_successor(self, linear_steps: list[StepDefinition]) -> None:
        linked = link_steps(linear_steps)
        assert [step.next for step in linked] == ["B", "C", "D", "E", None]

    def test_explicit_next_preserved(self) -> None:
        decide = lambda ctx: "C"  # noqa: E731
        steps = [
            StepDefinition(id="A", type=StepType.GENERATING, transition=StepTransition(next=decide)),
            StepDefinition(id="B", type=StepType.GENERATING, transition=StepTransition(next="A")),
            StepDefinition(id="C", type=StepType.GENERATING),
        ]
        linked = link_steps(steps)
        assert linked[0].next is decide
        assert linked[1].next == "A"
        assert linked[2].next is None

    def test_build_linked_validates(self, builder: StepBuilder) -> None:
        with pytest.raises(FlowConfigError):
            builder.build_linked(ScenarioConfig())


class TestFlowSteps:
    def test_quick_build_wraps_with_preview_generating_and_result(
        self, builder: StepBuilder, video_scenario: ScenarioConfig
    ) -> None:
        steps = builder.quick_build(video_scenario)
        ids = _ids(steps)
        assert ids[0] == SCENARIO_PREVIEW_ID
        assert ids[-2:] == [GENERATING_ID, RESULT_PREVIEW_ID]
        assert [step.next for step in steps[:-1]] == ids[1:]
        assert steps[-1].next is None

    def test_quick_build_without_result(self, builder: StepBuilder, video_scenario: ScenarioConfig) -> None:
        steps = builder.quick_build(video_scenario, include_result=False)
        assert _ids(steps)[-1] == GENERATING_ID

    def test_quick_build_without_preview(self, builder: StepBuilder, video_scenario: ScenarioConfig) -> None:
        steps = builder.quick_build(video_scenario, include_preview=False)
        assert _ids(steps)[0] == "PHOTO_UPLOAD_0"

    def test_build_flow_steps_defaults(self, builder: StepBuilder, linear_steps: list[StepDefinition]) -> None:
        steps = builder.build_flow_steps(linear_steps)
        assert _ids(steps) == list("ABCDE")

    def test_build_flow_steps_rejects_clashing_ids(self, builder: StepBuilder) -> None:
        clash = [StepDefinition(id=GENERATING_ID, type=StepType.GENERATING)]
        with pytest.raises(FlowConfigError, match="Duplicate"):
            builder.build_flow_steps(clash, include_generating=True)

    def test_custom_step_may_link_to_generating(self, builder: StepBuilder) -> None:
        scenario = ScenarioConfig(
            custom_steps=[
                StepDefinition(
                    id="SHORTCUT",
                    type=StepType.SCENARIO_SELECTION,
                    transition=StepTransition(next=GENERATING_ID),
                ),
            ],
        )
        steps = builder.quick_build(scenario)
        assert get_step(steps, "SHORTCUT").next == GENERATING_ID


class TestHelpers:
    def test_photo_upload_count(self, builder: StepBuilder) -> None:
        steps = builder.quick_build(SCENARIO_PRESETS["romantic-kiss"])
        assert get_photo_upload_count(steps) == 2

    def test_get_step_missing(self, linear_steps: list[StepDefinition]) -> None:
        assert get_step(linear_steps, "Z") is None

    @pytest.mark.parametrize("name", sorted(SCENARIO_PRESETS))
    def test_every_preset_builds(self, builder: StepBuilder, name: str) -> None:
        steps = builder.quick_build(SCENARIO_PRESETS[name])
        assert _ids(steps)[0] == SCENARIO_PREVIEW_ID
        assert _ids(steps)[-1] == RESULT_PREVIEW_ID
