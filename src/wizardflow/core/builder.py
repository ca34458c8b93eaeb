"""Dynamic step builder.

Turns a declarative ``ScenarioConfig`` into a concrete, ordered list of
``StepDefinition`` objects, then links each step to its successor so the
transition resolver never has to guess.
"""

import logging
from collections.abc import Iterable, Sequence

from wizardflow.config.settings import BuilderSettings
from wizardflow.models.scenario import (
    DurationSelectionOptions,
    PhotoUploadsConfig,
    ResolutionSelectionOptions,
    ScenarioConfig,
    StyleSelectionOptions,
    TextInputOptions,
)
from wizardflow.models.steps import (
    PhotoUploadConfig,
    PreviewConfig,
    SelectionConfig,
    SelectionOption,
    SelectionType,
    StepDefinition,
    StepType,
    TextInputConfig,
    validate_steps,
)

logger = logging.getLogger(__name__)

PHOTO_UPLOAD_ID = "PHOTO_UPLOAD_{index}"
TEXT_INPUT_ID = "TEXT_INPUT"
STYLE_SELECTION_ID = "STYLE_SELECTION"
DURATION_SELECTION_ID = "DURATION_SELECTION"
RESOLUTION_SELECTION_ID = "RESOLUTION_SELECTION"
SCENARIO_PREVIEW_ID = "SCENARIO_PREVIEW"
GENERATING_ID = "GENERATING"
RESULT_PREVIEW_ID = "RESULT_PREVIEW"


# ── Built-in scenarios ──────────────────────────────────────────────────────
SCENARIO_PRESETS: dict[str, ScenarioConfig] = {
    # Couple scenarios (2 photos)
    "romantic-kiss": ScenarioConfig(
        photo_uploads=PhotoUploadsConfig(
            count=2,
            labels=["First Partner", "Second Partner"],
            show_face_detection=True,
        ),
    ),
    "couple-hug": ScenarioConfig(
        photo_uploads=PhotoUploadsConfig(
            count=2,
            labels=["Partner A", "Partner B"],
            show_face_detection=True,
        ),
    ),
    # Single photo
    "image-to-video": ScenarioConfig(
        photo_uploads=PhotoUploadsConfig(count=1, labels=["Your Photo"]),
        style_selection=StyleSelectionOptions(enabled=True, required=True),
        duration_selection=DurationSelectionOptions(enabled=True, required=True),
    ),
    # Text only
    "text-to-video": ScenarioConfig(
        text_input=TextInputOptions(
            enabled=True, required=True, min_length=10, max_length=500
        ),
        style_selection=StyleSelectionOptions(enabled=True, required=True),
        duration_selection=DurationSelectionOptions(enabled=True, required=True),
    ),
    # Optional prompt on top of a base image
    "advanced-generation": ScenarioConfig(
        photo_uploads=PhotoUploadsConfig(count=1, labels=["Base Image"]),
        text_input=TextInputOptions(enabled=True, required=False),
        style_selection=StyleSelectionOptions(enabled=True, required=True),
    ),
}


def link_steps(steps: Sequence[StepDefinition]) -> list[StepDefinition]:
    """Give every step without an explicit ``next`` a link to its successor.

    The terminal step is left without a forward link. Steps that already
    carry a literal id or a decision function are returned unchanged.
    """
    linked: list[StepDefinition] = []
    for index, step in enumerate(steps):
        if step.next is None and index < len(steps) - 1:
            step = step.with_next(steps[index + 1].id)
        linked.append(step)
    return linked


def get_step(steps: Iterable[StepDefinition], step_id: str) -> StepDefinition | None:
    """Find a step by id."""
    for step in steps:
        if step.id == step_id:
            return step
    return None


def get_photo_upload_count(steps: Iterable[StepDefinition]) -> int:
    """Count the photo upload slots in a step list."""
    return sum(1 for step in steps if step.type == StepType.PARTNER_UPLOAD)


class StepBuilder:
    """Builds flow step lists from scenario configuration.

    This is the only place scenario capabilities are turned into steps;
    defaults for anything a scenario leaves out come from
    ``BuilderSettings``.
    """

    def __init__(self, settings: BuilderSettings | None = None) -> None:
        self.settings = settings or BuilderSettings()

    def build(self, scenario: ScenarioConfig) -> list[StepDefinition]:
        """Build the data-collection steps for a scenario, unlinked.

        Photo uploads come first, then text, style, duration and resolution
        steps for each enabled capability, then any custom steps.
        """
        steps: list[StepDefinition] = []

        if scenario.photo_uploads is not None:
            steps.extend(self._photo_upload_steps(scenario.photo_uploads))
        if scenario.text_input is not None and scenario.text_input.enabled:
            steps.append(self._text_input_step(scenario.text_input))
        if scenario.style_selection is not None and scenario.style_selection.enabled:
            steps.append(self._style_step(scenario.style_selection))
        if scenario.duration_selection is not None and scenario.duration_selection.enabled:
            steps.append(self._duration_step(scenario.duration_selection))
        if (
            scenario.resolution_selection is not None
            and scenario.resolution_selection.enabled
        ):
            steps.append(self._resolution_step(scenario.resolution_selection))

        steps.extend(scenario.custom_steps)

        logger.debug(
            "Built %d steps: %s", len(steps), ", ".join(step.id for step in steps)
        )
        return steps

    def build_linked(self, scenario: ScenarioConfig) -> list[StepDefinition]:
        """Build a scenario's steps and run the linking pass.

        Raises:
            FlowConfigError: If the scenario enables nothing or the custom
                steps clash with the generated ones.
        """
        linked = link_steps(self.build(scenario))
        validate_steps(linked)
        return linked

    def build_flow_steps(
        self,
        steps: Sequence[StepDefinition],
        *,
        include_preview: bool = False,
        include_generating: bool = False,
        include_result: bool = True,
    ) -> list[StepDefinition]:
        """Wrap data-collection steps with the generic flow steps and link them.

        Args:
            steps: Data-collection steps, usually from ``build``.
            include_preview: Prepend a scenario preview step.
            include_generating: Append a generating step.
            include_result: Append a result preview after the generating
                step. Ignored when ``include_generating`` is False.

        Returns:
            Linked, validated step list.

        Raises:
            FlowConfigError: If the resulting list is empty or inconsistent.
        """
        flow: list[StepDefinition] = []
        if include_preview:
            flow.append(
                StepDefinition(
                    id=SCENARIO_PREVIEW_ID,
                    type=StepType.SCENARIO_PREVIEW,
                    config=PreviewConfig(preview_type="scenario"),
                )
            )
        flow.extend(steps)
        if include_generating:
            flow.append(StepDefinition(id=GENERATING_ID, type=StepType.GENERATING))
            if include_result:
                flow.append(
                    StepDefinition(
                        id=RESULT_PREVIEW_ID,
                        type=StepType.RESULT_PREVIEW,
                        config=PreviewConfig(preview_type="result"),
                    )
                )

        linked = link_steps(flow)
        validate_steps(linked)
        return linked

    def quick_build(
        self,
        scenario: ScenarioConfig,
        *,
        include_preview: bool = True,
        include_result: bool = True,
    ) -> list[StepDefinition]:
        """Build a complete, ready-to-run flow for a scenario.

        Prepends the scenario preview, appends the generating step (and the
        result preview unless disabled) and links everything.
        """
        return self.build_flow_steps(
            self.build(scenario),
            include_preview=include_preview,
            include_generating=True,
            include_result=include_result,
        )

    # ------------------------------------------------------------------
    # Per-capability step factories
    # ------------------------------------------------------------------

    def _photo_upload_steps(self, config: PhotoUploadsConfig) -> list[StepDefinition]:
        steps = []
        for index in range(config.count):
            label = (
                config.labels[index]
                if index < len(config.labels) and config.labels[index]
                else self.settings.photo_label_template.format(number=index + 1)
            )
            steps.append(
                StepDefinition(
                    id=PHOTO_UPLOAD_ID.format(index=index),
                    type=StepType.PARTNER_UPLOAD,
                    required=True,
                    config=PhotoUploadConfig(
                        label=label,
                        show_face_detection=config.show_face_detection,
                        show_name_input=config.show_name_input,
                        show_photo_tips=True,
                    ),
                )
            )
        return steps

    def _text_input_step(self, options: TextInputOptions) -> StepDefinition:
        min_length = (
            options.min_length
            if options.min_length is not None
            else self.settings.text_min_length
        )
        max_length = (
            options.max_length
            if options.max_length is not None
            else self.settings.text_max_length
        )
        return StepDefinition(
            id=TEXT_INPUT_ID,
            type=StepType.TEXT_INPUT,
            required=options.required,
            config=TextInputConfig(min_length=min_length, max_length=max_length),
        )

    def _style_step(self, options: StyleSelectionOptions) -> StepDefinition:
        return StepDefinition(
            id=STYLE_SELECTION_ID,
            type=StepType.FEATURE_SELECTION,
            required=options.required,
            config=SelectionConfig(
                selection_type=SelectionType.STYLE,
                options=[
                    SelectionOption(id=style, label=style, value=style)
                    for style in options.styles
                ],
            ),
        )

    def _duration_step(self, options: DurationSelectionOptions) -> StepDefinition:
        durations = options.durations or self.settings.durations
        default = options.default_duration
        return StepDefinition(
            id=DURATION_SELECTION_ID,
            type=StepType.FEATURE_SELECTION,
            required=options.required,
            config=SelectionConfig(
                selection_type=SelectionType.DURATION,
                options=[
                    SelectionOption(id=f"{d}s", label=f"{d} seconds", value=d)
                    for d in durations
                ],
                default_value=f"{default}s" if default is not None else None,
            ),
        )

    def _resolution_step(self, options: ResolutionSelectionOptions) -> StepDefinition:
        resolutions = options.resolutions or self.settings.resolutions
        return StepDefinition(
            id=RESOLUTION_SELECTION_ID,
            type=StepType.FEATURE_SELECTION,
            required=options.required,
            config=SelectionConfig(
                selection_type=SelectionType.RESOLUTION,
                options=[
                    SelectionOption(id=r, label=r, value=r) for r in resolutions
                ],
                default_value=options.default_resolution,
            ),
        )
