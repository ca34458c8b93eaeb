"""Step definition models for wizard flows.

A flow is an ordered list of ``StepDefinition`` objects. Each step carries a
``StepType`` and a config variant tagged by ``kind``; the pairing between the
two is checked when the step is constructed so a malformed flow fails before
any user ever sees it.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from wizardflow.state.models import DataBag


class StepType(StrEnum):
    """Kinds of steps a flow can contain."""

    # Gates block progression without collecting data
    AUTH_GATE = "auth_gate"
    CREDIT_GATE = "credit_gate"
    # Content steps
    CATEGORY_SELECTION = "category_selection"
    SCENARIO_SELECTION = "scenario_selection"
    SCENARIO_PREVIEW = "scenario_preview"
    PARTNER_UPLOAD = "partner_upload"
    TEXT_INPUT = "text_input"
    FEATURE_SELECTION = "feature_selection"
    # Generation steps
    GENERATING = "generating"
    RESULT_PREVIEW = "result_preview"
    CUSTOM = "custom"


class SelectionType(StrEnum):
    """What a selection step asks the user to pick."""

    STYLE = "style"
    DURATION = "duration"
    RESOLUTION = "resolution"
    ASPECT_RATIO = "aspect_ratio"
    QUALITY = "quality"
    CUSTOM = "custom"


class PhotoUploadConfig(BaseModel):
    """Configuration for a single photo upload slot."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["photo_upload"] = "photo_upload"
    label: str = Field(..., min_length=1, description="Slot label, e.g. 'Your Photo'")
    title_key: str | None = None
    subtitle_key: str | None = None
    show_face_detection: bool = False
    show_name_input: bool = False
    show_photo_tips: bool = True
    max_file_size_mb: float | None = Field(default=None, gt=0)


class TextInputConfig(BaseModel):
    """Configuration for a free-text prompt step."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text_input"] = "text_input"
    min_length: int = Field(default=0, ge=0)
    max_length: int = Field(default=500, ge=1)
    multiline: bool = False
    title_key: str | None = None
    placeholder_key: str | None = None

    @model_validator(mode="after")
    def check_length_bounds(self) -> "TextInputConfig":
        if self.min_length > self.max_length:
            raise ValueError(
                f"min_length ({self.min_length}) cannot exceed "
                f"max_length ({self.max_length})"
            )
        return self


class SelectionOption(BaseModel):
    """One choice offered by a selection step."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str
    icon: str | None = None
    value: Any = None


class SelectionConfig(BaseModel):
    """Configuration for style, duration, resolution and similar pickers."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["selection"] = "selection"
    selection_type: SelectionType
    options: list[SelectionOption] = Field(default_factory=list)
    multi_select: bool = False
    default_value: str | list[str] | None = Field(
        default=None, description="Option id (or ids) preselected for the user"
    )
    title_key: str | None = None

    def get_option(self, option_id: str) -> SelectionOption | None:
        """Look up an option by its id."""
        for option in self.options:
            if option.id == option_id:
                return option
        return None


class PreviewConfig(BaseModel):
    """Configuration for scenario and result preview steps."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["preview"] = "preview"
    preview_type: Literal["scenario", "settings", "result", "custom"] = "scenario"
    show_continue_button: bool = True


class AuthGateConfig(BaseModel):
    """Configuration for a step that requires an authenticated user."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["auth_gate"] = "auth_gate"
    allow_anonymous: bool = False
    message_key: str | None = None


class CreditGateConfig(BaseModel):
    """Configuration for a step that requires a credit balance."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["credit_gate"] = "credit_gate"
    required_credits: int = Field(..., ge=0)
    message_key: str | None = None


class CustomConfig(BaseModel):
    """Opaque configuration for host-defined steps."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    data: dict[str, Any] = Field(default_factory=dict)


StepConfig = Annotated[
    PhotoUploadConfig
    | TextInputConfig
    | SelectionConfig
    | PreviewConfig
    | AuthGateConfig
    | CreditGateConfig
    | CustomConfig,
    Field(discriminator="kind"),
]

# Allowed config kinds per step type, and whether a config is mandatory.
STEP_CONFIG_RULES: dict[StepType, tuple[frozenset[str], bool]] = {
    StepType.AUTH_GATE: (frozenset({"auth_gate"}), False),
    StepType.CREDIT_GATE: (frozenset({"credit_gate"}), True),
    StepType.CATEGORY_SELECTION: (frozenset({"selection"}), False),
    StepType.SCENARIO_SELECTION: (frozenset({"selection"}), False),
    StepType.SCENARIO_PREVIEW: (frozenset({"preview"}), False),
    StepType.PARTNER_UPLOAD: (frozenset({"photo_upload"}), True),
    StepType.TEXT_INPUT: (frozenset({"text_input"}), True),
    StepType.FEATURE_SELECTION: (frozenset({"selection"}), True),
    StepType.GENERATING: (frozenset(), False),
    StepType.RESULT_PREVIEW: (frozenset({"preview"}), False),
    StepType.CUSTOM: (
        frozenset(
            {
                "photo_upload",
                "text_input",
                "selection",
                "preview",
                "auth_gate",
                "credit_gate",
                "custom",
            }
        ),
        False,
    ),
}


@dataclass(frozen=True)
class DecisionContext:
    """Snapshot handed to transition decisions and skip predicates."""

    data_bag: "DataBag"
    current_step_id: str
    completed_steps: tuple[str, ...] = field(default_factory=tuple)


NextStepDecision = Callable[[DecisionContext], str | None]
SkipPredicate = Callable[[DecisionContext], bool]


class StepTransition(BaseModel):
    """Navigation rules attached to a step.

    ``next`` is either a literal step id or a pure decision function that
    returns the id to go to (or ``None`` for no forward transition).
    """

    model_config = ConfigDict(frozen=True)

    next: str | NextStepDecision | None = None
    back: str | None = None
    skip_if: SkipPredicate | None = None

    @property
    def has_decision(self) -> bool:
        return callable(self.next)


class StepDefinition(BaseModel):
    """A single step of a flow."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique id within the flow")
    type: StepType
    required: bool = True
    config: StepConfig | None = None
    transition: StepTransition | None = None

    @model_validator(mode="after")
    def check_config_matches_type(self) -> "StepDefinition":
        allowed, mandatory = STEP_CONFIG_RULES[self.type]
        if self.config is None:
            if mandatory:
                raise ValueError(
                    f"Step '{self.id}' of type '{self.type}' requires a config"
                )
            return self
        if self.config.kind not in allowed:
            raise ValueError(
                f"Step '{self.id}' of type '{self.type}' cannot use a "
                f"'{self.config.kind}' config"
            )
        return self

    @property
    def next(self) -> str | NextStepDecision | None:
        """Forward transition, if one is set."""
        return self.transition.next if self.transition else None

    @property
    def back(self) -> str | None:
        return self.transition.back if self.transition else None

    @property
    def skip_if(self) -> SkipPredicate | None:
        return self.transition.skip_if if self.transition else None

    @property
    def label(self) -> str | None:
        """Display label for upload steps."""
        match self.config:
            case PhotoUploadConfig(label=label):
                return label
            case _:
                return None

    @property
    def selection_type(self) -> SelectionType | None:
        match self.config:
            case SelectionConfig(selection_type=selection_type):
                return selection_type
            case _:
                return None

    def with_next(self, next_step: str | NextStepDecision) -> "StepDefinition":
        """Return a copy of this step with its forward transition replaced."""
        transition = self.transition or StepTransition()
        return self.model_copy(
            update={"transition": transition.model_copy(update={"next": next_step})}
        )


class FlowConfigError(ValueError):
    """Raised when a step list cannot form a valid flow."""


def validate_steps(steps: Sequence[StepDefinition]) -> None:
    """Check flow-level invariants a single step cannot check on its own.

    Raises:
        FlowConfigError: If the list is empty, contains duplicate ids, or a
            literal ``next``/``back`` points at an id not in the list.
    """
    if not steps:
        raise FlowConfigError("A flow needs at least one step")

    seen: set[str] = set()
    for step in steps:
        if step.id in seen:
            raise FlowConfigError(f"Duplicate step id: {step.id!r}")
        seen.add(step.id)

    for step in steps:
        if isinstance(step.next, str) and step.next not in seen:
            raise FlowConfigError(
                f"Step {step.id!r} links forward to unknown step {step.next!r}"
            )
        if step.back is not None and step.back not in seen:
            raise FlowConfigError(
                f"Step {step.id!r} links back to unknown step {step.back!r}"
            )
