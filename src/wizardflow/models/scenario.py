"""Scenario configuration models consumed by the step builder."""

from pydantic import BaseModel, Field, model_validator

from .steps import StepDefinition


class PhotoUploadsConfig(BaseModel):
    """How many photos a scenario needs and how to present each slot."""

    count: int = Field(default=0, ge=0, description="Number of upload slots")
    labels: list[str] = Field(
        default_factory=list, description="Optional per-slot labels, by index"
    )
    show_face_detection: bool = False
    show_name_input: bool = False


class TextInputOptions(BaseModel):
    """Text prompt capability of a scenario."""

    enabled: bool = False
    required: bool = False
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def check_length_bounds(self) -> "TextInputOptions":
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError(
                f"min_length ({self.min_length}) cannot exceed "
                f"max_length ({self.max_length})"
            )
        return self


class StyleSelectionOptions(BaseModel):
    """Visual style picker capability of a scenario."""

    enabled: bool = False
    required: bool = False
    styles: list[str] = Field(default_factory=list, description="Style option ids")


class DurationSelectionOptions(BaseModel):
    """Duration picker capability of a scenario."""

    enabled: bool = False
    required: bool = False
    durations: list[int] | None = Field(
        default=None, description="Offered durations in seconds"
    )
    default_duration: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_durations(self) -> "DurationSelectionOptions":
        if self.durations is not None and any(d <= 0 for d in self.durations):
            raise ValueError("durations must all be positive")
        if (
            self.default_duration is not None
            and self.durations is not None
            and self.default_duration not in self.durations
        ):
            raise ValueError(
                f"default_duration {self.default_duration} is not one of "
                f"{self.durations}"
            )
        return self


class ResolutionSelectionOptions(BaseModel):
    """Output resolution picker capability of a scenario."""

    enabled: bool = False
    required: bool = False
    resolutions: list[str] | None = None
    default_resolution: str | None = None

    @model_validator(mode="after")
    def check_default(self) -> "ResolutionSelectionOptions":
        if (
            self.default_resolution is not None
            and self.resolutions is not None
            and self.default_resolution not in self.resolutions
        ):
            raise ValueError(
                f"default_resolution {self.default_resolution!r} is not one of "
                f"{self.resolutions}"
            )
        return self


class ScenarioConfig(BaseModel):
    """Declarative description of what a feature/scenario asks the user for."""

    photo_uploads: PhotoUploadsConfig | None = None
    text_input: TextInputOptions | None = None
    style_selection: StyleSelectionOptions | None = None
    duration_selection: DurationSelectionOptions | None = None
    resolution_selection: ResolutionSelectionOptions | None = None
    custom_steps: list[StepDefinition] = Field(default_factory=list)

    @property
    def photo_count(self) -> int:
        return self.photo_uploads.count if self.photo_uploads else 0
