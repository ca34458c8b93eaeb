"""State models for a single in-memory flow session."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class GenerationStatus(StrEnum):
    """Lifecycle of the asynchronous generation job, in order."""

    IDLE = "idle"
    PREPARING = "preparing"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


# Statuses in which the executor may still report progress, a result or an error.
ACTIVE_STATUSES = frozenset({GenerationStatus.PREPARING, GenerationStatus.GENERATING})


class UploadedImage(BaseModel):
    """An image the user picked for one partner slot."""

    uri: str = Field(..., min_length=1)
    base64: str = Field(default="", description="Encoded image payload")
    mime_type: str = Field(default="image/jpeg")


class DataBag(BaseModel):
    """Free-form user input accumulated across the steps of a flow."""

    partners: dict[str, UploadedImage | None] = Field(default_factory=dict)
    partner_names: dict[str, str] = Field(default_factory=dict)
    text_input: str | None = None
    visual_style: str | None = None
    selected_features: dict[str, list[str]] = Field(default_factory=dict)
    custom_data: dict[str, Any] = Field(default_factory=dict)
    selected_category: Any = None
    selected_scenario: Any = None

    @property
    def has_image_input(self) -> bool:
        """Whether at least one partner slot holds an image."""
        return any(image is not None for image in self.partners.values())


class FlowState(BaseModel):
    """Complete state of one flow session.

    Only ``FlowStore`` mutates this model; everyone else sees snapshots.
    """

    current_step_id: str = ""
    current_step_index: int = Field(default=0, ge=0)
    completed_steps: list[str] = Field(default_factory=list)
    data_bag: DataBag = Field(default_factory=DataBag)

    generation_status: GenerationStatus = Field(default=GenerationStatus.IDLE)
    generation_progress: int = Field(default=0, ge=0, le=100)
    generation_result: Any = None
    generation_error: str | None = None
    generation_epoch: int = Field(
        default=0, ge=0, description="Increments on every new generation cycle or reset"
    )

    def is_generating(self) -> bool:
        """Check if a generation cycle is in flight."""
        return self.generation_status in ACTIVE_STATUSES

    def is_step_completed(self, step_id: str) -> bool:
        return step_id in self.completed_steps
