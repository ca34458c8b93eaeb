"""Models exchanged with the host's generation executor."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class OutputType(StrEnum):
    """Kind of content a flow generates."""

    IMAGE = "image"
    VIDEO = "video"


class GenerationRequest(BaseModel):
    """Everything the executor needs to start one generation job.

    Built from a data bag snapshot at the moment generation starts, so
    later edits to the flow do not leak into a job already in flight.
    """

    flow_id: str
    epoch: int = Field(..., ge=1, description="Generation cycle this request belongs to")
    output_type: OutputType
    credits: int = Field(..., gt=0)
    duration: int | float | None = None
    resolution: str | None = None
    text_input: str | None = None
    visual_style: str | None = None
    partner_ids: list[str] = Field(default_factory=list)
    selections: dict[str, Any] = Field(default_factory=dict)
