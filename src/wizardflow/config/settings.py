"""Pydantic settings models for wizard flow configuration."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wizardflow.models.generation import OutputType


class BuilderSettings(BaseSettings):
    """Defaults applied by the step builder when a scenario leaves them out."""

    model_config = SettingsConfigDict(extra="ignore")

    photo_label_template: str = Field(
        default="Photo {number}",
        description="Label for upload slots without an explicit label ({number} is 1-based)",
    )
    text_min_length: int = Field(
        default=0,
        ge=0,
        description="Minimum prompt length when the scenario does not set one",
    )
    text_max_length: int = Field(
        default=500,
        ge=1,
        description="Maximum prompt length when the scenario does not set one",
    )
    durations: list[int] = Field(
        default_factory=lambda: [4, 8, 12],
        description="Offered durations in seconds when the scenario does not list any",
    )
    resolutions: list[str] = Field(
        default_factory=lambda: ["720p", "1080p"],
        description="Offered resolutions when the scenario does not list any",
    )

    @field_validator("durations")
    @classmethod
    def validate_durations(cls, v: list[int]) -> list[int]:
        if not v or any(d <= 0 for d in v):
            raise ValueError("durations must be a non-empty list of positive seconds")
        return v


class CreditSettings(BaseSettings):
    """Credit pricing settings."""

    model_config = SettingsConfigDict(extra="ignore")

    fallback_cost: int = Field(
        default=1,
        ge=1,
        description="Cost used when the pricing function returns an unusable value",
    )
    output_type: OutputType = Field(
        default=OutputType.VIDEO,
        description="Output type passed to the pricing function",
    )
    credits_per_second: float = Field(
        default=1.0,
        gt=0.0,
        description="Table pricing: credits per second of generated video",
    )
    image_credits: float = Field(
        default=2.0,
        gt=0.0,
        description="Table pricing: flat credits for one generated image",
    )
    image_input_surcharge: float = Field(
        default=0.0,
        ge=0.0,
        description="Table pricing: extra credits when the request includes an image",
    )
    resolution_multipliers: dict[str, float] = Field(
        default_factory=lambda: {"480p": 0.5, "720p": 1.0, "1080p": 1.5, "4K": 3.0},
        description="Table pricing: multiplier per output resolution",
    )


class FlowSettings(BaseSettings):
    """Flow session behaviour."""

    model_config = SettingsConfigDict(extra="ignore")

    flow_id: str = Field(
        default="default",
        min_length=1,
        description="Identifier attached to generation requests",
    )
    include_preview: bool = Field(
        default=True,
        description="Prepend a scenario preview step in quick builds",
    )
    include_result: bool = Field(
        default=True,
        description="Append a result preview step after generating in quick builds",
    )


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="WIZARDFLOW_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    builder: BuilderSettings = Field(default_factory=BuilderSettings)
    credits: CreditSettings = Field(default_factory=CreditSettings)
    flow: FlowSettings = Field(default_factory=FlowSettings)

    @property
    def fallback_cost(self) -> int:
        """Convenience accessor for the static fallback cost."""
        return self.credits.fallback_cost
