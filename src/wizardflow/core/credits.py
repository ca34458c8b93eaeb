"""Credit cost calculation for generation requests.

The pricing policy itself belongs to the host application. This module owns
everything around it: pulling duration and resolution out of whatever the
user has selected so far, falling back to the flow's configured defaults,
invoking the policy, and validating what comes back. Live per-selection
previews and the final pre-generation quote both go through
``CreditCalculator.calculate`` so the two numbers cannot diverge.
"""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from wizardflow.api.base import PricingFunction
from wizardflow.config.settings import CreditSettings, Settings
from wizardflow.models.generation import OutputType
from wizardflow.models.steps import SelectionConfig, SelectionType, StepDefinition

from .extractors import is_number, unwrap_selection

logger = logging.getLogger(__name__)

# "8", "8s"
_DURATION_PATTERN = re.compile(r"(\d+)s?")


def extract_duration(value: Any) -> int | float | None:
    """Extract a positive duration in seconds.

    Accepts a bare positive number, or a string such as ``"8"`` or ``"8s"``,
    either directly or inside a selection wrapper. Returns ``None`` when
    nothing matches or the parsed value is not positive.
    """
    value = unwrap_selection(value)
    if is_number(value):
        return value if value > 0 else None
    if isinstance(value, str):
        match = _DURATION_PATTERN.fullmatch(value.strip())
        if match:
            seconds = int(match.group(1))
            return seconds if seconds > 0 else None
    return None


def extract_resolution(value: Any) -> str | None:
    """Extract a non-empty resolution string, unwrapping a selection wrapper."""
    value = unwrap_selection(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _find_selection_config(
    steps: Iterable[StepDefinition], selection_type: SelectionType
) -> SelectionConfig | None:
    for step in steps:
        if isinstance(step.config, SelectionConfig) and (
            step.config.selection_type == selection_type
        ):
            return step.config
    return None


def _default_option(config: SelectionConfig) -> tuple[str | None, Any]:
    """Return the default option id and the value it resolves to (or None)."""
    default_id = config.default_value
    if isinstance(default_id, list):
        default_id = default_id[0] if default_id else None
    if default_id is None:
        return None, None
    option = config.get_option(default_id)
    return default_id, option.value if option is not None else None


def get_config_default_duration(steps: Iterable[StepDefinition]) -> int | float | None:
    """Default duration configured on the flow's duration selection step.

    The configured default option id is resolved to its option value; if no
    option matches, the id itself is parsed (so ``"10s"`` still means 10).
    """
    config = _find_selection_config(steps, SelectionType.DURATION)
    if config is None:
        return None
    default_id, option_value = _default_option(config)
    if default_id is None:
        return None
    duration = extract_duration(option_value)
    if duration is not None:
        return duration
    return extract_duration(default_id)


def get_config_default_resolution(steps: Iterable[StepDefinition]) -> str | None:
    """Default resolution configured on the flow's resolution selection step."""
    config = _find_selection_config(steps, SelectionType.RESOLUTION)
    if config is None:
        return None
    default_id, option_value = _default_option(config)
    if default_id is None:
        return None
    resolution = extract_resolution(option_value)
    if resolution is not None:
        return resolution
    return extract_resolution(default_id)


@dataclass(frozen=True)
class CreditInputs:
    """Pricing inputs after extraction and defaulting."""

    duration: int | float | None
    resolution: str | None
    output_type: OutputType
    has_image_input: bool


@dataclass(frozen=True)
class CreditQuote:
    """Result of one credit calculation."""

    credits: int
    inputs: CreditInputs
    used_fallback: bool = False

    def format_summary(self) -> str:
        """Format a one-line, human-readable quote."""
        parts = [self.inputs.output_type.value]
        if self.inputs.duration is not None:
            parts.append(f"{self.inputs.duration}s")
        if self.inputs.resolution is not None:
            parts.append(self.inputs.resolution)
        if self.inputs.has_image_input:
            parts.append("image input")
        suffix = " (fallback)" if self.used_fallback else ""
        return f"{self.credits} credits for {', '.join(parts)}{suffix}"


class CreditCalculator:
    """Computes credit costs from the selections a flow has collected.

    Args:
        pricing_fn: Host pricing policy.
        steps: The flow's steps, used to find configured defaults.
        output_type: Output type reported to the pricing policy.
        has_image_input: Default for whether the request carries an image.
        fallback_cost: Cost used when the policy returns an unusable value.
    """

    def __init__(
        self,
        pricing_fn: PricingFunction,
        *,
        steps: Iterable[StepDefinition] = (),
        output_type: OutputType = OutputType.VIDEO,
        has_image_input: bool = False,
        fallback_cost: int = 1,
    ) -> None:
        if fallback_cost < 1:
            raise ValueError(f"fallback_cost must be a positive integer, got {fallback_cost}")
        self.pricing_fn = pricing_fn
        self.steps = list(steps)
        self.output_type = output_type
        self.has_image_input = has_image_input
        self.fallback_cost = fallback_cost

    @classmethod
    def from_settings(
        cls,
        pricing_fn: PricingFunction,
        settings: Settings,
        *,
        steps: Iterable[StepDefinition] = (),
        has_image_input: bool = False,
    ) -> "CreditCalculator":
        return cls(
            pricing_fn,
            steps=steps,
            output_type=settings.credits.output_type,
            has_image_input=has_image_input,
            fallback_cost=settings.credits.fallback_cost,
        )

    def resolve_inputs(
        self,
        selections: Mapping[str, Any] | None = None,
        *,
        has_image_input: bool | None = None,
    ) -> CreditInputs:
        """Extract duration and resolution, falling back to configured defaults."""
        selections = selections or {}
        duration = extract_duration(selections.get(SelectionType.DURATION.value))
        if duration is None:
            duration = get_config_default_duration(self.steps)
        resolution = extract_resolution(selections.get(SelectionType.RESOLUTION.value))
        if resolution is None:
            resolution = get_config_default_resolution(self.steps)
        return CreditInputs(
            duration=duration,
            resolution=resolution,
            output_type=self.output_type,
            has_image_input=(
                self.has_image_input if has_image_input is None else has_image_input
            ),
        )

    def calculate(
        self,
        selections: Mapping[str, Any] | None = None,
        *,
        has_image_input: bool | None = None,
    ) -> CreditQuote:
        """Quote the credit cost for the current selections.

        The pricing result must be a finite number greater than zero; it is
        rounded up to the next integer. Anything else yields the fallback
        cost.
        """
        inputs = self.resolve_inputs(selections, has_image_input=has_image_input)
        raw = self.pricing_fn(
            inputs.duration,
            inputs.resolution,
            inputs.output_type,
            inputs.has_image_input,
        )

        if not is_number(raw) or raw <= 0:
            logger.warning(
                "Pricing returned %r for %s; using fallback cost %d",
                raw,
                inputs,
                self.fallback_cost,
            )
            return CreditQuote(credits=self.fallback_cost, inputs=inputs, used_fallback=True)

        credits = math.ceil(raw)
        logger.debug("Quoted %d credits (raw %r) for %s", credits, raw, inputs)
        return CreditQuote(credits=credits, inputs=inputs)

    def preview(
        self,
        category: str,
        value: Any,
        selections: Mapping[str, Any] | None = None,
        *,
        has_image_input: bool | None = None,
    ) -> CreditQuote:
        """Quote the cost as if ``value`` were selected for ``category``."""
        merged = dict(selections or {})
        merged[category] = value
        return self.calculate(merged, has_image_input=has_image_input)


class TablePricing:
    """Pricing policy driven by the rate table in ``CreditSettings``.

    Videos cost ``credits_per_second`` per second, images a flat
    ``image_credits``; both are scaled by the resolution multiplier. A video
    without a known duration has no price (returns 0).
    """

    def __init__(self, settings: CreditSettings | None = None) -> None:
        self.settings = settings or CreditSettings()

    def __call__(
        self,
        duration: int | float | None,
        resolution: str | None,
        output_type: OutputType,
        has_image_input: bool,
    ) -> float:
        multiplier = self.settings.resolution_multipliers.get(resolution or "", 1.0)
        if output_type == OutputType.IMAGE:
            base = self.settings.image_credits
        elif duration is None:
            return 0.0
        else:
            base = self.settings.credits_per_second * duration
        surcharge = self.settings.image_input_surcharge if has_image_input else 0.0
        return base * multiplier + surcharge
