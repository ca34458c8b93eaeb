"""Core flow logic: building, resolving, pricing and driving wizard flows."""

from .builder import (
    GENERATING_ID,
    RESULT_PREVIEW_ID,
    SCENARIO_PRESETS,
    SCENARIO_PREVIEW_ID,
    StepBuilder,
    get_photo_upload_count,
    get_step,
    link_steps,
)
from .credits import (
    CreditCalculator,
    CreditInputs,
    CreditQuote,
    TablePricing,
    extract_duration,
    extract_resolution,
    get_config_default_duration,
    get_config_default_resolution,
)
from .extractors import (
    extract_number,
    extract_prompt,
    extract_selection,
    extract_string,
    extract_trimmed_string,
)
from .resolver import (
    ResolutionContext,
    resolve_next_step,
    resolve_next_step_skipping,
    resolve_previous_step,
    should_skip,
)
from .session import FlowSession

__all__ = [
    # Step building
    "GENERATING_ID",
    "RESULT_PREVIEW_ID",
    "SCENARIO_PRESETS",
    "SCENARIO_PREVIEW_ID",
    "StepBuilder",
    "get_photo_upload_count",
    "get_step",
    "link_steps",
    # Transitions
    "ResolutionContext",
    "resolve_next_step",
    "resolve_next_step_skipping",
    "resolve_previous_step",
    "should_skip",
    # Value extraction
    "extract_number",
    "extract_prompt",
    "extract_selection",
    "extract_string",
    "extract_trimmed_string",
    # Credits
    "CreditCalculator",
    "CreditInputs",
    "CreditQuote",
    "TablePricing",
    "extract_duration",
    "extract_resolution",
    "get_config_default_duration",
    "get_config_default_resolution",
    # Session
    "FlowSession",
]
