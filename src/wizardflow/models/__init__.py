"""Data models for the wizard flow engine."""

from .generation import GenerationRequest, OutputType
from .scenario import (
    DurationSelectionOptions,
    PhotoUploadsConfig,
    ResolutionSelectionOptions,
    ScenarioConfig,
    StyleSelectionOptions,
    TextInputOptions,
)
from .steps import (
    AuthGateConfig,
    CreditGateConfig,
    CustomConfig,
    DecisionContext,
    FlowConfigError,
    NextStepDecision,
    PhotoUploadConfig,
    PreviewConfig,
    SelectionConfig,
    SelectionOption,
    SelectionType,
    SkipPredicate,
    StepConfig,
    StepDefinition,
    StepTransition,
    StepType,
    TextInputConfig,
    validate_steps,
)

__all__ = [
    # Step models
    "AuthGateConfig",
    "CreditGateConfig",
    "CustomConfig",
    "DecisionContext",
    "FlowConfigError",
    "NextStepDecision",
    "PhotoUploadConfig",
    "PreviewConfig",
    "SelectionConfig",
    "SelectionOption",
    "SelectionType",
    "SkipPredicate",
    "StepConfig",
    "StepDefinition",
    "StepTransition",
    "StepType",
    "TextInputConfig",
    "validate_steps",
    # Scenario models
    "DurationSelectionOptions",
    "PhotoUploadsConfig",
    "ResolutionSelectionOptions",
    "ScenarioConfig",
    "StyleSelectionOptions",
    "TextInputOptions",
    # Generation
    "GenerationRequest",
    "OutputType",
]
