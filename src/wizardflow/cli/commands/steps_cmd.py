"""Steps command: show the flow a scenario builds into."""

import typer
from pydantic import ValidationError

from wizardflow.cli.commands.presets import resolve_scenario
from wizardflow.cli.ui.console import print_error, print_muted, print_steps_table
from wizardflow.config import load_settings
from wizardflow.core.builder import StepBuilder
from wizardflow.models.steps import (
    FlowConfigError,
    PhotoUploadConfig,
    SelectionConfig,
    StepDefinition,
    TextInputConfig,
)


def _config_detail(step: StepDefinition) -> str:
    config = step.config
    match config:
        case PhotoUploadConfig():
            return config.label
        case TextInputConfig():
            return f"{config.min_length}-{config.max_length} chars"
        case SelectionConfig():
            options = ", ".join(option.id for option in config.options)
            default = f" (default {config.default_value})" if config.default_value else ""
            return f"{config.selection_type}: {options}{default}"
        case _:
            return ""


def _detail(step: StepDefinition) -> str:
    detail = _config_detail(step)
    return detail if step.required else f"(optional) {detail}".rstrip()


def _next_label(step: StepDefinition) -> str:
    if step.transition is not None and step.transition.has_decision:
        return "<decision>"
    return step.next or "-"


def steps(
    scenario: str = typer.Argument(..., help="Scenario preset name."),
    preview: bool | None = typer.Option(
        None,
        "--preview/--no-preview",
        help="Include the scenario preview step (defaults to config).",
    ),
    result: bool | None = typer.Option(
        None,
        "--result/--no-result",
        help="Include the result preview step (defaults to config).",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """Build a scenario's flow and print its linked steps."""
    settings = load_settings(config_file)
    scenario_config = resolve_scenario(scenario, config_file)

    try:
        flow = StepBuilder(settings.builder).quick_build(
            scenario_config,
            include_preview=settings.flow.include_preview if preview is None else preview,
            include_result=settings.flow.include_result if result is None else result,
        )
    except (FlowConfigError, ValidationError) as e:
        print_error(f"Scenario '{scenario}' does not build: {e}")
        raise typer.Exit(code=1) from e

    rows = [
        (
            str(index),
            step.id,
            step.type.value,
            _next_label(step),
            _detail(step),
        )
        for index, step in enumerate(flow)
    ]
    print_steps_table(f"Flow for '{scenario}'", rows)
    print_muted(f"{len(flow)} steps")
