"""Credits command: quote a scenario with the configured rate table."""

from typing import Any

import typer
from pydantic import ValidationError

from wizardflow.cli.commands.presets import resolve_scenario
from wizardflow.cli.ui.console import (
    console,
    print_error,
    print_header,
    print_key_value_table,
    print_warning,
)
from wizardflow.config import load_settings
from wizardflow.core.builder import StepBuilder
from wizardflow.core.credits import CreditCalculator, TablePricing
from wizardflow.core.extractors import SELECTION_KEY
from wizardflow.models.steps import FlowConfigError, SelectionType


def credits(
    scenario: str = typer.Argument(..., help="Scenario preset name."),
    duration: str | None = typer.Option(
        None,
        "--duration",
        "-d",
        help="Selected duration, e.g. 8 or 8s. Defaults to the scenario default.",
    ),
    resolution: str | None = typer.Option(
        None,
        "--resolution",
        "-r",
        help="Selected resolution, e.g. 1080p. Defaults to the scenario default.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """Quote the credit cost of generating with a scenario.

    Pricing uses the rate table from the ``credits`` config section.
    Selections left out fall back to the defaults configured on the
    scenario's selection steps.
    """
    settings = load_settings(config_file)
    scenario_config = resolve_scenario(scenario, config_file)
    try:
        flow = StepBuilder(settings.builder).build_linked(scenario_config)
    except (FlowConfigError, ValidationError) as e:
        print_error(f"Scenario '{scenario}' does not build: {e}")
        raise typer.Exit(code=1) from e

    calculator = CreditCalculator.from_settings(
        TablePricing(settings.credits),
        settings,
        steps=flow,
        has_image_input=scenario_config.photo_count > 0,
    )

    selections: dict[str, Any] = {}
    if duration is not None:
        selections[SelectionType.DURATION.value] = {SELECTION_KEY: duration}
    if resolution is not None:
        selections[SelectionType.RESOLUTION.value] = {SELECTION_KEY: resolution}

    quote = calculator.calculate(selections)
    inputs = quote.inputs

    print_header(f"Credit Quote: {scenario}")
    print_key_value_table(
        "Inputs",
        {
            "Output Type": inputs.output_type.value,
            "Duration": f"{inputs.duration}s" if inputs.duration is not None else "[dim]none[/dim]",
            "Resolution": inputs.resolution or "[dim]none[/dim]",
            "Image Input": "yes" if inputs.has_image_input else "no",
        },
    )
    console.print()
    console.print(f"[bold]Total:[/bold] {quote.credits} credits")
    if quote.used_fallback:
        print_warning(
            f"Rate table gave no price; fallback cost of {settings.fallback_cost} applied."
        )
