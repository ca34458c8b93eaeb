"""Presets command: list the scenarios a flow can be built from."""

import typer
from pydantic import ValidationError

from wizardflow.cli.ui.console import console, print_error, print_header, print_muted
from wizardflow.config import load_scenarios
from wizardflow.core.builder import SCENARIO_PRESETS
from wizardflow.models.scenario import ScenarioConfig


def available_scenarios(config_file: str | None) -> dict[str, ScenarioConfig]:
    """Built-in presets overlaid with scenarios from the YAML config.

    Raises:
        typer.Exit: If the config file defines a malformed scenario.
    """
    try:
        custom = load_scenarios(config_file)
    except ValidationError as e:
        print_error(f"Invalid scenario in config: {e}")
        raise typer.Exit(code=1) from e
    return {**SCENARIO_PRESETS, **custom}


def resolve_scenario(name: str, config_file: str | None) -> ScenarioConfig:
    """Look up a scenario by name, exiting with an error if it is unknown."""
    scenarios = available_scenarios(config_file)
    scenario = scenarios.get(name)
    if scenario is None:
        print_error(f"Unknown scenario '{name}'.")
        print_muted(f"Available: {', '.join(sorted(scenarios))}")
        raise typer.Exit(code=1)
    return scenario


def _describe(scenario: ScenarioConfig) -> str:
    parts = []
    if scenario.photo_count:
        parts.append(f"{scenario.photo_count} photo(s)")
    if scenario.text_input is not None and scenario.text_input.enabled:
        parts.append("text")
    if scenario.style_selection is not None and scenario.style_selection.enabled:
        parts.append("style")
    if scenario.duration_selection is not None and scenario.duration_selection.enabled:
        parts.append("duration")
    if (
        scenario.resolution_selection is not None
        and scenario.resolution_selection.enabled
    ):
        parts.append("resolution")
    if scenario.custom_steps:
        parts.append(f"{len(scenario.custom_steps)} custom step(s)")
    return ", ".join(parts) or "no inputs"


def presets(
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """List built-in scenario presets and those defined in the config file."""
    scenarios = available_scenarios(config_file)

    print_header("Scenarios")
    for name, scenario in sorted(scenarios.items()):
        source = "built-in" if SCENARIO_PRESETS.get(name) is scenario else "config"
        console.print(f"  [bold]{name}[/bold] [dim]({source})[/dim]  {_describe(scenario)}")
