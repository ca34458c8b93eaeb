"""Config command: view current configuration settings."""

import typer

from wizardflow.cli.ui.console import console, print_header, print_key_value_table, print_muted
from wizardflow.config import load_settings


def config(
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """View current configuration.

    Displays all configuration values loaded from environment
    variables (``WIZARDFLOW_`` prefix) and config files.
    """
    settings = load_settings(config_file)

    print_header("Wizardflow Configuration")

    print_key_value_table(
        "Step Builder",
        {
            "Photo Label": settings.builder.photo_label_template,
            "Text Length": f"{settings.builder.text_min_length}-{settings.builder.text_max_length}",
            "Durations": ", ".join(f"{d}s" for d in settings.builder.durations),
            "Resolutions": ", ".join(settings.builder.resolutions),
        },
    )
    console.print()

    multipliers = ", ".join(
        f"{name} x{factor:g}" for name, factor in settings.credits.resolution_multipliers.items()
    )
    print_key_value_table(
        "Credits",
        {
            "Output Type": settings.credits.output_type.value,
            "Fallback Cost": str(settings.credits.fallback_cost),
            "Per Second": f"{settings.credits.credits_per_second:g}",
            "Per Image": f"{settings.credits.image_credits:g}",
            "Image Input Surcharge": f"{settings.credits.image_input_surcharge:g}",
            "Resolution Multipliers": multipliers or "[dim]none[/dim]",
        },
    )
    console.print()

    print_key_value_table(
        "Flow",
        {
            "Flow ID": settings.flow.flow_id,
            "Scenario Preview": str(settings.flow.include_preview),
            "Result Preview": str(settings.flow.include_result),
        },
    )

    print_muted("\nConfig file: use --config to specify a custom YAML config.")
