"""Main Typer application for the wizardflow CLI."""

import logging

import typer
from rich.logging import RichHandler

from wizardflow import __version__
from wizardflow.cli.commands.config_cmd import config
from wizardflow.cli.commands.credits_cmd import credits
from wizardflow.cli.commands.presets import presets
from wizardflow.cli.commands.steps_cmd import steps
from wizardflow.cli.ui.console import console

app = typer.Typer(
    name="wizardflow",
    help="Inspect wizard flows built from scenario configuration.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"wizardflow version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging from the flow engine.",
    ),
) -> None:
    """Wizardflow: declarative multi-step generation flows.

    Run [bold]wizardflow presets[/bold] to see available scenarios, then
    [bold]wizardflow steps <scenario>[/bold] to inspect the flow it builds.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


# Register commands from individual modules
app.command()(steps)
app.command()(credits)
app.command()(presets)
app.command()(config)
