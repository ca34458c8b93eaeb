"""Rich console singleton and styled output helpers for the wizardflow CLI."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

# Singleton console instance used throughout the CLI
console = Console()

# Style constants
BRAND_COLOR = "bright_cyan"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"
MUTED_COLOR = "dim"


def print_header(title: str) -> None:
    """Print a styled header panel for a CLI section."""
    console.print(
        Panel(
            Text(title, style=f"bold {BRAND_COLOR}", justify="center"),
            border_style=BRAND_COLOR,
            padding=(0, 2),
        )
    )


def print_warning(message: str) -> None:
    console.print(f"[{WARNING_COLOR}]\\[!][/{WARNING_COLOR}] {message}")


def print_error(message: str) -> None:
    console.print(f"[{ERROR_COLOR}]\\[x][/{ERROR_COLOR}] {message}")


def print_muted(message: str) -> None:
    console.print(f"[{MUTED_COLOR}]{message}[/{MUTED_COLOR}]")


def print_key_value_table(
    title: str, data: dict[str, str], title_style: str = BRAND_COLOR
) -> None:
    """Print a two-column key-value table.

    Args:
        title: Table title.
        data: Dictionary of key-value pairs to display.
        title_style: Rich style for the table title.
    """
    table = Table(title=title, title_style=title_style, show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, value)
    console.print(table)


def print_steps_table(title: str, rows: list[tuple[str, ...]]) -> None:
    """Print a flow's steps, one row per step.

    Args:
        title: Table title.
        rows: ``(index, id, type, next, detail)`` tuples.
    """
    table = Table(title=title, title_style=BRAND_COLOR)
    table.add_column("#", justify="right", style=MUTED_COLOR)
    table.add_column("Step", style="bold", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Next", no_wrap=True)
    table.add_column("Detail", style=MUTED_COLOR, overflow="fold")
    for row in rows:
        table.add_row(*row)
    console.print(table)
