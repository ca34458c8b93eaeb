"""CLI UI components for the wizardflow CLI."""

from .console import (
    console,
    print_error,
    print_header,
    print_key_value_table,
    print_muted,
    print_steps_table,
    print_warning,
)

__all__ = [
    "console",
    "print_error",
    "print_header",
    "print_key_value_table",
    "print_muted",
    "print_steps_table",
    "print_warning",
]
