"""CLI commands for the wizardflow CLI."""

from .config_cmd import config
from .credits_cmd import credits
from .presets import presets
from .steps_cmd import steps

__all__ = [
    "config",
    "credits",
    "presets",
    "steps",
]
