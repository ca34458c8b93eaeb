"""Configuration module for the wizard flow engine."""

from .loader import ConfigLoader, load_scenarios, load_settings
from .settings import BuilderSettings, CreditSettings, FlowSettings, Settings

__all__ = [
    "BuilderSettings",
    "ConfigLoader",
    "CreditSettings",
    "FlowSettings",
    "Settings",
    "load_scenarios",
    "load_settings",
]
