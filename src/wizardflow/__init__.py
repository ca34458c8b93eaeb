"""Wizard flow engine: declarative multi-step flows for generation apps."""

__version__ = "0.1.0"
