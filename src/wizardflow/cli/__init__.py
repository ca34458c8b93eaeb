"""Command-line interface for the wizard flow engine."""
