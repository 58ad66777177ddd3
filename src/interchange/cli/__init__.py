"""Command-line interface for the interchange catalog."""

from interchange.cli.main import app

__all__ = ["app"]
