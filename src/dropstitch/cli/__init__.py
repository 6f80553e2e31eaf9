"""CLI package for Dropstitch."""

from dropstitch.cli.main import main

__all__ = ["main"]
