"""Dropstitch - undo and redo Git operations you thought were permanent."""

try:
    from importlib.metadata import version

    __version__ = version("dropstitch")
except Exception:
    __version__ = "0.0.0"  # Fallback for development/testing

__all__ = ["__version__"]
