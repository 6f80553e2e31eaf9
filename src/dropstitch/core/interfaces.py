"""Abstract base classes defining core interfaces for Dropstitch.

Interface Implementation Status:
- IConfigLoader: Implemented by config.loader.ConfigLoader
- IVersionControl: Implemented by git.repository.GitRepository

Tests substitute their own IVersionControl to simulate git output and
failing resets without touching a real repository.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class IVersionControl(ABC):
    """The two capabilities Dropstitch needs from the version-control tool."""

    @abstractmethod
    def list_branches(self) -> str:
        """List local branches with the current one marked.

        Returns:
            Raw standard output of ``git branch``.
        """
        ...

    @abstractmethod
    def reset_hard(self, commit: str) -> None:
        """Move the current branch and working tree to ``commit``.

        Args:
            commit: Full object name to reset to.

        Raises:
            GitError: If the reset did not succeed.
        """
        ...


class IConfigLoader(ABC):
    """Abstract base class for configuration loading."""

    @abstractmethod
    def load(self, path: Path) -> dict[str, Any]:
        """Load configuration from a single file.

        Args:
            path: Path to the configuration file.

        Returns:
            Configuration dictionary.
        """
        ...

    @abstractmethod
    def merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two configuration dictionaries.

        Args:
            base: Base configuration.
            override: Values that take precedence.

        Returns:
            Merged configuration dictionary.
        """
        ...
