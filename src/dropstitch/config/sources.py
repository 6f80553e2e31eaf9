"""Configuration sources for Dropstitch.

This module implements the Strategy pattern for loading configuration
from different sources (JSON files, YAML files, environment variables).
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

import yaml

from dropstitch.core import ConfigError, get_logger

logger = get_logger("config.sources")


class IConfigSource(ABC):
    """Interface for configuration sources."""

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration from source.

        Returns:
            Dictionary containing configuration data.
            Returns empty dict if source doesn't exist.

        Raises:
            ConfigError: If source exists but cannot be parsed.
        """
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Check if source exists."""
        ...


class FileSource(IConfigSource):
    """Settings file in one of the supported formats.

    Subclasses only parse text; reading, empty files and error
    reporting are shared.
    """

    FORMAT: ClassVar[str] = ""
    ROOT_KIND: ClassVar[str] = "mapping"
    PARSE_ERRORS: ClassVar[tuple[type[Exception], ...]] = ()

    def __init__(self, path: Path) -> None:
        self._path = path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._path})"

    def exists(self) -> bool:
        """Check if the settings file exists."""
        return self._path.is_file()

    def load(self) -> dict[str, Any]:
        """Load configuration from the settings file.

        Returns:
            Configuration dictionary or empty dict if the file is missing
            or blank.

        Raises:
            ConfigError: If the file cannot be read or parsed, or its root
                is not a mapping.
        """
        if not self.exists():
            return {}

        try:
            content = self._path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot read %s: %s", self._path, e)
            raise ConfigError(f"Cannot read {self._path}: {e}") from e

        if not content.strip():
            return {}

        try:
            data = self._parse(content)
        except self.PARSE_ERRORS as e:
            logger.warning("Invalid %s in %s: %s", self.FORMAT, self._path, e)
            raise ConfigError(f"Invalid {self.FORMAT} in {self._path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"{self.FORMAT} root must be {self.ROOT_KIND}, got {type(data).__name__}"
            )
        return data

    @abstractmethod
    def _parse(self, content: str) -> Any:
        ...


class JsonFileSource(FileSource):
    """Load configuration from a JSON file."""

    FORMAT = "JSON"
    ROOT_KIND = "object"
    PARSE_ERRORS = (json.JSONDecodeError,)

    def _parse(self, content: str) -> Any:
        return json.loads(content)


class YamlFileSource(FileSource):
    """Load configuration from a YAML file."""

    FORMAT = "YAML"
    PARSE_ERRORS = (yaml.YAMLError,)

    def _parse(self, content: str) -> Any:
        return yaml.safe_load(content)


class EnvironmentSource(IConfigSource):
    """Load configuration from environment variables.

    Environment variables are mapped to configuration paths:
    - DROPSTITCH_UNKNOWN_OPERATIONS -> history.unknown_operations
    - DROPSTITCH_LEDGER_DIR -> history.ledger_dir
    - DROPSTITCH_GIT -> git.executable
    - DROPSTITCH_GIT_TIMEOUT -> git.timeout
    - DROPSTITCH_LOG_LEVEL -> logging.level
    """

    MAPPINGS: ClassVar[dict[str, tuple[str, str]]] = {
        "DROPSTITCH_UNKNOWN_OPERATIONS": ("history", "unknown_operations"),
        "DROPSTITCH_LEDGER_DIR": ("history", "ledger_dir"),
        "DROPSTITCH_GIT": ("git", "executable"),
        "DROPSTITCH_GIT_TIMEOUT": ("git", "timeout"),
        "DROPSTITCH_LOG_LEVEL": ("logging", "level"),
    }

    INTEGER_KEYS: ClassVar[frozenset[str]] = frozenset({"timeout"})

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        """Initialize environment source.

        Args:
            environ: Environment dictionary. Defaults to os.environ.
        """
        self._environ = environ if environ is not None else dict(os.environ)

    def __repr__(self) -> str:
        return "EnvironmentSource()"

    def load(self) -> dict[str, Any]:
        """Load configuration from environment variables.

        Returns:
            Configuration dictionary with values from environment.
        """
        config: dict[str, Any] = {}

        for env_var, (section, key) in self.MAPPINGS.items():
            value = self._environ.get(env_var)
            if value is not None:
                config.setdefault(section, {})[key] = self._convert_value(value, key)

        return config

    def exists(self) -> bool:
        """Environment always exists."""
        return True

    def _convert_value(self, value: str, key: str) -> Any:
        if key in self.INTEGER_KEYS:
            try:
                return int(value)
            except ValueError:
                # Left as a string so validation reports it
                logger.warning("Invalid integer value for %s: %s", key, value)
                return value
        return value
