"""Configuration loader for Dropstitch.

This module implements the ConfigLoader class that handles hierarchical
configuration loading, merging and validation.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from dropstitch.config.models import DropstitchConfig
from dropstitch.config.sources import (
    EnvironmentSource,
    IConfigSource,
    JsonFileSource,
    YamlFileSource,
)
from dropstitch.core import ConfigError, IConfigLoader, get_logger
from dropstitch.core.constants import CONFIG_DIR_NAME

logger = get_logger("config.loader")


class ConfigLoader(IConfigLoader):
    """Configuration loader with hierarchical merging.

    Load order (later overrides earlier):
    1. Defaults (from DropstitchConfig)
    2. User settings (~/.dropstitch/settings.json or .yaml)
    3. Project settings (<repo>/.dropstitch/settings.json or .yaml)
    4. Environment variables (DROPSTITCH_*)
    """

    def __init__(
        self,
        user_dir: Path | None = None,
        project_dir: Path | None = None,
        environ: dict[str, str] | None = None,
    ) -> None:
        """Initialize configuration loader.

        Args:
            user_dir: User configuration directory. Defaults to ~/.dropstitch
            project_dir: Project configuration directory. Defaults to ./.dropstitch
            environ: Environment to read overrides from. Defaults to os.environ.
        """
        self._user_dir = user_dir or Path.home() / CONFIG_DIR_NAME
        self._project_dir = project_dir or Path.cwd() / CONFIG_DIR_NAME
        self._environ = environ

    @classmethod
    def for_repository(cls, root: Path, environ: dict[str, str] | None = None) -> ConfigLoader:
        """Create a loader whose project settings live in ``root``.

        Args:
            root: Repository root.
            environ: Environment to read overrides from.

        Returns:
            ConfigLoader for that repository.
        """
        return cls(project_dir=root / CONFIG_DIR_NAME, environ=environ)

    @property
    def user_dir(self) -> Path:
        """Get user configuration directory."""
        return self._user_dir

    @property
    def project_dir(self) -> Path:
        """Get project configuration directory."""
        return self._project_dir

    def load_all(self) -> DropstitchConfig:
        """Load and merge all configuration sources.

        Returns:
            Validated DropstitchConfig with all sources merged.

        Raises:
            ConfigError: If the merged configuration fails validation.
        """
        config: dict[str, Any] = DropstitchConfig().model_dump()

        for directory in (self._user_dir, self._project_dir):
            json_file = directory / "settings.json"
            yaml_file = directory / "settings.yaml"
            if json_file.exists():
                config = self._load_and_merge(config, JsonFileSource(json_file))
            elif yaml_file.exists():
                config = self._load_and_merge(config, YamlFileSource(yaml_file))

        config = self._load_and_merge(config, EnvironmentSource(self._environ))

        try:
            return DropstitchConfig.model_validate(config)
        except ValidationError as e:
            logger.error("Configuration validation failed: %s", e)
            raise ConfigError(f"Configuration validation failed: {e}") from e

    def _load_and_merge(
        self,
        base: dict[str, Any],
        source: IConfigSource,
    ) -> dict[str, Any]:
        """Load from source and merge into base config.

        Args:
            base: Base configuration dictionary.
            source: Configuration source to load from.

        Returns:
            Merged configuration dictionary.
        """
        try:
            if source.exists():
                override = source.load()
                if override:
                    logger.debug("Loaded config from %s", source)
                    return self.merge(base, override)
        except ConfigError as e:
            # Log and continue with base config
            logger.warning("Skipped config source %s: %s", source, e)
        return base

    def load(self, path: Path) -> dict[str, Any]:
        """Load single configuration file.

        Args:
            path: Path to configuration file.

        Returns:
            Configuration dictionary.

        Raises:
            ConfigError: If file format is not supported or file is invalid.
        """
        suffix = path.suffix.lower()
        if suffix == ".json":
            return JsonFileSource(path).load()
        elif suffix in (".yaml", ".yml"):
            return YamlFileSource(path).load()
        else:
            raise ConfigError(f"Unsupported configuration format: {suffix}")

    def merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two configuration dictionaries.

        Args:
            base: Base configuration dictionary.
            override: Override configuration dictionary.

        Returns:
            New dictionary with override values merged into base.
            Nested dictionaries are merged recursively.
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self.merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result
