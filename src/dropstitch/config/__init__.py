"""Configuration loading and models for Dropstitch."""

from dropstitch.config.loader import ConfigLoader
from dropstitch.config.models import (
    DropstitchConfig,
    GitConfig,
    HistoryConfig,
    LoggingConfig,
)
from dropstitch.config.sources import (
    EnvironmentSource,
    IConfigSource,
    JsonFileSource,
    YamlFileSource,
)

__all__ = [
    "ConfigLoader",
    "DropstitchConfig",
    "EnvironmentSource",
    "GitConfig",
    "HistoryConfig",
    "IConfigSource",
    "JsonFileSource",
    "LoggingConfig",
    "YamlFileSource",
]
