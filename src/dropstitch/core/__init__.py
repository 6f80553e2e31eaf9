"""Core package containing interfaces, errors, and logging."""

from dropstitch.core.errors import (
    ConfigError,
    DetachedHeadError,
    DropstitchError,
    FormatError,
    LedgerCorruptError,
    NotARepositoryError,
    NothingToError,
    OperationInProgressError,
    PreconditionError,
    ReflogParseError,
    UnexpectedBranchOutputError,
)
from dropstitch.core.interfaces import IConfigLoader, IVersionControl
from dropstitch.core.logging import get_logger, setup_logging

__all__ = [
    "ConfigError",
    "DetachedHeadError",
    "DropstitchError",
    "FormatError",
    "IConfigLoader",
    "IVersionControl",
    "LedgerCorruptError",
    "NotARepositoryError",
    "NothingToError",
    "OperationInProgressError",
    "PreconditionError",
    "ReflogParseError",
    "UnexpectedBranchOutputError",
    "get_logger",
    "setup_logging",
]
