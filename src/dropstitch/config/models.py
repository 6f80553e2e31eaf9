"""Configuration models for Dropstitch.

This module defines Pydantic models for all configuration sections,
including validation and defaults.
"""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dropstitch.core.constants import DEFAULT_LEDGER_DIR, GIT_TIMEOUT
from dropstitch.git.reflog import UnknownOperationPolicy

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class HistoryConfig(BaseModel):
    """Reflog and ledger configuration.

    Attributes:
        unknown_operations: What to do with reflog entries whose
            operation is not supported (skip or error).
        ledger_dir: Directory under ``.git`` that holds branch ledgers.
    """

    model_config = ConfigDict(validate_assignment=True)

    unknown_operations: UnknownOperationPolicy = UnknownOperationPolicy.SKIP
    ledger_dir: str = DEFAULT_LEDGER_DIR

    @field_validator("ledger_dir")
    @classmethod
    def validate_ledger_dir(cls, v: str) -> str:
        """Ledger directory must be a single relative path component."""
        v = v.strip()
        parts = PurePath(v).parts
        if len(parts) != 1 or parts[0] in (".", "..") or PurePath(v).is_absolute():
            raise ValueError("ledger_dir must be a single directory name")
        return v


class GitConfig(BaseModel):
    """Git invocation configuration.

    Attributes:
        executable: Name or path of the git binary.
        timeout: Seconds before a git command is abandoned (1-600).
    """

    model_config = ConfigDict(validate_assignment=True)

    executable: str = "git"
    timeout: int = Field(default=GIT_TIMEOUT, ge=1, le=600)

    @field_validator("executable")
    @classmethod
    def validate_executable(cls, v: str) -> str:
        """Validate that the executable name is non-empty."""
        if not v or not v.strip():
            raise ValueError("Git executable must be a non-empty string")
        return v.strip()


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Console log level.
        file_logging: Also write a rotating log file.
        log_file: Custom log file path.
    """

    model_config = ConfigDict(validate_assignment=True)

    level: LogLevel = "WARNING"
    file_logging: bool = False
    log_file: Path | None = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept log levels in any case."""
        return v.upper() if isinstance(v, str) else v


class DropstitchConfig(BaseModel):
    """Root configuration model.

    Attributes:
        history: Reflog and ledger settings.
        git: Git invocation settings.
        logging: Logging settings.
    """

    model_config = ConfigDict(validate_assignment=True)

    history: HistoryConfig = Field(default_factory=HistoryConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
