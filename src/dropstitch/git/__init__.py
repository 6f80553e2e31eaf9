"""Git integration: command runner, reflog parsing and branch state checks."""

from dropstitch.git.guard import (
    RepositoryContext,
    ensure_repository,
    parse_branch_output,
    resolve_branch,
    resolve_context,
)
from dropstitch.git.reflog import (
    OperationKind,
    OperationRecord,
    UnknownOperationPolicy,
    parse_reflog_line,
    read_reflog,
)
from dropstitch.git.repository import GitError, GitRepository

__all__ = [
    "GitError",
    "GitRepository",
    "OperationKind",
    "OperationRecord",
    "RepositoryContext",
    "UnknownOperationPolicy",
    "ensure_repository",
    "parse_branch_output",
    "parse_reflog_line",
    "read_reflog",
    "resolve_branch",
    "resolve_context",
]
