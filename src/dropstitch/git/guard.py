"""Branch state checks run before any undo or redo.

Dropstitch only works from the tip of a named branch. The guard checks
that the target directory is a repository, that HEAD is attached, and
that no rebase or bisect is underway, then resolves where the branch's
reflog and ledger live.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from dropstitch.core import (
    DetachedHeadError,
    NotARepositoryError,
    OperationInProgressError,
    UnexpectedBranchOutputError,
    get_logger,
)
from dropstitch.core.constants import (
    DEFAULT_LEDGER_DIR,
    GIT_DIR_NAME,
    LEDGER_HEADS_PATH,
    REFLOG_HEADS_PATH,
)

if TYPE_CHECKING:
    from dropstitch.core import IVersionControl

logger = get_logger("git.guard")

# Alternatives are tried left to right, so detached and in-progress
# states win over the catch-all branch name.
HEAD_PATTERN = re.compile(
    r"^\* (?:"
    r"(?P<detached>\(HEAD detached)"
    r"|(?P<operation>\(no branch, (?P<operation_name>bisect|rebasing))"
    r"|(?P<branch>.+)"
    r")",
    re.MULTILINE,
)


@dataclass(frozen=True)
class RepositoryContext:
    """Where everything for the current branch lives.

    Attributes:
        root: Repository root (the directory holding ``.git``).
        branch: Name of the checked-out branch.
        reflog_path: The branch's reflog file.
        ledger_path: The branch's Dropstitch ledger file.
    """

    root: Path
    branch: str
    reflog_path: Path
    ledger_path: Path


def ensure_repository(root: Path) -> Path:
    """Check that ``root`` holds a Git metadata directory.

    Args:
        root: Candidate repository root.

    Returns:
        Path to the ``.git`` directory.

    Raises:
        NotARepositoryError: If ``.git/HEAD`` is missing or not a file.
    """
    git_dir = root / GIT_DIR_NAME
    head = git_dir / "HEAD"
    if not head.is_file():
        raise NotARepositoryError(root)
    return git_dir


def parse_branch_output(output: str) -> str:
    """Find the current branch in ``git branch`` output.

    Args:
        output: Raw output of ``git branch``.

    Returns:
        The checked-out branch name.

    Raises:
        DetachedHeadError: If HEAD is detached.
        OperationInProgressError: If a rebase or bisect is in progress.
        UnexpectedBranchOutputError: If no line is marked as current.
    """
    match = HEAD_PATTERN.search(output)
    if match is None:
        raise UnexpectedBranchOutputError(output)

    if match.group("detached"):
        raise DetachedHeadError()

    if match.group("operation"):
        raise OperationInProgressError(match.group("operation_name"))

    branch = match.group("branch").strip()
    if not branch:
        raise UnexpectedBranchOutputError(output)
    return branch


def resolve_branch(root: Path, vcs: IVersionControl) -> str:
    """Resolve the active branch, failing if Dropstitch cannot run.

    Args:
        root: Repository root.
        vcs: Version-control collaborator for ``root``.

    Returns:
        The checked-out branch name.
    """
    ensure_repository(root)
    branch = parse_branch_output(vcs.list_branches())
    logger.debug("Active branch: %s", branch)
    return branch


def resolve_context(
    root: Path,
    vcs: IVersionControl,
    ledger_dir: str = DEFAULT_LEDGER_DIR,
) -> RepositoryContext:
    """Build the RepositoryContext for the active branch.

    Args:
        root: Repository root.
        vcs: Version-control collaborator for ``root``.
        ledger_dir: Directory under ``.git`` that holds ledgers.

    Returns:
        Context with reflog and ledger paths for the branch.
    """
    branch = resolve_branch(root, vcs)
    git_dir = root / GIT_DIR_NAME
    return RepositoryContext(
        root=root,
        branch=branch,
        reflog_path=git_dir.joinpath(*REFLOG_HEADS_PATH, branch),
        ledger_path=git_dir.joinpath(ledger_dir, *LEDGER_HEADS_PATH, branch),
    )
