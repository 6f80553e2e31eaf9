"""Shared test fixtures for Dropstitch tests.

Fixture Dependency Hierarchy
============================

::

    temp_dir (base temporary directory)
    ├── temp_home (isolated HOME so user settings never leak in)
    └── temp_project (isolated project directory)
        └── git_repo (initialized repository on branch "main")
            └── amended_repo (commit "foo" amended to "bar")

    make_operation (factory for OperationRecord with readable hashes)
    fake_vcs (in-memory IVersionControl recording resets)
    fake_repo (directory that looks like a repository to the guard)

Notes:
- Fixtures with `temp_` prefix create isolated filesystem locations
- git fixtures shell out to a real git binary
"""

from __future__ import annotations

import subprocess
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import pytest

from dropstitch.core import IVersionControl
from dropstitch.git.reflog import OperationKind, OperationRecord
from dropstitch.git.repository import GitError


# ============================================================
# Helpers
# ============================================================


def run_git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def latest_message(repo: Path) -> str:
    """Subject line of the commit HEAD points at."""
    return run_git(repo, "log", "-1", "--format=%s").strip()


def reflog_line(from_hash: str, to_hash: str, action: str = "commit (amend): bar") -> str:
    """Build a reflog line in git's on-disk format."""
    return f"{from_hash} {to_hash} Test User <test@test.com> 1700000000 +0000\t{action}\n"


class FakeVersionControl(IVersionControl):
    """In-memory version-control collaborator."""

    def __init__(self, branch_output: str = "* main\n", fail_reset: bool = False) -> None:
        self.branch_output = branch_output
        self.fail_reset = fail_reset
        self.resets: list[str] = []
        self.list_calls = 0

    def list_branches(self) -> str:
        self.list_calls += 1
        return self.branch_output

    def reset_hard(self, commit: str) -> None:
        if self.fail_reset:
            raise GitError("git reset --hard failed", returncode=128, stderr="fatal: simulated")
        self.resets.append(commit)


# ============================================================
# Directory Fixtures
# ============================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests.

    Yields:
        Path to temporary directory that is cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory.

    Args:
        temp_dir: Base temporary directory.
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        Path to temporary home directory.
    """
    home = temp_dir / "home"
    home.mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for var in (
        "DROPSTITCH_UNKNOWN_OPERATIONS",
        "DROPSTITCH_LEDGER_DIR",
        "DROPSTITCH_GIT",
        "DROPSTITCH_GIT_TIMEOUT",
        "DROPSTITCH_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def temp_project(temp_dir: Path) -> Path:
    """Create a temporary project directory.

    Args:
        temp_dir: Base temporary directory.

    Returns:
        Path to temporary project directory.
    """
    project = temp_dir / "project"
    project.mkdir(parents=True)
    return project


# ============================================================
# Git Fixtures
# ============================================================


@pytest.fixture
def git_repo(temp_project: Path, temp_home: Path) -> Path:
    """Initialize a git repository in the temp project.

    Creates a git repository with:
    - Branch "main" and an initial commit with README.md
    - User configured (test@test.com / Test User)

    Args:
        temp_project: Temporary project directory.
        temp_home: Isolated home directory.

    Returns:
        Path to git repository.
    """
    run_git(temp_project, "init")
    run_git(temp_project, "config", "user.email", "test@test.com")
    run_git(temp_project, "config", "user.name", "Test User")
    run_git(temp_project, "config", "commit.gpgsign", "false")
    run_git(temp_project, "symbolic-ref", "HEAD", "refs/heads/main")

    readme = temp_project / "README.md"
    readme.write_text("# Test Project\n")
    run_git(temp_project, "add", ".")
    run_git(temp_project, "commit", "-m", "Initial commit")

    return temp_project


@pytest.fixture
def amended_repo(git_repo: Path) -> Path:
    """Create a repository whose latest commit was amended from "foo" to "bar".

    Args:
        git_repo: Git repository path.

    Returns:
        Path to git repository.
    """
    (git_repo / "feature.txt").write_text("feature\n")
    run_git(git_repo, "add", "feature.txt")
    run_git(git_repo, "commit", "-m", "foo")
    run_git(git_repo, "commit", "--amend", "-m", "bar")
    return git_repo


# ============================================================
# Fakes
# ============================================================


@pytest.fixture
def make_operation() -> Callable[[int], OperationRecord]:
    """Factory for amend records with distinct, readable hashes.

    Returns:
        Function mapping an index to an OperationRecord.
    """

    def _make(index: int) -> OperationRecord:
        return OperationRecord(
            from_hash=str(index).rjust(40, "a"),
            to_hash=str(index).rjust(40, "b"),
            kind=OperationKind.AMEND,
        )

    return _make


@pytest.fixture
def fake_vcs() -> FakeVersionControl:
    """In-memory version-control collaborator on branch "main"."""
    return FakeVersionControl()


@pytest.fixture
def fake_repo(temp_project: Path) -> Path:
    """A directory the guard accepts as a repository, with no real git.

    Args:
        temp_project: Temporary project directory.

    Returns:
        Repository root containing ``.git/HEAD`` and an empty main reflog.
    """
    git_dir = temp_project / ".git"
    reflog = git_dir / "logs" / "refs" / "heads" / "main"
    reflog.parent.mkdir(parents=True)
    (git_dir / "HEAD").write_text("ref: refs/heads/main\n")
    reflog.write_text("")
    return temp_project


@pytest.fixture
def git_cmd() -> Callable[..., str]:
    """Run git in a repository: ``git_cmd(repo, "log", "-1")``."""
    return run_git


@pytest.fixture
def commit_message() -> Callable[[Path], str]:
    """Read the subject of the commit HEAD points at."""
    return latest_message


@pytest.fixture
def make_reflog_line() -> Callable[..., str]:
    """Build reflog lines in git's on-disk format."""
    return reflog_line
