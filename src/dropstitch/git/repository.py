"""Git command runner for Dropstitch."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from dropstitch.core import DropstitchError, IVersionControl, get_logger
from dropstitch.core.constants import GIT_TIMEOUT

logger = get_logger("git.repository")


class GitError(DropstitchError):
    """A git invocation failed."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = "") -> None:
        """Initialize error.

        Args:
            message: Error description
            returncode: Exit status of the git process
            stderr: Captured standard error
        """
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class GitRepository(IVersionControl):
    """Blocking wrapper around the git executable for one repository."""

    def __init__(
        self,
        path: str | Path | None = None,
        executable: str = "git",
        timeout: int = GIT_TIMEOUT,
    ) -> None:
        """Initialize repository.

        Args:
            path: Repository root (defaults to the current directory)
            executable: Name or path of the git binary
            timeout: Seconds before a git invocation is abandoned
        """
        self._path = Path(path) if path is not None else Path.cwd()
        self._executable = executable
        self._timeout = timeout

    @property
    def path(self) -> Path:
        """Repository root this instance runs git in."""
        return self._path

    def run_git(self, *args: str, check: bool = True) -> tuple[str, str, int]:
        """Run a git command and wait for it.

        Args:
            *args: Git arguments
            check: Raise GitError on non-zero exit

        Returns:
            Tuple of (stdout, stderr, returncode)

        Raises:
            GitError: If git cannot be launched, times out, or fails with check=True
        """
        cmd = [self._executable, "-C", str(self._path), *args]
        logger.debug("Running: %s", " ".join(cmd))

        # Branch markers such as "(HEAD detached" are localized otherwise
        env = {**os.environ, "LC_ALL": "C"}

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                env=env,
            )
        except FileNotFoundError as e:
            raise GitError(f"git executable not found: {self._executable}") from e
        except subprocess.TimeoutExpired as e:
            raise GitError(
                f"git {' '.join(args)} timed out after {self._timeout}s"
            ) from e

        if check and result.returncode != 0:
            raise GitError(
                f"git {' '.join(args)} failed: {result.stderr.strip()}",
                returncode=result.returncode,
                stderr=result.stderr,
            )

        return result.stdout, result.stderr, result.returncode

    def list_branches(self) -> str:
        """List local branches.

        Returns:
            Raw ``git branch`` output, current branch marked with ``*``
        """
        # color.branch or column.ui set to "always" would decorate the names
        out, _, _ = self.run_git("branch", "--no-color", "--no-column")
        return out

    def reset_hard(self, commit: str) -> None:
        """Hard reset the current branch and working tree.

        Args:
            commit: Object name to reset to

        Raises:
            GitError: If the reset fails
        """
        logger.info("Resetting %s to %s", self._path, commit)
        self.run_git("reset", "--hard", commit)
