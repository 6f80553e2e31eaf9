"""E2E test fixtures and utilities."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


@pytest.fixture
def dropstitch_runner(temp_home: Path):
    """Create utility for running the dropstitch CLI in a subprocess."""

    class DropstitchRunner:
        """Utility for running dropstitch in e2e tests."""

        def __init__(self, home: Path):
            self.home = home
            self.env = os.environ.copy()
            self.env["HOME"] = str(home)
            self.env["USERPROFILE"] = str(home)
            self.env["PYTHONPATH"] = os.pathsep.join(
                p for p in (str(SRC_DIR), self.env.get("PYTHONPATH")) if p
            )
            for var in list(self.env):
                if var.startswith("DROPSTITCH_"):
                    del self.env[var]

        def run(
            self,
            args: list[str] | None = None,
            cwd: Path | None = None,
            timeout: int = 30,
        ) -> subprocess.CompletedProcess:
            """Run dropstitch.

            Args:
                args: Command line arguments
                cwd: Working directory (defaults to the home directory)
                timeout: Timeout in seconds

            Returns:
                CompletedProcess result
            """
            return subprocess.run(
                [sys.executable, "-m", "dropstitch", *(args or [])],
                cwd=cwd or self.home,
                env=self.env,
                capture_output=True,
                text=True,
                timeout=timeout,
            )

    return DropstitchRunner(temp_home)


@pytest.fixture
def ledger_lines():
    """Read a repository's main-branch ledger as a list of lines."""

    def _read(repo: Path) -> list[str]:
        ledger = repo / ".git" / "dropstitch" / "refs" / "heads" / "main"
        if not ledger.exists():
            return []
        return ledger.read_text().splitlines()

    return _read
