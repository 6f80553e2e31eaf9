"""Exception hierarchy for Dropstitch.

Every failure the tool can report derives from DropstitchError. Each
class carries the process exit code it maps to and a user-facing
message, so the CLI never has to inspect exception types itself.

- PreconditionError (exit 2): the user can act on these.
- FormatError (exit 1): reflog, ledger or git output is not what we expect.
- GitError, ConfigError (exit 1): internal failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from pathlib import Path

    from dropstitch.undo.models import ActionKind

PRECONDITION_EXIT_CODE = 2
INTERNAL_EXIT_CODE = 1


class DropstitchError(Exception):
    """Base exception for all Dropstitch errors."""

    exit_code: ClassVar[int] = INTERNAL_EXIT_CODE

    def user_message(self) -> str:
        """Return the message shown to the user.

        Returns:
            Human-readable description of the failure.
        """
        return f"An internal error occurred: {self}"


class PreconditionError(DropstitchError):
    """The repository is not in a state Dropstitch can work with."""

    exit_code: ClassVar[int] = PRECONDITION_EXIT_CODE

    def user_message(self) -> str:
        return str(self)


class NotARepositoryError(PreconditionError):
    """The target directory is not the root of a Git repository."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root
        super().__init__("Dropstitch must be run from inside a Git repository")


class DetachedHeadError(PreconditionError):
    """HEAD does not point at a branch."""

    def __init__(self) -> None:
        super().__init__("Dropstitch can't be run from detached HEAD state")

    def user_message(self) -> str:
        return (
            "You appear to be in a detached HEAD state.\n\n"
            'Dropstitch must be run from the "end" (HEAD) of a branch.\n'
            "Try checking out the branch with `git switch [branch name]`"
        )


class OperationInProgressError(PreconditionError):
    """A rebase, bisect or similar Git operation is still running."""

    HINTS: ClassVar[dict[str, tuple[str, str]]] = {
        "rebasing": (
            "You appear to be in an active rebase.",
            "Please finish rebasing, or leave it behind with `git rebase --quit`",
        ),
        "bisect": (
            "You appear to be in an active bisect.",
            "Please finish your bisect, or leave it behind with `git bisect reset`",
        ),
    }

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Dropstitch can't be run while {operation} is in progress")

    def user_message(self) -> str:
        headline, hint = self.HINTS.get(
            self.operation,
            (
                "You appear to be in some sort of active Git operation.",
                "Please finish the operation to return to your head.",
            ),
        )
        return (
            f"{headline}\n\n"
            'Dropstitch must be run from the "end" (HEAD) of a branch.\n'
            f"{hint}"
        )


class NothingToError(PreconditionError):
    """There is no operation left to undo or redo."""

    def __init__(self, action: ActionKind) -> None:
        self.action = action
        super().__init__(f"Nothing to {action.value}")


class FormatError(DropstitchError):
    """Persisted state or tool output could not be understood."""


class ReflogParseError(FormatError):
    """A reflog line matched the expected shape but could not be parsed."""

    def __init__(self, message: str, line: str | None = None) -> None:
        self.line = line
        super().__init__(message)


class LedgerCorruptError(FormatError):
    """A ledger line could not be decoded."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        line_number: int | None = None,
    ) -> None:
        self.path = path
        self.line_number = line_number
        if path is not None and line_number is not None:
            message = f"{path}:{line_number}: {message}"
        super().__init__(message)


class UnexpectedBranchOutputError(FormatError):
    """`git branch` output did not contain a current-branch marker."""

    def __init__(self, output: str) -> None:
        self.output = output
        super().__init__("Could not determine HEAD state from `git branch` output")


class ConfigError(DropstitchError):
    """Configuration could not be loaded or validated."""

    def user_message(self) -> str:
        return f"Configuration error: {self}"
