"""Undo manager for history-rewriting Git operations.

This module provides the UndoManager class that selects which reflog
operation to undo or redo next, resets the branch, and records the
action in the branch ledger.

There is no stored "current state": whether an operation is undone is
derived every run from the reflog plus the ledger.

Example:
    from dropstitch.undo.manager import UndoManager

    manager = UndoManager.open(Path("."), config)
    record = manager.undo()
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from dropstitch.core import NothingToError, get_logger
from dropstitch.git.guard import RepositoryContext, resolve_context
from dropstitch.git.reflog import OperationRecord, read_reflog
from dropstitch.git.repository import GitRepository

from .ledger import ActionLedger
from .models import ActionKind, ActionRecord

if TYPE_CHECKING:
    from dropstitch.config.models import DropstitchConfig
    from dropstitch.core import IVersionControl

logger = get_logger("undo.manager")


def compute_undo_target(
    operations: Sequence[OperationRecord],
    ledger: ActionLedger,
) -> OperationRecord | None:
    """Select the next operation to undo.

    Args:
        operations: Reflog operations, oldest first.
        ledger: Actions already performed on the branch.

    Returns:
        The most recent operation that is not currently undone, or None.
    """
    for operation in reversed(operations):
        if not ledger.is_undone(operation):
            return operation
    return None


def compute_redo_target(
    operations: Sequence[OperationRecord],
    ledger: ActionLedger,
) -> OperationRecord | None:
    """Select the next operation to redo.

    Args:
        operations: Reflog operations, oldest first.
        ledger: Actions already performed on the branch.

    Returns:
        The most recently undone operation still in the reflog, or None.
    """
    return ledger.latest_undone(operations)


@dataclass(frozen=True)
class HistoryEntry:
    """One reflog operation and what Dropstitch last did to it."""

    operation: OperationRecord
    last_action: ActionKind | None = None

    @property
    def undone(self) -> bool:
        """Whether the operation is currently undone."""
        return self.last_action is ActionKind.UNDO


@dataclass
class PendingActions:
    """What ``undo`` and ``redo`` would act on right now.

    Attributes:
        branch: Branch the history belongs to.
        undo_target: Operation the next undo would reverse.
        redo_target: Operation the next redo would re-apply.
        history: Every operation, most recent first.
    """

    branch: str
    undo_target: OperationRecord | None = None
    redo_target: OperationRecord | None = None
    history: list[HistoryEntry] = field(default_factory=list)


class UndoManager:
    """Central manager for undo/redo of one branch.

    Attributes:
        context: Resolved branch, reflog and ledger locations.
    """

    def __init__(
        self,
        vcs: IVersionControl,
        context: RepositoryContext,
        config: DropstitchConfig,
    ) -> None:
        """Initialize the undo manager.

        Args:
            vcs: Version-control collaborator for the repository.
            context: Resolved branch, reflog and ledger locations.
            config: Configuration for this invocation.
        """
        self._vcs = vcs
        self._config = config
        self.context = context

    @classmethod
    def open(
        cls,
        root: Path,
        config: DropstitchConfig,
        vcs: IVersionControl | None = None,
    ) -> UndoManager:
        """Check the repository state and create a manager for its branch.

        Args:
            root: Repository root.
            config: Configuration for this invocation.
            vcs: Collaborator to use instead of the git command line.

        Returns:
            UndoManager for the checked-out branch.

        Raises:
            PreconditionError: If Dropstitch cannot run in this repository.
            UnexpectedBranchOutputError: If the branch state is unreadable.
        """
        if vcs is None:
            vcs = GitRepository(
                root,
                executable=config.git.executable,
                timeout=config.git.timeout,
            )
        context = resolve_context(root, vcs, ledger_dir=config.history.ledger_dir)
        logger.debug(
            "Opened %s on branch %s (ledger %s)",
            context.root,
            context.branch,
            context.ledger_path,
        )
        return cls(vcs, context, config)

    def load_operations(self) -> list[OperationRecord]:
        """Read the branch's reflog.

        Returns:
            Operations, oldest first.
        """
        return read_reflog(
            self.context.reflog_path,
            self._config.history.unknown_operations,
        )

    def load_ledger(self) -> ActionLedger:
        """Open the branch's ledger.

        Returns:
            The ledger; the caller must close it.
        """
        return ActionLedger.load(self.context.ledger_path)

    def undo(self) -> ActionRecord:
        """Undo the most recent operation that is not already undone.

        Returns:
            The ledger record written for the undo.

        Raises:
            NothingToError: If every operation is already undone.
            GitError: If the reset fails; the ledger is left untouched.
        """
        operations = self.load_operations()
        with self.load_ledger() as ledger:
            target = compute_undo_target(operations, ledger)
            if target is None:
                raise NothingToError(ActionKind.UNDO)
            return self._apply(ledger, ActionKind.UNDO, target, target.from_hash)

    def redo(self) -> ActionRecord:
        """Re-apply the most recently undone operation.

        Returns:
            The ledger record written for the redo.

        Raises:
            NothingToError: If nothing is currently undone.
            GitError: If the reset fails; the ledger is left untouched.
        """
        operations = self.load_operations()
        with self.load_ledger() as ledger:
            target = compute_redo_target(operations, ledger)
            if target is None:
                raise NothingToError(ActionKind.REDO)
            return self._apply(ledger, ActionKind.REDO, target, target.to_hash)

    def list_targets(self) -> PendingActions:
        """Describe the branch history and the next undo/redo targets.

        Returns:
            PendingActions for the current branch.
        """
        operations = self.load_operations()
        with self.load_ledger() as ledger:
            return PendingActions(
                branch=self.context.branch,
                undo_target=compute_undo_target(operations, ledger),
                redo_target=compute_redo_target(operations, ledger),
                history=[
                    HistoryEntry(operation, ledger.last_action(operation))
                    for operation in reversed(operations)
                ],
            )

    def _apply(
        self,
        ledger: ActionLedger,
        kind: ActionKind,
        target: OperationRecord,
        commit: str,
    ) -> ActionRecord:
        # The reset must succeed before anything is written to the ledger
        self._vcs.reset_hard(commit)
        record = ledger.append(kind, target)
        logger.info(
            "%s %s on %s: now at %s",
            kind.value.capitalize(),
            target.kind.value,
            self.context.branch,
            commit,
        )
        return record
