"""Undo system for history-rewriting Git operations.

This package decides which reflog operation to undo or redo next and
keeps a per-branch ledger of what has already been done.

Example:
    from dropstitch.undo import UndoManager

    manager = UndoManager.open(Path("."), config)

    # Undo the last amend
    record = manager.undo()

    # Redo it
    record = manager.redo()
"""

from dropstitch.undo.ledger import ActionLedger
from dropstitch.undo.manager import (
    HistoryEntry,
    PendingActions,
    UndoManager,
    compute_redo_target,
    compute_undo_target,
)
from dropstitch.undo.models import ActionKind, ActionRecord, decode_action, encode_action

__all__ = [
    "ActionKind",
    "ActionLedger",
    "ActionRecord",
    "HistoryEntry",
    "PendingActions",
    "UndoManager",
    "compute_redo_target",
    "compute_undo_target",
    "decode_action",
    "encode_action",
]
