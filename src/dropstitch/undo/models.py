"""Undo system data models.

This module provides the records stored in a branch ledger:
- ActionKind: whether an operation was undone or redone
- ActionRecord: one action performed against one OperationRecord

and the line codec used to persist them, one JSON object per line::

    {"action": "undo", "reference": {"from_hash": "...", "to_hash": "...", "operation": "amend"}}

Example:
    record = ActionRecord(ActionKind.UNDO, operation)
    line = encode_action(record)
    assert decode_action(line) == record
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dropstitch.core import LedgerCorruptError
from dropstitch.git.reflog import OperationKind, OperationRecord


class ActionKind(str, Enum):
    """Action Dropstitch performed against an operation."""

    UNDO = "undo"
    REDO = "redo"


@dataclass(frozen=True)
class ActionRecord:
    """A durable fact: ``kind`` was performed against ``reference``.

    Attributes:
        kind: Whether the operation was undone or redone.
        reference: The reflog operation the action targeted.
    """

    kind: ActionKind
    reference: OperationRecord

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation.
        """
        return {
            "action": self.kind.value,
            "reference": {
                "from_hash": self.reference.from_hash,
                "to_hash": self.reference.to_hash,
                "operation": self.reference.kind.value,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActionRecord:
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation.

        Returns:
            ActionRecord instance.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a field holds an invalid value.
            TypeError: If a field has the wrong type.
        """
        reference = data["reference"]
        if not isinstance(reference, dict):
            raise TypeError("reference must be an object")

        return cls(
            kind=ActionKind(data["action"]),
            reference=OperationRecord(
                from_hash=reference["from_hash"],
                to_hash=reference["to_hash"],
                kind=OperationKind(reference["operation"]),
            ),
        )


def encode_action(record: ActionRecord) -> str:
    """Encode a record as a single ledger line.

    Args:
        record: Record to encode.

    Returns:
        Compact JSON text without a trailing newline.
    """
    return json.dumps(record.to_dict(), separators=(",", ":"))


def decode_action(line: str) -> ActionRecord:
    """Decode one ledger line.

    Args:
        line: Line as read from the ledger, trailing newline allowed.

    Returns:
        The decoded ActionRecord.

    Raises:
        LedgerCorruptError: If the line is not a valid encoded record.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise LedgerCorruptError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise LedgerCorruptError(f"expected an object, got {type(data).__name__}")

    try:
        return ActionRecord.from_dict(data)
    except KeyError as e:
        raise LedgerCorruptError(f"missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise LedgerCorruptError(str(e)) from e
