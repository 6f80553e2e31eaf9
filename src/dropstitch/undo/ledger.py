"""Append-only ledger of undo/redo actions for one branch.

The ledger is the only memory Dropstitch has between invocations. It is
replayed in full when opened and only ever appended to afterwards, so a
torn write can at worst damage the final line.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import TracebackType
from typing import IO

from dropstitch.core import LedgerCorruptError, get_logger
from dropstitch.git.reflog import OperationRecord

from .models import ActionKind, ActionRecord, decode_action, encode_action

logger = get_logger("undo.ledger")


class ActionLedger:
    """In-memory replay of a ledger file plus its open append handle.

    Use ``ActionLedger.load()`` to open one, and close it (or use it as a
    context manager) when done.
    """

    def __init__(self, path: Path, handle: IO[str], entries: list[ActionRecord]) -> None:
        """Initialize ledger.

        Args:
            path: Ledger file location.
            handle: File opened in append mode.
            entries: Records already in the file, oldest first.
        """
        self._path = path
        self._handle = handle
        self._entries = entries

    @classmethod
    def load(cls, path: Path) -> ActionLedger:
        """Open a ledger, creating the file and its directory if needed.

        Args:
            path: Ledger file location.

        Returns:
            Ledger holding every record in the file.

        Raises:
            LedgerCorruptError: If any line fails to decode.
            OSError: If the file cannot be created or read.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        # Undecodable bytes survive as surrogates so the bad line can be reported
        handle = open(path, "a+", encoding="utf-8", errors="surrogateescape")
        try:
            handle.seek(0)
            entries: list[ActionRecord] = []
            for line_number, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                try:
                    line.encode("utf-8")
                except UnicodeEncodeError as e:
                    raise LedgerCorruptError(
                        "invalid UTF-8", path=path, line_number=line_number
                    ) from e
                try:
                    entries.append(decode_action(line))
                except LedgerCorruptError as e:
                    raise LedgerCorruptError(str(e), path=path, line_number=line_number) from e
            handle.seek(0, os.SEEK_END)
        except BaseException:
            handle.close()
            raise

        logger.debug("Loaded %d ledger entries from %s", len(entries), path)
        return cls(path, handle, entries)

    @property
    def path(self) -> Path:
        """Ledger file location."""
        return self._path

    @property
    def entries(self) -> tuple[ActionRecord, ...]:
        """All records, oldest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ActionRecord]:
        return iter(self._entries)

    def contains(self, kind: ActionKind, operation: OperationRecord) -> bool:
        """Check whether ``kind`` was ever recorded against ``operation``.

        Args:
            kind: Action to look for.
            operation: Operation the action targeted.

        Returns:
            True if a matching record exists.
        """
        return ActionRecord(kind, operation) in self._entries

    def last_action(self, operation: OperationRecord) -> ActionKind | None:
        """Most recent action recorded against ``operation``.

        Args:
            operation: Operation to look up.

        Returns:
            The latest ActionKind, or None if never actioned.
        """
        for record in reversed(self._entries):
            if record.reference == operation:
                return record.kind
        return None

    def is_undone(self, operation: OperationRecord) -> bool:
        """Check whether ``operation`` is currently undone.

        A later redo supersedes an earlier undo.

        Args:
            operation: Operation to check.

        Returns:
            True if the latest action against it is an undo.
        """
        return self.last_action(operation) is ActionKind.UNDO

    def latest_undone(self, candidates: Iterable[OperationRecord]) -> OperationRecord | None:
        """Find the most recently undone operation among ``candidates``.

        Args:
            candidates: Operations that may be redone.

        Returns:
            The operation, or None if none of them is undone.
        """
        pending = set(candidates)
        for record in reversed(self._entries):
            if record.kind is ActionKind.UNDO and record.reference in pending:
                if self.is_undone(record.reference):
                    return record.reference
        return None

    def append(self, kind: ActionKind, operation: OperationRecord) -> ActionRecord:
        """Durably record an action.

        Call only after the action's reset has succeeded.

        Args:
            kind: Action that was performed.
            operation: Operation it was performed against.

        Returns:
            The record that was written.

        Raises:
            OSError: If the write or sync fails.
        """
        record = ActionRecord(kind, operation)
        self._handle.write(encode_action(record) + "\n")
        self._handle.flush()
        os.fsync(self._handle.fileno())
        self._entries.append(record)

        logger.debug("Appended %s of %s to %s", kind.value, operation.to_hash, self._path)
        return record

    def close(self) -> None:
        """Close the append handle."""
        if not self._handle.closed:
            self._handle.close()

    def __enter__(self) -> ActionLedger:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
