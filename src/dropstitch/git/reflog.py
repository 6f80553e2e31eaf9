"""Branch reflog parsing.

A branch reflog is append-only and chronological: every line records
one update of the branch ref, oldest first::

    <old hash> <new hash> <committer> <timestamp> <tz>\t<action>: <message>

Only history-rewriting entries are turned into OperationRecords; the
rest (plain commits, checkouts, resets) are not an error, just not
interesting.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dropstitch.core import ReflogParseError, get_logger
from dropstitch.core.constants import HASH_LENGTH

logger = get_logger("git.reflog")

REFLOG_LINE_PATTERN = re.compile(
    rf"^(?P<from_hash>[0-9A-Za-z]{{{HASH_LENGTH}}}) "
    rf"(?P<to_hash>[0-9A-Za-z]{{{HASH_LENGTH}}}) "
    # The token must sit in the action before the first colon, not in the message
    r"[^\t]+\t[^:()]*\((?P<op>[^()]+)\): .+$"
)

HASH_PATTERN = re.compile(rf"[0-9A-Za-z]{{{HASH_LENGTH}}}")


class OperationKind(str, Enum):
    """History-rewriting operations Dropstitch knows how to reverse."""

    AMEND = "amend"
    # Reserved: MERGE, RESET, REBASE


class UnknownOperationPolicy(str, Enum):
    """What to do with a reflog entry whose operation token is unknown."""

    SKIP = "skip"
    ERROR = "error"


@dataclass(frozen=True)
class OperationRecord:
    """One history-rewriting entry from a branch reflog.

    Attributes:
        from_hash: Commit the branch pointed at before the operation.
        to_hash: Commit the branch pointed at after the operation.
        kind: The operation that moved the branch.
    """

    from_hash: str
    to_hash: str
    kind: OperationKind = OperationKind.AMEND

    def __post_init__(self) -> None:
        for name in ("from_hash", "to_hash"):
            value = getattr(self, name)
            if not isinstance(value, str) or not HASH_PATTERN.fullmatch(value):
                raise ValueError(f"{name} must be a {HASH_LENGTH}-character object name, got {value!r}")
        if not isinstance(self.kind, OperationKind):
            raise ValueError(f"kind must be an OperationKind, got {self.kind!r}")

    @property
    def short_from(self) -> str:
        """Abbreviated pre-operation hash."""
        return self.from_hash[:7]

    @property
    def short_to(self) -> str:
        """Abbreviated post-operation hash."""
        return self.to_hash[:7]


def parse_reflog_line(
    line: str,
    policy: UnknownOperationPolicy = UnknownOperationPolicy.SKIP,
) -> OperationRecord | None:
    """Parse a single reflog line.

    Args:
        line: Raw reflog line, with or without its trailing newline.
        policy: How to treat a well-formed entry with an unknown operation.

    Returns:
        The OperationRecord, or None if the line is not a recognized
        history-rewriting entry.

    Raises:
        ReflogParseError: If the line has the entry shape but a field
            cannot be extracted, or the operation is unknown under
            UnknownOperationPolicy.ERROR.
    """
    match = REFLOG_LINE_PATTERN.match(line.rstrip("\r\n"))
    if match is None:
        return None

    token = match.group("op").strip()
    if not token:
        raise ReflogParseError("missing operation in reflog entry", line=line)

    try:
        kind = OperationKind(token)
    except ValueError:
        if policy is UnknownOperationPolicy.ERROR:
            raise ReflogParseError(
                f"unsupported operation {token!r} in reflog entry", line=line
            ) from None
        logger.debug("Skipping reflog entry with operation %r", token)
        return None

    return OperationRecord(
        from_hash=match.group("from_hash"),
        to_hash=match.group("to_hash"),
        kind=kind,
    )


def read_reflog(
    path: Path,
    policy: UnknownOperationPolicy = UnknownOperationPolicy.SKIP,
) -> list[OperationRecord]:
    """Read every recognized operation from a reflog file.

    Args:
        path: Path to the branch reflog.
        policy: How to treat well-formed entries with unknown operations.

    Returns:
        Operation records in file order, oldest first.

    Raises:
        OSError: If the reflog cannot be read.
        ReflogParseError: If a matching line cannot be parsed.
    """
    records: list[OperationRecord] = []
    with path.open(encoding="utf-8", errors="replace") as f:
        for line in f:
            record = parse_reflog_line(line, policy)
            if record is not None:
                records.append(record)

    logger.debug("Read %d operation(s) from %s", len(records), path)
    return records
