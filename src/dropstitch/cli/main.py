"""CLI entry point for Dropstitch."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from dropstitch import __version__
from dropstitch.config import ConfigLoader
from dropstitch.core import DropstitchError, get_logger, setup_logging
from dropstitch.core.errors import INTERNAL_EXIT_CODE, PRECONDITION_EXIT_CODE
from dropstitch.core.logging import LOG_LEVEL_MAP
from dropstitch.git.reflog import UnknownOperationPolicy
from dropstitch.undo import ActionKind, UndoManager

if TYPE_CHECKING:
    from dropstitch.config import DropstitchConfig
    from dropstitch.undo import ActionRecord, PendingActions

logger = get_logger("cli")

# Subcommands and their single-letter aliases
COMMANDS = {
    "undo": "undo",
    "z": "undo",
    "redo": "redo",
    "y": "redo",
    "list": "list",
    "ls": "list",
}

DEFAULT_COMMAND = "list"

KNOWN_FLAGS = ("-v", "--version", "-h", "--help", "--verbose", "--strict")


def main() -> int:
    """Main entry point for Dropstitch CLI.

    Returns:
        Exit code (0 for success, 2 for precondition failures, 1 otherwise).
    """
    args = sys.argv[1:]

    if "--version" in args or "-v" in args:
        print(f"dropstitch {__version__}")
        return 0

    if "--help" in args or "-h" in args:
        print_help()
        return 0

    for arg in args:
        if arg.startswith("-") and arg not in KNOWN_FLAGS:
            print(f"Error: Unknown option '{arg}'", file=sys.stderr)
            print("Run 'dropstitch --help' for usage information", file=sys.stderr)
            return INTERNAL_EXIT_CODE

    verbose = "--verbose" in args
    strict = "--strict" in args

    positionals = [arg for arg in args if not arg.startswith("-")]
    command = DEFAULT_COMMAND
    named = bool(positionals) and positionals[0] in COMMANDS
    if named:
        command = COMMANDS[positionals.pop(0)]
    if len(positionals) > 1:
        if named:
            print(f"Error: Unexpected argument '{positionals[1]}'", file=sys.stderr)
        else:
            print(f"Error: Unknown command '{positionals[0]}'", file=sys.stderr)
        print("Run 'dropstitch --help' for usage information", file=sys.stderr)
        return INTERNAL_EXIT_CODE

    root = Path(positionals[0]) if positionals else Path.cwd()

    try:
        config = ConfigLoader.for_repository(root).load_all()
    except DropstitchError as e:
        print(f"Error: {e.user_message()}", file=sys.stderr)
        print(
            "Hint: Check your config files at ~/.dropstitch/settings.json or "
            ".dropstitch/settings.json",
            file=sys.stderr,
        )
        return e.exit_code

    # Apply CLI flag overrides to config
    if strict:
        config.history.unknown_operations = UnknownOperationPolicy.ERROR

    setup_logging(
        level=logging.DEBUG if verbose else LOG_LEVEL_MAP[config.logging.level],
        log_file=config.logging.log_file,
        file_logging=config.logging.file_logging,
    )

    return run_command(command, root, config)


def run_command(command: str, root: Path, config: DropstitchConfig) -> int:
    """Run one subcommand and map its outcome to an exit code.

    Args:
        command: Canonical subcommand name (undo, redo or list).
        root: Repository root.
        config: Configuration for this invocation.

    Returns:
        Exit code.
    """
    console = Console(soft_wrap=True)
    err_console = Console(stderr=True, soft_wrap=True)

    try:
        manager = UndoManager.open(root, config)
        if command == "undo":
            render_action(console, manager.undo(), manager.context.branch)
        elif command == "redo":
            render_action(console, manager.redo(), manager.context.branch)
        else:
            render_pending(console, manager.list_targets())
    except DropstitchError as e:
        if e.exit_code == PRECONDITION_EXIT_CODE:
            logger.debug("Precondition failed: %s", e)
            err_console.print(e.user_message(), markup=False, highlight=False)
        else:
            logger.debug("Command %s failed", command, exc_info=True)
            err_console.print(e.user_message(), markup=False, highlight=False)
            err_console.print(
                "Hint: For details, run again with --verbose", markup=False
            )
        return e.exit_code
    except OSError as e:
        logger.debug("Command %s failed", command, exc_info=True)
        err_console.print(f"An internal error occurred: {e}", markup=False, highlight=False)
        err_console.print("Hint: For details, run again with --verbose", markup=False)
        return INTERNAL_EXIT_CODE

    return 0


def render_action(console: Console, record: ActionRecord, branch: str) -> None:
    """Print the outcome of an undo or redo.

    Args:
        console: Console to print to.
        record: Ledger record that was written.
        branch: Branch the action ran on.
    """
    operation = record.reference
    if record.kind is ActionKind.UNDO:
        console.print(
            f"Undid {operation.kind.value} on '{branch}': "
            f"now at {operation.short_from} (was {operation.short_to})",
            markup=False,
            highlight=False,
        )
    else:
        console.print(
            f"Redid {operation.kind.value} on '{branch}': "
            f"now at {operation.short_to} (was {operation.short_from})",
            markup=False,
            highlight=False,
        )


def render_pending(console: Console, pending: PendingActions) -> None:
    """Print the branch history and the next undo/redo targets.

    Args:
        console: Console to print to.
        pending: What undo and redo would act on.
    """
    if not pending.history:
        console.print(f"No undoable operations on '{pending.branch}'", markup=False)
        return

    table = Table(title=f"Operations on '{pending.branch}'")
    table.add_column("#", justify="right")
    table.add_column("Operation")
    table.add_column("Before")
    table.add_column("After")
    table.add_column("State")

    for index, entry in enumerate(pending.history, start=1):
        op = entry.operation
        if op == pending.undo_target:
            state = "next undo"
        elif op == pending.redo_target:
            state = "next redo"
        elif entry.undone:
            state = "undone"
        else:
            state = ""
        table.add_row(str(index), op.kind.value, op.short_from, op.short_to, state)

    console.print(table)


def print_help() -> None:
    """Print help message."""
    help_text = """
Dropstitch - undo or redo any Git operation you thought was permanent

Usage: dropstitch [OPTIONS] [COMMAND] [PATH]

Commands:
  undo, z           Undo the last history-rewriting operation
  redo, y           Redo the last undone operation
  list, ls          List undoable operations (default)

Arguments:
  PATH              Repository root (defaults to the current directory)

Options:
  -v, --version     Show version and exit
  -h, --help        Show this help message
  --strict          Fail on reflog entries with unsupported operations
  --verbose         Show debug logging

Exit codes:
  0  success
  1  internal error
  2  the repository is not in a state Dropstitch can work with
"""
    print(help_text.strip())


if __name__ == "__main__":
    sys.exit(main())
