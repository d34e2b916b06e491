"""Command line for adding, listing, viewing and removing treasures."""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path

from .operations import (
    HuntError,
    add_treasure,
    list_treasures,
    remove_hunt,
    remove_treasure,
    view_treasure,
)
from .records import RecordError, prompt_treasure
from .storage import HuntPaths, StorageError


class Operation(Enum):
    """What the command line asks the manager to do."""

    INVALID_OPERATION = "invalid"
    HELP = "--help"
    ADD_TREASURE = "--add"
    LIST_TREASURE = "--list"
    VIEW_TREASURE = "--view"
    REMOVE_TREASURE = "--remove_treasure"
    REMOVE_HUNT = "--remove_hunt"


# Number of arguments, the option included, that each operation takes.
_ARITY = {
    Operation.ADD_TREASURE: 2,
    Operation.LIST_TREASURE: 2,
    Operation.VIEW_TREASURE: 3,
    Operation.REMOVE_TREASURE: 3,
    Operation.REMOVE_HUNT: 2,
    Operation.HELP: 1,
}


def parse_args(argv) -> Operation:
    """Return the operation named by the arguments (program name excluded)."""
    args = list(argv)
    if not args:
        return Operation.INVALID_OPERATION
    try:
        operation = Operation(args[0])
    except ValueError:
        return Operation.INVALID_OPERATION
    if operation is Operation.INVALID_OPERATION or _ARITY[operation] != len(args):
        return Operation.INVALID_OPERATION
    return operation


def help_text() -> str:
    """Return the usage message."""
    return (
        "Usage: ./treasure_manager [operation] [options]\n"
        "Operations:\n"
        "  --add <hunt_id>             Add a new treasure to a hunt\n"
        "  --list <hunt_id>            List all treasures in a hunt\n"
        "  --view <hunt_id> <treasure_id> View a specific treasure\n"
        "  --remove_treasure <hunt_id> <treasure_id> Remove a treasure\n"
        "  --remove_hunt <hunt_id>     Remove an entire hunt\n"
        "  --help                      Show this help message\n"
    )


def _add(hunt_id: str, root: str = ".") -> None:
    paths = HuntPaths(hunt_id, Path(root))
    for directory in paths.ensure_directories():
        print(f"Directory created successfully: {directory}")
    if paths.create_symlink():
        print(f"Symlink created successfully: {paths.symlink.name} -> {paths.link_target}")
    else:
        print(f"Symlink already exists: {paths.symlink.name}")
    treasure = prompt_treasure(sys.stdin.readline, sys.stdout.write)
    add_treasure(hunt_id, treasure, root)


def main(argv=None) -> int:
    """Run one manager operation from command-line arguments."""
    args = list(sys.argv[1:] if argv is None else argv)
    operation = parse_args(args)
    try:
        match operation:
            case Operation.ADD_TREASURE:
                _add(args[1])
            case Operation.LIST_TREASURE:
                list_treasures(args[1], ".", sys.stdout)
            case Operation.VIEW_TREASURE:
                view_treasure(args[1], args[2], ".", sys.stdout)
            case Operation.REMOVE_TREASURE:
                remove_treasure(args[1], args[2], ".")
            case Operation.REMOVE_HUNT:
                for notice in remove_hunt(args[1], "."):
                    print(notice)
            case _:
                sys.stdout.write(help_text())
    except (HuntError, StorageError, RecordError) as exc:
        print(exc)
    return 0


if __name__ == "__main__":
    sys.exit(main())