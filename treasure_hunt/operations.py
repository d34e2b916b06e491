"""Adding, listing, viewing and removing treasures and hunts."""

from __future__ import annotations

import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

from .records import RecordError, Treasure, encode_treasure, iter_treasures
from .storage import HuntPaths, StorageError

_FILE_MODE = 0o644


class HuntError(Exception):
    """A hunt operation could not be carried out."""


@contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except (StorageError, RecordError) as exc:
        raise HuntError(str(exc)) from exc
    except OSError as exc:
        raise HuntError(f"File error: {exc}") from exc


def _hunt(hunt_id: str, root) -> HuntPaths:
    paths = HuntPaths(hunt_id, Path(root))
    if not paths.exists():
        raise HuntError("Hunt directory does not exist")
    return paths


def _open_records(paths: HuntPaths):
    try:
        return paths.treasure_file.open("rb")
    except OSError as exc:
        raise HuntError(f"Error opening file: {exc}") from exc


def add_treasure(hunt_id: str, treasure: Treasure, root=".") -> str:
    """Append a treasure to a hunt, creating the hunt if needed.

    Returns the log entry written.
    """
    paths = HuntPaths(hunt_id, Path(root))
    with _storage_errors():
        record = encode_treasure(treasure)
        paths.ensure_directories()
        paths.treasure_file.touch(_FILE_MODE, exist_ok=True)
        paths.log_file.touch(_FILE_MODE, exist_ok=True)
        paths.create_symlink()
        with paths.treasure_file.open("ab") as records:
            records.write(record)
        entry = f"Added treasure with ID {treasure.id} to hunt {hunt_id}\n"
        paths.append_log(entry)
    return entry


def _listing(treasure: Treasure) -> str:
    return (
        f"ID: {treasure.id}\n"
        f"User: {treasure.user_name}\n"
        f"Latitude: {treasure.latitude:f}\n"
        f"Longitude: {treasure.longitude:f}\n"
        f"Clue: {treasure.clue}\n"
        f"Value: {treasure.value}\n"
        "\n"
    )


def list_treasures(hunt_id: str, root=".", out: TextIO | None = None) -> list[Treasure]:
    """Write a hunt's file details and every treasure in it; return the treasures."""
    out = sys.stdout if out is None else out
    paths = _hunt(hunt_id, root)
    out.write(f"Hunt name: {hunt_id}\n\n")
    try:
        info = paths.treasure_file.stat()
    except OSError as exc:
        raise HuntError("Error getting file status") from exc
    out.write(f"File size: {info.st_size} bytes\n")
    modified = int(info.st_mtime)
    if modified == 0:
        out.write("File has not been modified\n")
        return []
    out.write(f"Last modification time: {time.ctime(modified)}\n\n")

    treasures = []
    with _storage_errors(), _open_records(paths) as records:
        for treasure in iter_treasures(records):
            out.write(_listing(treasure))
            treasures.append(treasure)
    with _storage_errors():
        paths.append_log(f"Listed all treasures in hunt {hunt_id}\n")
    return treasures


def view_treasure(hunt_id: str, treasure_id: str, root=".", out: TextIO | None = None) -> Treasure:
    """Write the details of one treasure and return it."""
    out = sys.stdout if out is None else out
    paths = _hunt(hunt_id, root)
    found = None
    with _storage_errors(), _open_records(paths) as records:
        out.write(f"Searching for treasure with ID: {treasure_id}\n")
        found = next((t for t in iter_treasures(records) if t.id == treasure_id), None)
    if found is None:
        raise HuntError(f"No treasure found with ID '{treasure_id}'")
    out.write(
        f"ID: {found.id}\n"
        f"Username: {found.user_name}\n"
        f"Coordinates: {found.latitude:f}, {found.longitude:f}\n"
        f"Clue: {found.clue}\n"
        f"Value: {found.value}\n"
    )
    with _storage_errors():
        paths.append_log(
            f"Viewed treasure with ID {treasure_id}, user {found.user_name} in hunt {hunt_id}\n"
        )
    return found


def remove_treasure(hunt_id: str, treasure_id: str, root=".") -> str:
    """Remove every treasure with the given ID from a hunt.

    When no treasure is left, the hunt's record file and log link are deleted.
    Returns the log entry written.
    """
    paths = _hunt(hunt_id, root)
    found = False
    with _storage_errors(), _open_records(paths) as records:
        try:
            with paths.temp_file.open("wb") as temp:
                for treasure in iter_treasures(records):
                    if treasure.id == treasure_id:
                        found = True
                    else:
                        temp.write(encode_treasure(treasure))
        except BaseException:
            paths.temp_file.unlink(missing_ok=True)
            raise
    if not found:
        paths.temp_file.unlink(missing_ok=True)
        raise HuntError(f"No treasure found with ID '{treasure_id}'")

    with _storage_errors():
        os.replace(paths.temp_file, paths.treasure_file)
        remaining = paths.treasure_file.stat().st_size
        paths.log_file.touch(_FILE_MODE, exist_ok=True)

    if remaining == 0:
        try:
            paths.treasure_file.unlink()
        except OSError as exc:
            raise HuntError(f"Error removing empty file: {exc}") from exc
        try:
            paths.symlink.unlink()
        except OSError as exc:
            raise HuntError(f"Error removing symlink: {exc}") from exc
        entry = (
            f"Treasure with ID {treasure_id} was removed. There were no more treasures "
            f"in hunt {hunt_id} so the empty file(treasure.bin) was deleted\n"
        )
    else:
        entry = f"Treasure with ID {treasure_id} was removed in hunt {hunt_id}\n"

    with _storage_errors():
        paths.append_log(entry)
    return entry


def remove_hunt(hunt_id: str, root=".") -> list[str]:
    """Delete a hunt's files, its directory and its log link.

    Returns notices about a log link that was missing or not a link.
    """
    paths = _hunt(hunt_id, root)
    for entry in paths.directory.iterdir():
        try:
            entry.unlink()
        except OSError as exc:
            raise HuntError(f"Error removing file: {exc}") from exc

    notices = []
    link = paths.symlink
    if link.is_symlink():
        link.unlink()
    elif os.path.lexists(link):
        notices.append(f"{link.name} is not a symlink!")
    else:
        notices.append(f"Symlink {link.name} does not exist")

    try:
        paths.directory.rmdir()
    except OSError as exc:
        raise HuntError(f"Error removing directory: {exc}") from exc
    return notices