"""Locations of a hunt's files and the small file operations on them."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

TREASURE_DIR = "treasure_hunts"
TREASURE_FILE = "treasure.bin"
TREASURE_LOG = "logged_hunt.txt"
TREASURE_SYMLINK = "logged_hunt"

_DIR_MODE = 0o755


class StorageError(OSError):
    """A hunt's directories, log or link could not be set up."""


@dataclass(frozen=True)
class HuntPaths:
    """The paths belonging to one hunt below a root directory."""

    hunt_id: str
    root: Path = field(default_factory=lambda: Path("."))

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))

    @property
    def base_dir(self) -> Path:
        return self.root / TREASURE_DIR

    @property
    def directory(self) -> Path:
        return self.base_dir / self.hunt_id

    @property
    def treasure_file(self) -> Path:
        return self.directory / TREASURE_FILE

    @property
    def temp_file(self) -> Path:
        return self.directory / f"copy_{TREASURE_FILE}"

    @property
    def log_file(self) -> Path:
        return self.directory / TREASURE_LOG

    @property
    def symlink(self) -> Path:
        return self.root / f"{TREASURE_SYMLINK}-{self.hunt_id}"

    @property
    def link_target(self) -> str:
        """Target of the hunt's log link, relative to the root."""
        return os.path.join(TREASURE_DIR, self.hunt_id, TREASURE_LOG)

    def exists(self) -> bool:
        """Whether the hunt's directory exists."""
        return self.directory.is_dir()

    def ensure_directories(self) -> list[Path]:
        """Create the base and hunt directories; return those newly made."""
        created = []
        for directory in (self.base_dir, self.directory):
            if directory.is_dir():
                continue
            try:
                os.mkdir(directory, _DIR_MODE)
            except OSError as exc:
                raise StorageError(f"Failed to create directory {directory}: {exc}") from exc
            created.append(directory)
        return created

    def create_symlink(self) -> bool:
        """Link the hunt's log into the root; False if the link already exists."""
        link = self.symlink
        if link.is_symlink():
            return False
        if os.path.lexists(link):
            raise StorageError(f"{link.name} is not a symlink!")
        try:
            os.symlink(self.link_target, link)
        except OSError as exc:
            raise StorageError(f"Error creating symlink: {exc}") from exc
        return True

    def append_log(self, entry: str) -> None:
        """Append an entry to the hunt's log file."""
        try:
            with self.log_file.open("a", encoding="utf-8") as log:
                log.write(entry)
        except OSError as exc:
            raise StorageError(f"Error writing to log file: {exc}") from exc