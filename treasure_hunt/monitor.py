"""Monitor process that runs hunt commands on request from the hub."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence, TextIO

from .records import RECORD_SIZE
from .storage import TREASURE_DIR, TREASURE_FILE

COMMAND_FILE = "monitor_command.txt"
BUFFER_SIZE = 1024

MANAGER_COMMAND = (sys.executable, "-m", "treasure_hunt.manager")
CALCULATOR_COMMAND = (sys.executable, "-m", "treasure_hunt.scores")

_STARTED = "Monitor started. Type commands to execute the treasure manager.\n"
_STOPPING = "Monitor stop command, exit in 5s\n"
_INVALID_FORMAT = "Invalid format\n"
_INVALID_COMMAND = "Monitor invalid command\n"


def list_hunts(root=".") -> list[tuple[str, int]]:
    """Return each hunt's name and number of treasures, sorted by name.

    Only directories holding a treasure file are counted. Raises OSError
    when the hunts directory cannot be read.
    """
    hunts = []
    with os.scandir(Path(root) / TREASURE_DIR) as entries:
        for entry in entries:
            if not entry.is_dir(follow_symlinks=False):
                continue
            try:
                size = (Path(entry.path) / TREASURE_FILE).stat().st_size
            except OSError:
                continue
            hunts.append((entry.name, size // RECORD_SIZE))
    return sorted(hunts)


def run_tool(args: Sequence[str]) -> str:
    """Run a program and return what it wrote to standard output.

    Its standard error passes through; its exit status is ignored.
    Raises OSError when the program cannot be started.
    """
    completed = subprocess.run(
        list(args),
        stdout=subprocess.PIPE,
        check=False,
    )
    return completed.stdout.decode("utf-8", errors="replace")


def _emit(stream: TextIO, text: str) -> None:
    stream.write(text)
    stream.flush()


@dataclass
class Monitor:
    """Carries out the commands the hub leaves in the command file."""

    root: str | Path = "."
    output: TextIO | None = None
    console: TextIO | None = None
    command_file: Path = field(default_factory=lambda: Path(COMMAND_FILE))
    manager_command: Sequence[str] = MANAGER_COMMAND
    calculator_command: Sequence[str] = CALCULATOR_COMMAND
    runner: Callable[[Sequence[str]], str] = run_tool
    stop_delay: float = 5.0

    @property
    def _out(self) -> TextIO:
        return sys.stdout if self.output is None else self.output

    @property
    def _con(self) -> TextIO:
        return sys.stdout if self.console is None else self.console

    def _run(self, args: Sequence[str], failure: str) -> None:
        try:
            text = self.runner(list(args))
        except OSError:
            _emit(sys.stderr, failure)
            return
        _emit(self._out, text)

    def _manager(self, *args: str) -> None:
        self._run([*self.manager_command, *args], "Error executing treasure manager\n")

    def _calculator(self, hunt_id: str) -> None:
        self._run([*self.calculator_command, hunt_id], "Error executing calculate score\n")

    def _list_hunts(self) -> None:
        try:
            hunts = list_hunts(self.root)
        except OSError:
            _emit(sys.stderr, "Error opening directory\n")
            return
        _emit(self._out, "".join(f"Hunt: {name} | Treasures: {count}\n" for name, count in hunts))

    def process_command(self, command: str) -> bool:
        """Carry out one command; return False when the monitor should stop."""
        if command == "stop_monitor":
            _emit(self._con, _STOPPING)
            time.sleep(self.stop_delay)
            return False
        if command == "list_hunts":
            self._list_hunts()
            return True

        words = command.split()
        if command.startswith("list_treasures "):
            if len(words) < 2:
                _emit(self._con, _INVALID_FORMAT)
            else:
                self._manager("--list", words[1])
        elif command.startswith("view_treasure "):
            if len(words) < 3:
                _emit(self._con, _INVALID_FORMAT)
            else:
                self._manager("--view", words[1], words[2])
        elif command.startswith("calculate_score "):
            if len(words) < 2:
                _emit(self._con, _INVALID_FORMAT)
            else:
                self._calculator(words[1])
        else:
            _emit(self._out, _INVALID_COMMAND)
        return True

    def read_command_file(self) -> str:
        """Return the command the hub left, at most one buffer's worth."""
        with open(self.command_file, "rb") as source:
            raw = source.read(BUFFER_SIZE - 1)
        return raw.decode("utf-8", errors="replace")

    def run(self) -> None:
        """Announce start, then handle a command for each SIGUSR1 until stopped."""
        _emit(self._con, _STARTED)
        wanted = {signal.SIGUSR1}
        previous = signal.pthread_sigmask(signal.SIG_BLOCK, wanted)
        try:
            while True:
                signal.sigwait(wanted)
                try:
                    command = self.read_command_file()
                except OSError as exc:
                    _emit(sys.stderr, f"Can't read command file: {exc}\n")
                    continue
                if not self.process_command(command):
                    return
        finally:
            signal.pthread_sigmask(signal.SIG_SETMASK, previous)


def main(argv=None) -> int:
    """Start the monitor; an optional argument names the output descriptor."""
    args = list(sys.argv[1:] if argv is None else argv)
    output = None
    if args:
        try:
            descriptor = int(args[0])
        except ValueError:
            sys.stderr.write(f"Invalid output descriptor: {args[0]}\n")
            return 1
        try:
            output = os.fdopen(descriptor, "w", closefd=False)
        except OSError as exc:
            sys.stderr.write(f"Invalid output descriptor: {exc}\n")
            return 1
    Monitor(output=output).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())