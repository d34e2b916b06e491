"""Interactive hub that starts a monitor process and forwards hunt commands to it."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Sequence, TextIO

COMMAND_FILE = "monitor_command.txt"
BUFFER_SIZE = 1024

MONITOR_COMMAND = (sys.executable, "-m", "treasure_hunt.monitor")

_CLEAR_SCREEN = "\033[H\033[J"
_NOT_RUNNING = "Monitor is not running.\n"


class HubCommand(Enum):
    """Kinds of line the hub understands."""

    INVALID_OPERATION = auto()
    EXIT = auto()
    START_MONITOR = auto()
    STOP_MONITOR = auto()
    LIST_HUNTS = auto()
    LIST_TREASURES = auto()
    VIEW_TREASURE = auto()
    HELP = auto()
    CLEAR = auto()
    CALCULATE_SCORE = auto()


class MonitorStatus(Enum):
    """Life-cycle state of the monitor process."""

    OFF = auto()
    RUNNING = auto()
    SHUTTING_DOWN = auto()


_EXACT = {
    "start_monitor": HubCommand.START_MONITOR,
    "stop_monitor": HubCommand.STOP_MONITOR,
    "list_hunts": HubCommand.LIST_HUNTS,
    "help": HubCommand.HELP,
    "clear": HubCommand.CLEAR,
    "exit": HubCommand.EXIT,
}

_PREFIXED = (
    ("list_treasures ", HubCommand.LIST_TREASURES),
    ("view_treasure ", HubCommand.VIEW_TREASURE),
    ("calculate_score ", HubCommand.CALCULATE_SCORE),
)


def parse_command(line: str) -> HubCommand:
    """Return the kind of command a line of input holds."""
    if line in _EXACT:
        return _EXACT[line]
    for prefix, command in _PREFIXED:
        if line.startswith(prefix):
            return command
    return HubCommand.INVALID_OPERATION


def help_text() -> str:
    """Return the list of hub commands."""
    names = (
        "start_monitor",
        "stop_monitor",
        "list_hunts",
        "list_treasures",
        "view_treasure",
        "calculate_score",
        "help",
        "clear",
        "exit",
    )
    return "Commands:\n" + "".join(f"{name}\n" for name in names)


@dataclass
class Hub:
    """Owns the monitor process and the pipe its answers come back on."""

    root: str | Path = "."
    out: TextIO | None = None
    monitor_command: Sequence[str] = MONITOR_COMMAND
    status: MonitorStatus = MonitorStatus.OFF
    _process: subprocess.Popen | None = field(default=None, init=False, repr=False)
    _pipe: int | None = field(default=None, init=False, repr=False)

    @property
    def _stream(self) -> TextIO:
        return sys.stdout if self.out is None else self.out

    def _say(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    @property
    def command_file(self) -> Path:
        return Path(self.root) / COMMAND_FILE

    @property
    def monitor_pid(self) -> int:
        """Process id of the monitor, or -1 when there is none."""
        return -1 if self._process is None else self._process.pid

    def _close_pipe(self) -> None:
        if self._pipe is not None:
            os.close(self._pipe)
            self._pipe = None

    def reap(self) -> None:
        """Notice a monitor that exited by itself and release what it held."""
        if self._process is None or self.status is not MonitorStatus.RUNNING:
            return
        code = self._process.poll()
        if code is None:
            return
        self._say(f"Monitor exited with status {max(code, 0)}\n")
        self._process = None
        self.status = MonitorStatus.OFF
        self._close_pipe()

    def is_monitor_running(self) -> bool:
        """Whether a monitor has been started and not stopped."""
        return self.monitor_pid > 0 and self.status is MonitorStatus.RUNNING

    def start_monitor(self) -> bool:
        """Start the monitor with the write end of a fresh pipe."""
        if self.is_monitor_running():
            self._say("Monitor is already running\n")
            return False
        try:
            read_end, write_end = os.pipe()
        except OSError:
            self._say("Failed to create pipe\n")
            return False
        # The monitor waits for SIGUSR1; keep it blocked until the monitor is ready.
        previous = signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGUSR1})
        try:
            process = subprocess.Popen(
                [*self.monitor_command, str(write_end)],
                pass_fds=(write_end,),
                cwd=self.root,
            )
        except OSError:
            os.close(read_end)
            self._say("Failed to fork monitor process\n")
            return False
        finally:
            signal.pthread_sigmask(signal.SIG_SETMASK, previous)
            os.close(write_end)
        self._close_pipe()
        self._process = process
        self._pipe = read_end
        self.status = MonitorStatus.RUNNING
        return True

    def stop_monitor(self) -> bool:
        """Terminate the monitor and wait for it."""
        if not self.is_monitor_running():
            self._say(_NOT_RUNNING)
            return False
        process = self._process
        self.status = MonitorStatus.SHUTTING_DOWN
        process.terminate()
        process.wait()
        self._process = None
        self._close_pipe()
        self.status = MonitorStatus.OFF
        self._say("Monitor stopped.\n")
        return True

    def send_command(self, command: str) -> str:
        """Hand a command to the monitor and write back its answer.

        Returns the text written.
        """
        try:
            with open(self.command_file, "w", encoding="utf-8") as target:
                target.write(command)
        except OSError as exc:
            sys.stderr.write(f"open command file: {exc}\n")
            return ""
        if self._process is not None:
            try:
                os.kill(self._process.pid, signal.SIGUSR1)
            except OSError:
                pass
        if self._pipe is None:
            reply = "Failed to read from pipe\n"
        else:
            try:
                raw = os.read(self._pipe, BUFFER_SIZE - 1)
            except OSError:
                reply = "Failed to read from pipe\n"
            else:
                reply = raw.decode("utf-8", errors="replace") if raw else "No response from monitor\n"
        self._say(reply)
        return reply

    def _forward(self, command: str) -> None:
        if not self.is_monitor_running():
            self._say(_NOT_RUNNING)
            return
        self.send_command(command)

    def execute(self, line: str) -> bool:
        """Carry out one line of input; return False when the hub should exit."""
        match parse_command(line):
            case HubCommand.START_MONITOR:
                self.start_monitor()
            case HubCommand.STOP_MONITOR:
                self.stop_monitor()
            case HubCommand.LIST_HUNTS:
                self._forward("list_hunts")
            case HubCommand.LIST_TREASURES:
                self._forward(f"list_treasures {line[len('list_treasures '):]}")
            case HubCommand.VIEW_TREASURE:
                self._forward(line)
            case HubCommand.CALCULATE_SCORE:
                self._forward(f"calculate_score {line[len('calculate_score '):]}")
            case HubCommand.HELP:
                self._say(help_text())
            case HubCommand.CLEAR:
                self._say(_CLEAR_SCREEN)
            case HubCommand.EXIT:
                if not self.is_monitor_running():
                    return False
                self._say("Please stop the monitor before exiting.\n")
            case _:
                self._say("Invalid command. Type 'help' for a list of commands.\n")
        return True


def main(argv=None) -> int:
    """Read hub commands from standard input until exit or end of input."""
    hub = Hub()
    previous = signal.signal(signal.SIGCHLD, lambda signum, frame: hub.reap())
    try:
        while True:
            sys.stdout.write("> ")
            sys.stdout.flush()
            line = sys.stdin.readline()
            if not line:
                break
            if line.endswith("\n"):
                line = line[:-1]
            if hub.status is MonitorStatus.SHUTTING_DOWN:
                sys.stdout.write("Monitor is shutting down. Please wait...\n")
                continue
            if not hub.execute(line):
                break
    finally:
        signal.signal(signal.SIGCHLD, previous)
    return 0


if __name__ == "__main__":
    sys.exit(main())