import io
import signal
import sys
import threading

import pytest

from treasure_hunt.monitor import (
    BUFFER_SIZE,
    CALCULATOR_COMMAND,
    MANAGER_COMMAND,
    Monitor,
    list_hunts,
    main,
    run_tool,
)
from treasure_hunt.operations import add_treasure
from treasure_hunt.records import Treasure


def _treasure(tid, user="ana", value=10):
    return Treasure(tid, user, 1.5, 2.5, "under the tree", value)


class _Recorder:
    def __init__(self, reply="tool output\n"):
        self.calls = []
        self.reply = reply

    def __call__(self, args):
        self.calls.append(list(args))
        return self.reply


def _monitor(tmp_path, runner=None):
    out, con = io.StringIO(), io.StringIO()
    mon = Monitor(
        root=tmp_path,
        output=out,
        console=con,
        command_file=tmp_path / "monitor_command.txt",
        runner=runner or _Recorder(),
        stop_delay=0,
    )
    return mon, out, con


def test_list_hunts_counts_records(tmp_path):
    add_treasure("h1", _treasure("t1"), tmp_path)
    add_treasure("h1", _treasure("t2"), tmp_path)
    add_treasure("h2", _treasure("t3"), tmp_path)
    assert list_hunts(tmp_path) == [("h1", 2), ("h2", 1)]


def test_list_hunts_skips_dirs_without_records_and_files(tmp_path):
    add_treasure("h1", _treasure("t1"), tmp_path)
    (tmp_path / "treasure_hunts" / "empty").mkdir()
    (tmp_path / "treasure_hunts" / "stray.txt").write_text("x")
    assert list_hunts(tmp_path) == [("h1", 1)]


def test_list_hunts_missing_base_raises(tmp_path):
    with pytest.raises(OSError):
        list_hunts(tmp_path)


def test_run_tool_captures_stdout():
    assert run_tool([sys.executable, "-c", "print('hi')"]).strip() == "hi"


def test_run_tool_missing_program_raises(tmp_path):
    with pytest.raises(OSError):
        run_tool([str(tmp_path / "no_such_program")])


def test_list_hunts_command_writes_report(tmp_path):
    add_treasure("h1", _treasure("t1"), tmp_path)
    mon, out, _ = _monitor(tmp_path)
    assert mon.process_command("list_hunts") is True
    assert out.getvalue() == "Hunt: h1 | Treasures: 1\n"


def test_list_hunts_command_without_base_reports_error(tmp_path, capsys):
    mon, out, _ = _monitor(tmp_path)
    assert mon.process_command("list_hunts") is True
    assert "Error opening directory" in capsys.readouterr().err
    assert out.getvalue() == ""


def test_list_treasures_runs_manager(tmp_path):
    runner = _Recorder()
    mon, out, _ = _monitor(tmp_path, runner)
    assert mon.process_command("list_treasures h1") is True
    assert runner.calls == [[*MANAGER_COMMAND, "--list", "h1"]]
    assert out.getvalue() == "tool output\n"


def test_view_treasure_runs_manager(tmp_path):
    runner = _Recorder()
    mon, out, _ = _monitor(tmp_path, runner)
    mon.process_command("view_treasure h1 t7")
    assert runner.calls == [[*MANAGER_COMMAND, "--view", "h1", "t7"]]
    assert out.getvalue() == "tool output\n"


def test_view_treasure_with_one_argument_is_invalid(tmp_path):
    runner = _Recorder()
    mon, out, con = _monitor(tmp_path, runner)
    assert mon.process_command("view_treasure h1") is True
    assert runner.calls == []
    assert con.getvalue() == "Invalid format\n"


def test_calculate_score_runs_calculator(tmp_path):
    runner = _Recorder()
    mon, _, _ = _monitor(tmp_path, runner)
    mon.process_command("calculate_score h1")
    assert runner.calls == [[*CALCULATOR_COMMAND, "h1"]]


def test_unknown_command(tmp_path):
    runner = _Recorder()
    mon, out, _ = _monitor(tmp_path, runner)
    assert mon.process_command("dance") is True
    assert out.getvalue() == "Monitor invalid command\n"
    assert runner.calls == []


def test_stop_monitor_returns_false(tmp_path):
    mon, _, con = _monitor(tmp_path)
    assert mon.process_command("stop_monitor") is False
    assert con.getvalue() == "Monitor stop command, exit in 5s\n"


def test_tool_that_cannot_start_is_reported(tmp_path, capsys):
    def failing(args):
        raise FileNotFoundError(args[0])

    mon, out, _ = _monitor(tmp_path, failing)
    assert mon.process_command("list_treasures h1") is True
    assert "Error executing treasure manager" in capsys.readouterr().err
    assert out.getvalue() == ""


def test_read_command_file(tmp_path):
    mon, _, _ = _monitor(tmp_path)
    mon.command_file.write_text("view_treasure h1 t1")
    assert mon.read_command_file() == "view_treasure h1 t1"


def test_read_command_file_is_limited_to_buffer(tmp_path):
    mon, _, _ = _monitor(tmp_path)
    mon.command_file.write_text("a" * (BUFFER_SIZE * 2))
    assert len(mon.read_command_file()) == BUFFER_SIZE - 1


def test_read_command_file_missing_raises(tmp_path):
    mon, _, _ = _monitor(tmp_path)
    with pytest.raises(OSError):
        mon.read_command_file()


def test_run_stops_on_stop_command(tmp_path):
    mon, _, con = _monitor(tmp_path)
    mon.command_file.write_text("stop_monitor")
    previous = signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGUSR1})
    try:
        signal.pthread_kill(threading.get_ident(), signal.SIGUSR1)
        mon.run()
    finally:
        signal.pthread_sigmask(signal.SIG_SETMASK, previous)
    text = con.getvalue()
    assert text.startswith("Monitor started.")
    assert text.endswith("Monitor stop command, exit in 5s\n")


def test_main_rejects_bad_descriptor(capsys):
    assert main(["not-a-number"]) == 1
    assert "Invalid output descriptor" in capsys.readouterr().err