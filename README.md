# treasure_hunt

A small toolkit for running treasure hunts from the terminal. Each hunt is a
directory of fixed-size treasure records. A manager adds, lists, views and
removes treasures; a calculator totals each user's score; and an interactive
hub starts a background monitor that runs those tools on request.

It needs a POSIX system: the hub and the monitor talk through `SIGUSR1`, a
command file and a pipe.

## Installing

```
pip install .
```

This installs four commands: `treasure-manager`, `treasure-calculator`,
`treasure-monitor` and `treasure-hub`. All of them work relative to the
current directory.

## Where the data lives

```
treasure_hunts/
    <hunt_id>/
        treasure.bin        treasure records, one after another
        logged_hunt.txt     a log line for each add, list, view and remove
logged_hunt-<hunt_id>       symbolic link to treasure_hunts/<hunt_id>/logged_hunt.txt
```

A treasure has an ID, a user name, a latitude and longitude, a clue text and
an integer value. Each record is 172 bytes, little-endian: a 16-byte ID, a
16-byte user name, two 32-bit floats, a 128-byte clue and a 32-bit integer;
the text fields are NUL-terminated, so they hold at most 15, 15 and 127 bytes.

## Managing treasures

```
treasure-manager --add <hunt_id>
treasure-manager --list <hunt_id>
treasure-manager --view <hunt_id> <treasure_id>
treasure-manager --remove_treasure <hunt_id> <treasure_id>
treasure-manager --remove_hunt <hunt_id>
treasure-manager --help
```

- `--add` creates the hunt's directories, log file and log link if needed,
  then asks on standard input for the ID, user name, latitude, longitude,
  clue text and value, and appends the treasure.
- `--list` prints the hunt's name, the size and last modification time of its
  treasure file, and every treasure in it.
- `--view` prints the first treasure with the given ID.
- `--remove_treasure` deletes every treasure with the given ID; when none is
  left, the treasure file and the hunt's log link are removed as well.
- `--remove_hunt` deletes the hunt's files, its directory and its log link.

Any other option or number of arguments prints the usage text. Errors are
printed as a message; the command still exits with status 0.

## Scores

```
treasure-calculator <hunt_id>
```

prints a header naming the hunt and then one `user: total` line per user,
the user whose treasure appears last in the file first. It prints
`Failed to calculate scores` and exits with status 1 when the hunt is missing
or has no treasures.

## The hub

```
treasure-hub
```

opens a `> ` prompt that accepts:

| command                              | effect                                       |
|--------------------------------------|----------------------------------------------|
| `start_monitor`                      | start the background monitor                 |
| `stop_monitor`                       | terminate it and wait for it to exit         |
| `list_hunts`                         | every hunt with its number of treasures      |
| `list_treasures <hunt_id>`           | the manager's `--list` output for the hunt   |
| `view_treasure <hunt_id> <id>`       | the manager's `--view` output                |
| `calculate_score <hunt_id>`          | the calculator's output for the hunt         |
| `help`                               | list the commands                            |
| `clear`                              | clear the screen                             |
| `exit`                               | leave, once the monitor has been stopped     |

The hub writes each request to `monitor_command.txt`, sends the monitor
`SIGUSR1`, and prints what comes back in one read of the pipe (up to 1023
bytes). If the monitor exits by itself, the hub reports its exit status.

The monitor (`treasure-monitor [fd]`) is normally started by the hub, which
passes it the pipe's descriptor; without one it answers on standard output.
Besides the commands above it accepts `stop_monitor` in the command file,
which makes it exit after five seconds.

## From Python

- `treasure_hunt.records`: `Treasure`, `encode_treasure`, `decode_treasure`,
  `iter_treasures`, `prompt_treasure`, `RecordError`.
- `treasure_hunt.storage`: `HuntPaths` (the paths of one hunt below a root
  directory, with `exists`, `ensure_directories`, `create_symlink`,
  `append_log`) and `StorageError`.
- `treasure_hunt.operations`: `add_treasure`, `list_treasures`,
  `view_treasure`, `remove_treasure`, `remove_hunt`, each taking a `root`
  directory and raising `HuntError` on failure.
- `treasure_hunt.scores`: `calculate_score`, `calculate_all_scores`,
  `format_scores`.
- `treasure_hunt.manager`: `parse_args`, `help_text`, `Operation`.
- `treasure_hunt.monitor`: `list_hunts`, `run_tool`, `Monitor`.
- `treasure_hunt.hub`: `parse_command`, `help_text`, `Hub`, `HubCommand`,
  `MonitorStatus`.

```python
from treasure_hunt.operations import add_treasure, view_treasure
from treasure_hunt.records import Treasure

add_treasure("park", Treasure("t1", "alice", 45.75, 21.23, "Under the bench", 10), root=".")
view_treasure("park", "t1", root=".")
```