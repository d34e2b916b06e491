"""Totals of treasure values per user in a hunt."""

from __future__ import annotations

import sys
from pathlib import Path

from .operations import HuntError
from .records import RecordError, iter_treasures
from .storage import HuntPaths


def _open(hunt_id: str, root):
    paths = HuntPaths(hunt_id, Path(root))
    if not paths.exists():
        raise HuntError(f"Hunt directory does not exist: {paths.directory}")
    try:
        return paths.treasure_file.open("rb")
    except OSError as exc:
        raise HuntError(f"open: {exc}") from exc


def calculate_score(hunt_id: str, user_name: str, root=".") -> int:
    """Return the total value of one user's treasures in a hunt."""
    with _open(hunt_id, root) as records:
        try:
            return sum(t.value for t in iter_treasures(records) if t.user_name == user_name)
        except RecordError as exc:
            raise HuntError("Incomplete treasure entry") from exc


def calculate_all_scores(hunt_id: str, root=".") -> dict[str, int]:
    """Return every user's total in a hunt, the user seen last first.

    An incomplete trailing record is reported on stderr and the totals
    gathered so far are returned.
    """
    totals: dict[str, int] = {}
    with _open(hunt_id, root) as records:
        try:
            for treasure in iter_treasures(records):
                totals[treasure.user_name] = totals.get(treasure.user_name, 0) + treasure.value
        except RecordError:
            sys.stderr.write("Incomplete treasure entry\n")
    return dict(reversed(totals.items()))


def format_scores(hunt_id: str, scores: dict[str, int]) -> str:
    """Return the report printed for a hunt's scores."""
    header = f"\n--------------\nHunt directory: {hunt_id}\n---------------\n"
    return header + "".join(f"{name}: {total}\n" for name, total in scores.items())


def main(argv=None) -> int:
    """Print the scores of the hunt named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        sys.stderr.write("Usage: calculate_score <hunt_id>\n")
        return 1
    hunt_id = args[0]
    try:
        scores = calculate_all_scores(hunt_id)
    except HuntError as exc:
        sys.stderr.write(f"{exc}\n")
        scores = {}
    if not scores:
        print("Failed to calculate scores")
        return 1
    sys.stdout.write(format_scores(hunt_id, scores))
    return 0


if __name__ == "__main__":
    sys.exit(main())