"""Fixed-size binary treasure records and interactive entry."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterator

ID_SIZE = 16
USER_NAME_SIZE = 16
CLUE_SIZE = 128

_LAYOUT = struct.Struct(f"<{ID_SIZE}s{USER_NAME_SIZE}sff{CLUE_SIZE}si")
RECORD_SIZE = _LAYOUT.size

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class RecordError(ValueError):
    """A treasure record cannot be encoded, decoded or read."""


@dataclass
class Treasure:
    """One treasure of a hunt."""

    id: str
    user_name: str
    latitude: float
    longitude: float
    clue: str
    value: int


def _encode_field(text: str, size: int, name: str) -> bytes:
    raw = text.encode(_ENCODING, _ERRORS)
    if len(raw) >= size:
        raise RecordError(f"{name} is longer than {size - 1} bytes: {text!r}")
    if b"\0" in raw:
        raise RecordError(f"{name} contains a NUL byte")
    return raw


def _decode_field(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(_ENCODING, _ERRORS)


def _clip(text: str, size: int) -> str:
    """Cut text so that it fits a NUL-terminated field of ``size`` bytes."""
    return text.encode(_ENCODING)[: size - 1].decode(_ENCODING, errors="ignore")


def encode_treasure(treasure: Treasure) -> bytes:
    """Return the fixed-size record bytes for a treasure."""
    try:
        return _LAYOUT.pack(
            _encode_field(treasure.id, ID_SIZE, "id"),
            _encode_field(treasure.user_name, USER_NAME_SIZE, "user name"),
            treasure.latitude,
            treasure.longitude,
            _encode_field(treasure.clue, CLUE_SIZE, "clue"),
            treasure.value,
        )
    except (struct.error, OverflowError) as exc:
        raise RecordError(f"cannot encode treasure: {exc}") from exc


def decode_treasure(data: bytes) -> Treasure:
    """Build a treasure from exactly one record's bytes."""
    if len(data) != RECORD_SIZE:
        raise RecordError(
            f"a record is {RECORD_SIZE} bytes, got {len(data)}"
        )
    raw_id, raw_user, latitude, longitude, raw_clue, value = _LAYOUT.unpack(data)
    return Treasure(
        id=_decode_field(raw_id),
        user_name=_decode_field(raw_user),
        latitude=latitude,
        longitude=longitude,
        clue=_decode_field(raw_clue),
        value=value,
    )


def iter_treasures(stream: BinaryIO) -> Iterator[Treasure]:
    """Yield the treasures stored one after another in a binary stream."""
    while chunk := stream.read(RECORD_SIZE):
        if len(chunk) != RECORD_SIZE:
            raise RecordError("incomplete treasure entry")
        yield decode_treasure(chunk)


def _next_token(read_line: Callable[[], str], what: str) -> str:
    while True:
        line = read_line()
        if not line:
            raise RecordError(f"missing {what}")
        tokens = line.split()
        if tokens:
            return tokens[0]


def _next_number(read_line: Callable[[], str], what: str, kind: type):
    token = _next_token(read_line, what)
    try:
        return kind(token)
    except ValueError as exc:
        raise RecordError(f"invalid {what}: {token!r}") from exc


def prompt_treasure(read_line: Callable[[], str], write: Callable[[str], object]) -> Treasure:
    """Ask for a treasure's fields, one line each.

    ``read_line`` returns the next line, or an empty string at end of input.
    """
    write("Enter treasure data: \n")
    write(f"ID (max {ID_SIZE - 1} chars): ")
    treasure_id = _clip(_next_token(read_line, "ID"), ID_SIZE)
    write(f"Username (max {USER_NAME_SIZE - 1} chars): ")
    user_name = _clip(_next_token(read_line, "username"), USER_NAME_SIZE)
    write("Latitude: ")
    latitude = _next_number(read_line, "latitude", float)
    write("Longitude: ")
    longitude = _next_number(read_line, "longitude", float)
    write("Clue text: ")
    line = read_line()
    if not line:
        raise RecordError("missing clue text")
    clue = _clip(line.rstrip("\r\n"), CLUE_SIZE)
    write("Value: ")
    value = _next_number(read_line, "value", int)
    return Treasure(treasure_id, user_name, latitude, longitude, clue, value)