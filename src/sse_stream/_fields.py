"""
Classification of a single event-stream line into a field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

MAX_RETRY_MS = 2**64 - 1


@dataclass(frozen=True, slots=True)
class Comment:
    text: str


@dataclass(frozen=True, slots=True)
class EventType:
    value: str


@dataclass(frozen=True, slots=True)
class Data:
    value: str


@dataclass(frozen=True, slots=True)
class Id:
    value: str


@dataclass(frozen=True, slots=True)
class Retry:
    milliseconds: int


@dataclass(frozen=True, slots=True)
class DispatchMarker:
    """A blank line: end of the current block."""


@dataclass(frozen=True, slots=True)
class Ignored:
    """Unknown field name, or a known field with an unusable value."""

    name: str
    value: str


Field = Union[Comment, EventType, Data, Id, Retry, DispatchMarker, Ignored]


def _parse_retry(value: str) -> int | None:
    if not (value and value.isascii() and value.isdigit()):
        return None
    # u64: a lo sumo 20 dígitos significativos.
    digits = value.lstrip("0") or "0"
    if len(digits) > 20 or int(digits) > MAX_RETRY_MS:
        return None
    return int(digits)


def split_line(line: str) -> tuple[str, str]:
    """
    Split a line into field name and value.

    The value is everything after the first ``:``, minus exactly one leading
    space. A line without ``:`` is a field name with an empty value.
    """
    name, _, value = line.partition(":")
    if value.startswith(" "):
        value = value[1:]
    return name, value


def parse_field(line: str) -> Field:
    """
    Parse one terminator-stripped line into a Field.

    Never raises: malformed or unknown fields come back as ``Ignored``.

    Args:
        line: A complete line without its terminator.

    Returns:
        The field the line represents.
    """
    if not line:
        return DispatchMarker()
    if line.startswith(":"):
        return Comment(line[1:])

    name, value = split_line(line)

    if name == "event":
        return EventType(value)
    if name == "data":
        return Data(value)
    if name == "id":
        if "\0" in value:
            return Ignored(name, value)
        return Id(value)
    if name == "retry":
        milliseconds = _parse_retry(value)
        if milliseconds is None:
            return Ignored(name, value)
        return Retry(milliseconds)
    return Ignored(name, value)
