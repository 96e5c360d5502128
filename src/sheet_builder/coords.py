"""Coordinate codec — column letters <-> numbers, ``"C12"`` <-> ``(12, 3)``."""

from __future__ import annotations

import re

_COORDINATE_RE = re.compile(r"([A-Z]+)([0-9]+)")
_LETTERS_RE = re.compile(r"[A-Z]+")


class MalformedCoordinate(ValueError):
    """Raised when a coordinate string is not ``{LETTERS}{ROW}``."""

    def __init__(self, coordinate: str) -> None:
        super().__init__(f"Malformed coordinate: {coordinate!r}")
        self.coordinate = coordinate


def column_number_to_letters(n: int) -> str:
    """Return the spreadsheet column name for 1-based column *n*.

    Bijective base-26: there is no zero digit, so 26 is ``Z`` and 27 is
    ``AA``.  Returns ``""`` for ``n <= 0``.
    """
    if n <= 0:
        return ""
    if n <= 26:
        return chr(ord("A") + n - 1)
    return column_number_to_letters((n - 1) // 26) + chr(ord("A") + (n - 1) % 26)


def letters_to_column_number(letters: str) -> int:
    """Return the 1-based column number for column name *letters*."""
    if not _LETTERS_RE.fullmatch(letters):
        raise MalformedCoordinate(letters)
    number = 0
    for ch in letters:
        number = number * 26 + (ord(ch) - ord("A") + 1)
    return number


def parse_coordinate(coordinate: str) -> tuple[int, int]:
    """Split *coordinate* into ``(row, col)``.

    Raises
    ------
    MalformedCoordinate
        If *coordinate* is not uppercase letters followed by a positive row.
    """
    match = _COORDINATE_RE.fullmatch(coordinate) if isinstance(coordinate, str) else None
    if match is None:
        raise MalformedCoordinate(str(coordinate))
    row = int(match.group(2))
    if row < 1:
        raise MalformedCoordinate(coordinate)
    return row, letters_to_column_number(match.group(1))


def make_coordinate(row: int, col: int) -> str:
    return f"{column_number_to_letters(col)}{row}"
