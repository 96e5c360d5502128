"""Worksheet — a named, sparse grid of cells keyed by coordinate."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

import pandas as pd

from sheet_builder import DEFAULT_FORMAT
from sheet_builder.coords import column_number_to_letters, make_coordinate, parse_coordinate
from sheet_builder.formatting import CellValue
from sheet_builder.models import Cell, Dimensions


def _is_nested(value: Any) -> bool:
    return isinstance(value, (list, tuple))


class Worksheet:
    """Cells of one sheet, in insertion order.

    Setters return the worksheet so calls can be chained.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._cells: dict[str, Cell] = {}

    def __repr__(self) -> str:
        return f"Worksheet({self.name!r}, cells={len(self._cells)})"

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells.values())

    @property
    def cells(self) -> Mapping[str, Cell]:
        return MappingProxyType(self._cells)

    def get_name(self) -> str:
        return self.name

    # ── Setting values ───────────────────────────────────────────

    def set_cell(self, coordinate: str, value: CellValue) -> Worksheet:
        """Replace whatever is at *coordinate* with a ``general`` cell."""
        return self.set_cell_with_format(coordinate, value, DEFAULT_FORMAT)

    def set_cell_with_format(self, coordinate: str, value: CellValue, fmt: str) -> Worksheet:
        self._cells[coordinate] = Cell(coordinate, value, fmt)
        return self

    def set_cells(self, data: Sequence[Any]) -> Worksheet:
        """Fill cells from nested row/column data, starting at ``A1``.

        Scalars are written left to right along the current row.  A nested
        sequence is written starting at the current row and column; only once
        it is done does the row advance, and the column stays where it was.
        ``[["a", [1, 2], "b"]]`` therefore lands as A1, B1, C1 and then B2.
        """
        self._set_cells_from(data, 1, 1)
        return self

    def _set_cells_from(self, data: Sequence[Any], row: int, col: int) -> None:
        for value in data:
            if _is_nested(value):
                self._set_cells_from(value, row, col)
                row += 1
            else:
                self.set_cell(make_coordinate(row, col), value)
                col += 1

    # ── Lookups ──────────────────────────────────────────────────

    def get_cell(self, coordinate: str) -> CellValue:
        """Return the raw value at *coordinate*, or ``None`` if unset."""
        cell = self._cells.get(coordinate)
        return cell.value if cell is not None else None

    def get_cell_object(self, coordinate: str) -> Cell | None:
        return self._cells.get(coordinate)

    def find_cells_by_value(self, value: CellValue) -> list[str]:
        """Return coordinates holding *value*, compared by type and equality.

        ``1`` does not match ``1.0`` and ``"1"`` does not match ``1``.
        """
        return [
            coordinate
            for coordinate, cell in self._cells.items()
            if type(cell.value) is type(value) and cell.value == value
        ]

    # ── Shape ────────────────────────────────────────────────────

    def get_dimensions(self) -> Dimensions:
        """Return the highest row and column in use (``0, 0`` when empty).

        Raises
        ------
        MalformedCoordinate
            If a stored coordinate does not parse.
        """
        max_row = 0
        max_col = 0
        for coordinate in self._cells:
            row, col = parse_coordinate(coordinate)
            max_row = max(max_row, row)
            max_col = max(max_col, col)
        return Dimensions(rows=max_row, cols=max_col)

    def to_array(self) -> list[list[CellValue]]:
        """Return a dense grid from ``A1`` to the dimensions, ``None`` for gaps."""
        dims = self.get_dimensions()
        return [
            [self.get_cell(make_coordinate(row, col)) for col in range(1, dims.cols + 1)]
            for row in range(1, dims.rows + 1)
        ]

    def to_frame(self) -> pd.DataFrame:
        """Return :meth:`to_array` as a DataFrame labelled like a spreadsheet."""
        dims = self.get_dimensions()
        columns = [column_number_to_letters(col) for col in range(1, dims.cols + 1)]
        index = pd.RangeIndex(1, dims.rows + 1)
        return pd.DataFrame(self.to_array(), columns=columns, index=index, dtype=object)
