"""Data models — cells and workbook statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Integral
from typing import Any

from sheet_builder import DEFAULT_FORMAT
from sheet_builder.formatting import CellValue, format_value


def _to_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _check_value(value: Any) -> CellValue:
    if value is None or (isinstance(value, (str, int, float)) and not isinstance(value, bool)):
        return value
    raise TypeError(
        f"Cell value must be str, int, float or None, not {type(value).__name__}"
    )


class Cell:
    """A single value + display format at a fixed coordinate.

    The coordinate is fixed at construction; value and format are mutable and
    their setters return the cell so calls can be chained::

        cell.set_format("percentage").set_value(0.75)
    """

    __slots__ = ("_coordinate", "_value", "format")

    def __init__(
        self, coordinate: str, value: CellValue = None, format: str = DEFAULT_FORMAT
    ) -> None:
        self._coordinate = coordinate
        self._value = _check_value(value)
        self.format = format

    def __repr__(self) -> str:
        return f"Cell({self._coordinate!r}, {self._value!r}, {self.format!r})"

    def __str__(self) -> str:
        return self.formatted_value()

    @property
    def coordinate(self) -> str:
        return self._coordinate

    @property
    def value(self) -> CellValue:
        return self._value

    @value.setter
    def value(self, value: CellValue) -> None:
        self._value = _check_value(value)

    def set_value(self, value: CellValue) -> Cell:
        self.value = value
        return self

    def get_value(self) -> CellValue:
        return self._value

    def set_format(self, fmt: str) -> Cell:
        self.format = fmt
        return self

    def get_format(self) -> str:
        return self.format

    def get_coordinate(self) -> str:
        return self._coordinate

    def formatted_value(self) -> str:
        """Return the value rendered under this cell's format."""
        return format_value(self._value, self.format)


@dataclass(frozen=True)
class Dimensions:
    """Highest used row and column of a worksheet (not a bounding box)."""

    rows: int = 0
    cols: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", _to_non_negative_int(self.rows, "rows"))
        object.__setattr__(self, "cols", _to_non_negative_int(self.cols, "cols"))

    def to_dict(self) -> dict[str, int]:
        return {"rows": self.rows, "cols": self.cols}


@dataclass
class WorksheetStats:
    cell_count: int = 0
    dimensions: Dimensions = field(default_factory=Dimensions)

    def __post_init__(self) -> None:
        self.cell_count = _to_non_negative_int(self.cell_count, "cell_count")

    def to_dict(self) -> dict[str, Any]:
        return {"cell_count": self.cell_count, "dimensions": self.dimensions.to_dict()}


@dataclass
class WorkbookStats:
    """Aggregate counts for a workbook.

    Contract invariant: ``total_cell_count`` is the sum of the per-worksheet
    cell counts.
    """

    worksheet_count: int = 0
    total_cell_count: int = 0
    per_worksheet: dict[str, WorksheetStats] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.worksheet_count = _to_non_negative_int(self.worksheet_count, "worksheet_count")
        self.total_cell_count = _to_non_negative_int(self.total_cell_count, "total_cell_count")
        if self.per_worksheet:
            if len(self.per_worksheet) != self.worksheet_count:
                raise ValueError("worksheet_count must match per_worksheet entries")
            summed = sum(stats.cell_count for stats in self.per_worksheet.values())
            if summed != self.total_cell_count:
                raise ValueError("total_cell_count must equal the sum of per-worksheet counts")

    def to_dict(self) -> dict[str, Any]:
        return {
            "worksheet_count": self.worksheet_count,
            "total_cell_count": self.total_cell_count,
            "per_worksheet": {
                name: stats.to_dict() for name, stats in self.per_worksheet.items()
            },
        }
