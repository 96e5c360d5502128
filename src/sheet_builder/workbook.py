"""Workbook builder — named worksheets plus whole-document operations."""

from __future__ import annotations

import html
import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any

from sheet_builder import DEFAULT_AUTHOR, DEFAULT_TITLE
from sheet_builder.formatting import CellValue, plain_text
from sheet_builder.io import write_text
from sheet_builder.models import WorkbookStats, WorksheetStats
from sheet_builder.utils import local_timestamp
from sheet_builder.worksheet import Worksheet

logger = logging.getLogger(__name__)

_INDENT = "  "


class DuplicateWorksheetName(ValueError):
    """Raised when a worksheet name is already taken in the workbook."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Worksheet {name!r} already exists")
        self.name = name


def _csv_field(value: CellValue) -> str:
    return '"' + plain_text(value).replace('"', '""') + '"'


class Workbook:
    """Top-level document: worksheets by name, in creation order."""

    def __init__(self, title: str = DEFAULT_TITLE, author: str = DEFAULT_AUTHOR) -> None:
        self.title = title
        self.author = author
        self._worksheets: dict[str, Worksheet] = {}

    def __repr__(self) -> str:
        return f"Workbook({self.title!r}, worksheets={list(self._worksheets)})"

    def __len__(self) -> int:
        return len(self._worksheets)

    def __contains__(self, name: object) -> bool:
        return name in self._worksheets

    def __iter__(self) -> Iterator[str]:
        return iter(self._worksheets)

    @property
    def worksheets(self) -> Mapping[str, Worksheet]:
        return MappingProxyType(self._worksheets)

    # ── Worksheets ───────────────────────────────────────────────

    def create_worksheet(self, name: str) -> Worksheet:
        """Create, register and return an empty worksheet called *name*.

        Raises
        ------
        DuplicateWorksheetName
            If *name* is taken; the workbook is left unchanged.
        """
        if name in self._worksheets:
            raise DuplicateWorksheetName(name)
        worksheet = Worksheet(name)
        self._worksheets[name] = worksheet
        return worksheet

    def get_worksheet(self, name: str) -> Worksheet | None:
        return self._worksheets.get(name)

    def import_from_array(self, name: str, data: Sequence[Any]) -> Workbook:
        """Create worksheet *name* and fill it with :meth:`Worksheet.set_cells`.

        The worksheet is only registered once it is fully filled, so a bad
        value leaves the workbook unchanged.
        """
        if name in self._worksheets:
            raise DuplicateWorksheetName(name)
        worksheet = Worksheet(name).set_cells(data)
        self._worksheets[name] = worksheet
        return self

    def clone_worksheet(self, source: str, target: str) -> bool:
        """Copy every cell of *source* into a new worksheet *target*.

        Returns ``False`` when *source* does not exist.  An existing *target*
        raises :class:`DuplicateWorksheetName` before anything is created.
        """
        source_ws = self._worksheets.get(source)
        if source_ws is None:
            return False
        target_ws = self.create_worksheet(target)
        for cell in source_ws:
            target_ws.set_cell_with_format(cell.coordinate, cell.value, cell.format)
        return True

    # ── Queries ──────────────────────────────────────────────────

    def search_value(self, value: CellValue) -> dict[str, list[str]]:
        """Return ``{sheet: [coordinates]}`` for sheets containing *value*."""
        results: dict[str, list[str]] = {}
        for name, worksheet in self._worksheets.items():
            found = worksheet.find_cells_by_value(value)
            if found:
                results[name] = found
        return results

    def get_statistics(self) -> WorkbookStats:
        per_worksheet = {
            name: WorksheetStats(cell_count=len(ws), dimensions=ws.get_dimensions())
            for name, ws in self._worksheets.items()
        }
        return WorkbookStats(
            worksheet_count=len(self._worksheets),
            total_cell_count=sum(stats.cell_count for stats in per_worksheet.values()),
            per_worksheet=per_worksheet,
        )

    # ── Export ───────────────────────────────────────────────────

    def to_markup(self, created: datetime | None = None) -> str:
        """Render the workbook as an XML-like document.

        Cells appear in each worksheet's insertion order with their formatted
        value as escaped element text.  *created* defaults to now (local time).
        """
        stamp = local_timestamp(created)
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            "<workbook>",
            f"{_INDENT}<properties>",
            f"{_INDENT * 2}<title>{html.escape(self.title)}</title>",
            f"{_INDENT * 2}<author>{html.escape(self.author)}</author>",
            f"{_INDENT * 2}<created>{stamp}</created>",
            f"{_INDENT}</properties>",
            f"{_INDENT}<worksheets>",
        ]
        for name, worksheet in self._worksheets.items():
            lines.append(f'{_INDENT * 2}<worksheet name="{html.escape(name)}">')
            for cell in worksheet:
                lines.append(
                    f'{_INDENT * 3}<cell coordinate="{html.escape(cell.coordinate)}" '
                    f'format="{html.escape(cell.format)}">'
                    f"{html.escape(cell.formatted_value())}</cell>"
                )
            lines.append(f"{_INDENT * 2}</worksheet>")
        lines.append(f"{_INDENT}</worksheets>")
        lines.append("</workbook>")
        return "\n".join(lines)

    def to_csv(self) -> str:
        """Render every worksheet as a marker line, quoted dense rows, blank line."""
        parts: list[str] = []
        for name, worksheet in self._worksheets.items():
            parts.append(f"=== Worksheet: {name} ===\n")
            for row in worksheet.to_array():
                parts.append(",".join(_csv_field(value) for value in row) + "\n")
            parts.append("\n")
        return "".join(parts)

    def save(self, path: str | Path) -> bool:
        """Write :meth:`to_markup` to *path*; ``False`` on any write failure."""
        return self._write(path, self.to_markup)

    def save_csv(self, path: str | Path) -> bool:
        """Write :meth:`to_csv` to *path*; ``False`` on any write failure."""
        return self._write(path, self.to_csv)

    def _write(self, path: str | Path, render: Callable[[], str]) -> bool:
        content = render()
        try:
            write_text(Path(path), content)
        except (OSError, ValueError) as exc:
            logger.warning("Could not write workbook %r to %s: %s", self.title, path, exc)
            return False
        return True
