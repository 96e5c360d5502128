from __future__ import annotations

import pandas as pd
import pytest

from sheet_builder.coords import MalformedCoordinate
from sheet_builder.models import Cell, Dimensions
from sheet_builder.worksheet import Worksheet


@pytest.fixture
def sheet() -> Worksheet:
    return Worksheet("TestSheet")


def _layout(ws: Worksheet) -> dict[str, object]:
    return {coordinate: cell.value for coordinate, cell in ws.cells.items()}


def test_set_cell_then_get_cell_returns_same_value(sheet: Worksheet) -> None:
    sheet.set_cell("A1", "x")

    assert sheet.get_cell("A1") == "x"
    assert sheet.get_name() == "TestSheet"


def test_set_cell_chains_and_uses_general_format(sheet: Worksheet) -> None:
    returned = sheet.set_cell("A1", "Name").set_cell("B1", "Value")

    assert returned is sheet
    cell = sheet.get_cell_object("B1")
    assert isinstance(cell, Cell)
    assert cell.format == "general"
    assert cell.coordinate == "B1"


def test_set_cell_replaces_existing_cell_and_format(sheet: Worksheet) -> None:
    sheet.set_cell_with_format("B1", 100, "currency")
    original = sheet.get_cell_object("B1")

    sheet.set_cell("B1", 200)

    replaced = sheet.get_cell_object("B1")
    assert replaced is not original
    assert replaced is not None and replaced.format == "general"
    assert replaced.value == 200
    assert original is not None and original.value == 100


def test_set_cell_with_format_renders(sheet: Worksheet) -> None:
    sheet.set_cell_with_format("B1", 100, "currency")

    cell = sheet.get_cell_object("B1")
    assert cell is not None
    assert cell.formatted_value() == "$100.00"


def test_missing_cells_return_none(sheet: Worksheet) -> None:
    assert sheet.get_cell("Z9") is None
    assert sheet.get_cell_object("Z9") is None
    assert "Z9" not in sheet


def test_reassignment_keeps_insertion_position(sheet: Worksheet) -> None:
    sheet.set_cell("B1", 1).set_cell("A1", 2).set_cell("B1", 3)

    assert list(sheet.cells) == ["B1", "A1"]


def test_cells_view_is_read_only(sheet: Worksheet) -> None:
    sheet.set_cell("A1", 1)

    with pytest.raises(TypeError):
        sheet.cells["A2"] = Cell("A2", 2)  # type: ignore[index]


# ── set_cells traversal ─────────────────────────────────────────


def test_set_cells_regular_rows(sheet: Worksheet) -> None:
    sheet.set_cells([
        ["Name", "Age", "Salary"],
        ["John", 30, 50000],
        ["Jane", 25, 45000],
    ])

    assert sheet.get_cell("A1") == "Name"
    assert sheet.get_cell("C2") == 50000
    assert sheet.get_cell("A3") == "Jane"
    assert sheet.get_dimensions() == Dimensions(3, 3)


def test_set_cells_top_level_scalars_share_the_first_row(sheet: Worksheet) -> None:
    returned = sheet.set_cells(["x", "y"])

    assert returned is sheet
    assert _layout(sheet) == {"A1": "x", "B1": "y"}


def test_set_cells_nested_sequence_continues_at_current_column(sheet: Worksheet) -> None:
    sheet.set_cells([
        ["Product", "Q1", "Q2", "Q3", "Q4"],
        ["Laptops", [100, 120, 110, 130]],
        ["Phones", [200, 180, 220, 250]],
    ])

    assert _layout(sheet) == {
        "A1": "Product", "B1": "Q1", "C1": "Q2", "D1": "Q3", "E1": "Q4",
        "A2": "Laptops", "B2": 100, "C2": 120, "D2": 110, "E2": 130,
        "A3": "Phones", "B3": 200, "C3": 180, "D3": 220, "E3": 250,
    }


def test_set_cells_row_advances_only_after_nested_sequence(sheet: Worksheet) -> None:
    sheet.set_cells([["a", [1, 2], "b"]])

    assert _layout(sheet) == {"A1": "a", "B1": 1, "C1": 2, "B2": "b"}


def test_set_cells_scalar_after_nested_row_keeps_outer_column(sheet: Worksheet) -> None:
    sheet.set_cells([["a", "b"], "c", ["d"]])

    # "c" lands on row 2 at column 1; ["d"] starts at row 2, column 2
    assert _layout(sheet) == {"A1": "a", "B1": "b", "A2": "c", "B2": "d"}


def test_set_cells_treats_strings_and_tuples_correctly(sheet: Worksheet) -> None:
    sheet.set_cells([("ab", "cd"), ("ef",)])

    assert _layout(sheet) == {"A1": "ab", "B1": "cd", "A2": "ef"}


def test_set_cells_overwrites_existing_values(sheet: Worksheet) -> None:
    sheet.set_cell_with_format("A1", 5, "currency")

    sheet.set_cells([["new"]])

    cell = sheet.get_cell_object("A1")
    assert cell is not None
    assert cell.value == "new"
    assert cell.format == "general"


# ── search ──────────────────────────────────────────────────────


def test_find_cells_by_value_in_insertion_order(sheet: Worksheet) -> None:
    sheet.set_cell("C3", "John").set_cell("A1", "John").set_cell("B2", "Jane")
    sheet.set_cell("Z99", "DeepValue")

    assert sheet.find_cells_by_value("John") == ["C3", "A1"]
    assert sheet.find_cells_by_value("DeepValue") == ["Z99"]
    assert sheet.find_cells_by_value("nobody") == []


def test_find_cells_by_value_does_not_coerce_types(sheet: Worksheet) -> None:
    sheet.set_cell("A1", 1).set_cell("A2", 1.0).set_cell("A3", "1")

    assert sheet.find_cells_by_value(1) == ["A1"]
    assert sheet.find_cells_by_value(1.0) == ["A2"]
    assert sheet.find_cells_by_value("1") == ["A3"]


def test_find_cells_by_value_none_matches_empty_cells(sheet: Worksheet) -> None:
    sheet.set_cell("A1", None).set_cell("A2", "")

    assert sheet.find_cells_by_value(None) == ["A1"]


# ── dimensions / array ──────────────────────────────────────────


def test_dimensions_of_empty_sheet(sheet: Worksheet) -> None:
    assert sheet.get_dimensions() == Dimensions(0, 0)
    assert sheet.get_dimensions().to_dict() == {"rows": 0, "cols": 0}


def test_dimensions_are_maxima_not_bounding_box(sheet: Worksheet) -> None:
    sheet.set_cell("D2", 1).set_cell("B9", 2).set_cell("AA1", 3)

    assert sheet.get_dimensions() == Dimensions(rows=9, cols=27)


def test_dimensions_raise_for_malformed_coordinate(sheet: Worksheet) -> None:
    sheet.set_cell("A1", 1).set_cell("bad", 2)

    with pytest.raises(MalformedCoordinate):
        sheet.get_dimensions()
    with pytest.raises(MalformedCoordinate):
        sheet.to_array()


def test_to_array_empty_sheet(sheet: Worksheet) -> None:
    assert sheet.to_array() == []


def test_to_array_fills_gaps_with_none(sheet: Worksheet) -> None:
    sheet.set_cell("C3", "x")

    grid = sheet.to_array()

    assert grid == [
        [None, None, None],
        [None, None, None],
        [None, None, "x"],
    ]


def test_to_array_returns_raw_values(sheet: Worksheet) -> None:
    sheet.set_cell_with_format("A1", 0.5, "percentage").set_cell("B2", "y")

    assert sheet.to_array() == [[0.5, None], [None, "y"]]


def test_to_frame_uses_letters_and_row_numbers(sheet: Worksheet) -> None:
    sheet.set_cell("A1", "h").set_cell("B2", 2)

    frame = sheet.to_frame()

    assert list(frame.columns) == ["A", "B"]
    assert list(frame.index) == [1, 2]
    assert frame.loc[2, "B"] == 2
    assert frame.loc[1, "B"] is None


def test_to_frame_empty_sheet(sheet: Worksheet) -> None:
    frame = sheet.to_frame()

    assert isinstance(frame, pd.DataFrame)
    assert frame.empty


def test_len_and_iteration(sheet: Worksheet) -> None:
    sheet.set_cell("A1", 1).set_cell("A2", 2)

    assert len(sheet) == 2
    assert [cell.coordinate for cell in sheet] == ["A1", "A2"]
    assert repr(sheet) == "Worksheet('TestSheet', cells=2)"
