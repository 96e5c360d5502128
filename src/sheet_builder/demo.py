"""Sample sales workbook used by ``sbuild demo``."""

from __future__ import annotations

from datetime import datetime

from sheet_builder.utils import local_timestamp
from sheet_builder.workbook import Workbook

SALES_SHEET = "Sales Data"
SUMMARY_SHEET = "Summary"
IMPORT_SHEET = "Imported"
BACKUP_SHEET = "Backup Sales Data"
FORMAT_SHEET = "Format Test"

_PRODUCTS: list[tuple[str, int, float]] = [
    ("Laptop", 10, 999.99),
    ("Mouse", 50, 25.50),
    ("Keyboard", 30, 75.00),
    ("Monitor", 15, 299.99),
    ("Headphones", 25, 89.99),
    ("Webcam", 20, 149.99),
]

_QUARTERLY = [
    ["Product", "Q1", "Q2", "Q3", "Q4"],
    ["Laptops", [100, 120, 110, 130]],
    ["Phones", [200, 180, 220, 250]],
]


def build_demo_workbook(now: datetime | None = None) -> Workbook:
    """Build the demo workbook; *now* pins the summary/date cells for tests."""
    now = now or datetime.now()
    wb = Workbook("Sales Report", "sheet-builder demo")

    sales = wb.create_worksheet(SALES_SHEET)
    (
        sales.set_cell("A1", "Product")
        .set_cell("B1", "Quantity")
        .set_cell("C1", "Unit Price")
        .set_cell("D1", "Total")
    )
    for row, (product, qty, price) in enumerate(_PRODUCTS, 2):
        (
            sales.set_cell(f"A{row}", product)
            .set_cell_with_format(f"B{row}", qty, "number")
            .set_cell_with_format(f"C{row}", price, "currency")
            .set_cell_with_format(f"D{row}", round(qty * price, 2), "currency")
        )

    summary = wb.create_worksheet(SUMMARY_SHEET)
    summary.set_cell("A1", "Summary Report")
    summary.set_cell("A3", "Total Products:").set_cell("B3", len(_PRODUCTS))
    summary.set_cell("A4", "Generated:").set_cell("B4", local_timestamp(now))

    wb.import_from_array(IMPORT_SHEET, _QUARTERLY)
    wb.clone_worksheet(SALES_SHEET, BACKUP_SHEET)

    formats = wb.create_worksheet(FORMAT_SHEET)
    formats.set_cell_with_format("A1", 1234.56, "currency")
    formats.set_cell_with_format("A2", 0.75, "percentage")
    formats.set_cell_with_format("A3", int(now.timestamp()), "date")
    formats.set_cell_with_format("A4", 9876.54, "number")
    return wb
