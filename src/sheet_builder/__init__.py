"""sheet-builder — Build in-memory workbooks and export them as markup or CSV."""

__version__ = "0.1.0"

FORMATS: tuple[str, ...] = ("general", "currency", "percentage", "date", "number")
DEFAULT_FORMAT = "general"

DEFAULT_TITLE = "Workbook"
DEFAULT_AUTHOR = "sheet-builder"
