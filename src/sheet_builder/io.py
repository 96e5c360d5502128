"""I/O helpers — load CSV input, convert frames to rows, write artifacts."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from sheet_builder.formatting import CellValue

# ── Loading ──────────────────────────────────────────────────────


def load_table(path: Path, delimiter: str | None = None) -> pd.DataFrame:
    """Load a CSV file and return a raw, all-string DataFrame.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If *path* is a directory, the extension is not ``.csv``, or CSV
        decoding/parsing fails.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    if path.is_dir():
        raise ValueError(f"Input path is a directory, not a file: {path}")

    suffix = path.suffix.lower()
    if suffix != ".csv":
        raise ValueError(f"Unsupported file type: {suffix!r}. Use .csv")

    last_exc: Exception | None = None
    sep = delimiter if delimiter else None
    engine = "c" if delimiter else "python"
    for encoding in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            return pd.read_csv(
                path,
                dtype="string",
                sep=sep,
                engine=engine,
                encoding=encoding,
                encoding_errors="strict",
                na_filter=True,
                keep_default_na=True,
            )
        except (UnicodeDecodeError, pd.errors.ParserError) as exc:
            last_exc = exc
    raise ValueError(f"Could not read CSV {path} (decode or parse failed)") from last_exc


# ── Frame conversion ─────────────────────────────────────────────


def _cell_value(val: Any) -> CellValue:
    try:
        if pd.isna(val):
            return None
    except (TypeError, ValueError):
        return str(val)

    item = getattr(val, "item", None)
    if callable(item):
        val = item()
    if isinstance(val, bool):
        return str(val)
    if isinstance(val, (str, int, float)):
        return val
    return str(val)


def frame_to_rows(df: pd.DataFrame, *, header: bool = True) -> list[list[CellValue]]:
    """Return *df* as nested rows suitable for ``Worksheet.set_cells``.

    Missing values become ``None``; numpy scalars are unwrapped.
    """
    rows: list[list[CellValue]] = []
    if header:
        rows.append([str(col) for col in df.columns])
    for values in df.itertuples(index=False, name=None):
        rows.append([_cell_value(val) for val in values])
    return rows


# ── Writing ──────────────────────────────────────────────────────


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def write_text(path: Path, text: str) -> Path:
    """Write *text* to *path* as UTF-8 via a temp file + rename.

    The parent directory must already exist.
    """
    path = Path(path)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    return path


def write_json(path: Path, data: Any) -> Path:
    """Write *data* as pretty-printed JSON to *path* (atomic + deterministic)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(
        data,
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
        default=_json_default,
    ) + "\n"
    return write_text(path, payload)
