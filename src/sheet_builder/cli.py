"""CLI entry point for sheet-builder."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pandas as pd
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table as RichTable

from sheet_builder import DEFAULT_AUTHOR, FORMATS, __version__
from sheet_builder.coords import make_coordinate
from sheet_builder.demo import build_demo_workbook
from sheet_builder.io import frame_to_rows, load_table, write_json
from sheet_builder.utils import utcnow_iso
from sheet_builder.workbook import Workbook
from sheet_builder.worksheet import Worksheet

app = typer.Typer(
    name="sbuild",
    help="sheet-builder — Build workbooks from tabular data and export markup or CSV.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

MARKUP_NAME = "workbook.xml"
CSV_NAME = "workbook.csv"
STATS_NAME = "stats.json"

_PREVIEW_ROWS = 10


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {msg}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sheet-builder v{__version__}")
        raise typer.Exit()


def _parse_format_map(raw: list[str] | None) -> dict[str, str]:
    """Parse ``--format column=fmt`` pairs into ``{column: fmt}``."""
    if not raw:
        return {}
    mapping: dict[str, str] = {}
    for item in raw:
        if "=" not in item:
            raise ValueError(f"Invalid --format value: {item!r}  (expected column=format)")
        column, fmt = item.rsplit("=", 1)
        column = column.strip()
        fmt = fmt.strip().lower()
        if not column:
            raise ValueError("--format entries must name a column (column=format)")
        if fmt not in FORMATS:
            raise ValueError(
                f"Unknown format {fmt!r} for column {column!r}. Use one of: {', '.join(FORMATS)}"
            )
        mapping[column] = fmt
    return mapping


def _load_workbook(
    input_file: Path, sheet: str, *, title: str, author: str, delimiter: str | None = None
) -> Workbook:
    raw_df = load_table(input_file, delimiter=delimiter)
    wb = Workbook(title=title, author=author)
    wb.import_from_array(sheet, frame_to_rows(raw_df))
    return wb


def _apply_formats(ws: Worksheet, columns: list[str], formats: dict[str, str]) -> int:
    """Reformat the data cells (row 2 onward) of each named column."""
    rows = ws.get_dimensions().rows
    changed = 0
    for col, name in enumerate(columns, 1):
        fmt = formats.get(name)
        if fmt is None:
            continue
        for row in range(2, rows + 1):
            coordinate = make_coordinate(row, col)
            cell = ws.get_cell_object(coordinate)
            if cell is not None:
                ws.set_cell_with_format(coordinate, cell.value, fmt)
                changed += 1
    return changed


def _preview_table(ws: Worksheet, max_rows: int = _PREVIEW_ROWS) -> RichTable:
    frame: pd.DataFrame = ws.to_frame().head(max_rows)
    tbl = RichTable(title=f"{ws.name} (first {len(frame)} rows)", show_lines=False)
    tbl.add_column("#", style="dim")
    for letter in frame.columns:
        tbl.add_column(str(letter))
    for row in frame.index:
        cells = (
            ws.get_cell_object(make_coordinate(int(row), col))
            for col in range(1, len(frame.columns) + 1)
        )
        tbl.add_row(str(row), *(c.formatted_value() if c is not None else "" for c in cells))
    return tbl


def _stats_table(wb: Workbook) -> RichTable:
    stats = wb.get_statistics()
    tbl = RichTable(title="Workbook Statistics", show_lines=True)
    tbl.add_column("Worksheet", style="bold")
    tbl.add_column("Cells")
    tbl.add_column("Rows x Cols")
    for name, ws_stats in stats.per_worksheet.items():
        dims = ws_stats.dimensions
        tbl.add_row(name, str(ws_stats.cell_count), f"{dims.rows} x {dims.cols}")
    tbl.add_row("[dim]total[/dim]", str(stats.total_cell_count), "")
    return tbl


def _write_exports(wb: Workbook, out_dir: Path, extra: dict[str, object]) -> tuple[Path, Path, Path]:
    markup_path = out_dir / MARKUP_NAME
    csv_path = out_dir / CSV_NAME
    if not wb.save(markup_path):
        raise OSError(f"Could not write {markup_path}")
    if not wb.save_csv(csv_path):
        raise OSError(f"Could not write {csv_path}")
    payload: dict[str, object] = {"generated_at_utc": utcnow_iso(), **extra}
    payload.update(wb.get_statistics().to_dict())
    stats_path = write_json(out_dir / STATS_NAME, payload)
    return markup_path, csv_path, stats_path


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """sheet-builder CLI."""


# ── convert command ──────────────────────────────────────────────


@app.command()
def convert(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to CSV input file.",
        exists=True, readable=True,
    ),
    out_dir: Path = typer.Option(
        Path("output"), "--out-dir", "-o",
        help="Output directory for workbook.xml, workbook.csv and stats.json.",
    ),
    sheet: str | None = typer.Option(
        None, "--sheet", "-s",
        help="Worksheet name (defaults to the input file stem).",
    ),
    delimiter: str | None = typer.Option(
        None, "--delimiter", "-d",
        help="CSV field separator (sniffed from the file when omitted).",
    ),
    title: str | None = typer.Option(
        None, "--title",
        help="Workbook title (defaults to the worksheet name).",
    ),
    author: str = typer.Option(
        DEFAULT_AUTHOR, "--author",
        help="Workbook author written to the export metadata.",
    ),
    formats: list[str] | None = typer.Option(
        None, "--format", "-f",
        help=(
            "Display format for a column: column=format. "
            f"Formats: {', '.join(FORMATS)}. E.g. --format Price=currency"
        ),
    ),
    preview: bool = typer.Option(
        False, "--preview",
        help="Print the first rows of the worksheet.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress informational output; still writes all artifacts.",
    ),
) -> None:
    """Import a CSV into a workbook and export markup, CSV and statistics."""
    echo = _printer(quiet)
    sheet_name = sheet or input_file.stem
    try:
        format_map = _parse_format_map(formats)
    except ValueError as exc:
        _err(str(exc))
        raise typer.Exit(code=2)

    if not quiet:
        console.print(Panel(
            f"[bold]sheet-builder[/bold] v{__version__}\n"
            f"Input:  {input_file}\nOutput: {out_dir}",
            title="Convert", border_style="blue",
        ))

    # ── Load ─────────────────────────────────────────────────────
    echo("[blue]>[/blue] Loading input file …")
    try:
        raw_df = load_table(input_file, delimiter=delimiter)
    except (FileNotFoundError, ValueError, OSError) as exc:
        _err(str(exc))
        raise typer.Exit(code=2)

    columns = [str(c) for c in raw_df.columns]
    unknown = sorted(set(format_map) - set(columns))
    if unknown:
        _err(f"Unknown columns for --format: {', '.join(unknown)}")
        console.print(f"  Available: {', '.join(columns)}")
        raise typer.Exit(code=2)

    echo(f"  {len(raw_df)} rows x {len(columns)} columns")

    try:
        # ── Build ────────────────────────────────────────────────
        echo("[blue]>[/blue] Building workbook …")
        wb = Workbook(title=title or sheet_name, author=author)
        ws = wb.create_worksheet(sheet_name).set_cells(frame_to_rows(raw_df))
        changed = _apply_formats(ws, columns, format_map)
        if format_map:
            echo(f"  Formatted {changed} cells")

        # ── Write ────────────────────────────────────────────────
        out_dir.mkdir(parents=True, exist_ok=True)
        markup_path, csv_path, stats_path = _write_exports(
            wb, out_dir, {"input_file": input_file.name}
        )
        echo(f"  Markup -> {markup_path}")
        echo(f"  CSV    -> {csv_path}")
        echo(f"  Stats  -> {stats_path}")

        if preview and not quiet:
            console.print(_preview_table(ws))
        if not quiet:
            console.print(_stats_table(wb))
            console.print(Panel(
                f"[green]Done[/green] — {len(ws)} cells -> {markup_path}",
                title="Convert Complete", border_style="green",
            ))
    except OSError as exc:
        _err(str(exc))
        raise typer.Exit(code=1)
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)


# ── search command ───────────────────────────────────────────────


@app.command()
def search(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to CSV input file.",
        exists=True, readable=True,
    ),
    value: str = typer.Option(
        ..., "--value", "-v",
        help="Exact cell text to look for (header row included).",
    ),
    sheet: str | None = typer.Option(
        None, "--sheet", "-s",
        help="Worksheet name used in the output (defaults to the input file stem).",
    ),
    delimiter: str | None = typer.Option(
        None, "--delimiter", "-d",
        help="CSV field separator (sniffed from the file when omitted).",
    ),
) -> None:
    """List the coordinates of every cell equal to VALUE.

    Exit 0 = found, exit 1 = no match, exit 2 = unreadable input.
    """
    sheet_name = sheet or input_file.stem
    try:
        wb = _load_workbook(
            input_file, sheet_name, title=sheet_name, author=DEFAULT_AUTHOR, delimiter=delimiter
        )
    except (FileNotFoundError, ValueError, OSError) as exc:
        _err(str(exc))
        raise typer.Exit(code=2)

    results = wb.search_value(value)
    if not results:
        console.print(f"[yellow]![/yellow] No cells equal {value!r}")
        raise typer.Exit(code=1)

    tbl = RichTable(title=f"Matches for {value!r}", show_lines=True)
    tbl.add_column("Worksheet", style="bold")
    tbl.add_column("Coordinates")
    for name, coordinates in results.items():
        tbl.add_row(name, ", ".join(coordinates))
    console.print(tbl)


# ── demo command ─────────────────────────────────────────────────


@app.command()
def demo(
    out_dir: Path = typer.Option(
        Path("output"), "--out-dir", "-o",
        help="Output directory for the demo exports.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress informational output; still writes all artifacts.",
    ),
) -> None:
    """Build the sample sales workbook and export it."""
    echo = _printer(quiet)
    wb = build_demo_workbook()
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        markup_path, csv_path, stats_path = _write_exports(wb, out_dir, {"demo": True})
    except OSError as exc:
        _err(str(exc))
        raise typer.Exit(code=1)

    echo(f"  Markup -> {markup_path}")
    echo(f"  CSV    -> {csv_path}")
    echo(f"  Stats  -> {stats_path}")
    if not quiet:
        console.print(_stats_table(wb))
