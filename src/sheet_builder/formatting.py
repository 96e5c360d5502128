"""Display formatting — pure functions from (value, format) to text."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

CellValue = str | int | float | None

_CENTS = Decimal("0.01")
_NUMERIC_PREFIX_RE = re.compile(r"\s*[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_NUMERIC_RE = re.compile(_NUMERIC_PREFIX_RE.pattern + r"\s*")


# ── Coercion helpers ─────────────────────────────────────────────


def is_numeric(value: object) -> bool:
    """True for numbers and for strings that are entirely a number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC_RE.fullmatch(value) is not None


def to_decimal(value: object) -> Decimal:
    """Coerce *value* the way a float cast would; non-numeric text becomes 0.

    Strings contribute their leading numeric prefix (``"12abc"`` -> 12).
    """
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, str):
        match = _NUMERIC_PREFIX_RE.match(value)
        if match:
            return Decimal(repr(float(match.group(0))))
    return Decimal(0)


def plain_text(value: CellValue) -> str:
    """Render *value* as plain text; ``None`` is the empty string."""
    if value is None:
        return ""
    if isinstance(value, float):
        # 1275.0 -> "1275", like a string cast of a float
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return repr(value)
    return str(value)


def fixed2(number: Decimal) -> str:
    """Two decimals, half-up, with ``,`` thousands separators."""
    if not number.is_finite():
        return str(number).lower()
    quantized = number.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if quantized.is_zero():
        quantized = quantized.copy_abs()
    return f"{quantized:,.2f}"


# ── Per-format renderers ─────────────────────────────────────────


def _currency(value: CellValue) -> str:
    return "$" + fixed2(to_decimal(value))


def _percentage(value: CellValue) -> str:
    return fixed2(to_decimal(value) * 100) + "%"


def _number(value: CellValue) -> str:
    return fixed2(to_decimal(value))


def _date(value: CellValue) -> str:
    if is_numeric(value):
        try:
            stamp = int(float(to_decimal(value)))
            return datetime.fromtimestamp(stamp, tz=timezone.utc).date().isoformat()
        except (OverflowError, OSError, ValueError):
            pass
    return plain_text(value)


_RENDERERS = {
    "currency": _currency,
    "percentage": _percentage,
    "date": _date,
    "number": _number,
}


def format_value(value: CellValue, fmt: str) -> str:
    """Render *value* for display under format *fmt*.

    Unknown formats (and ``general``) fall back to :func:`plain_text`.
    """
    if value is None:
        return ""
    renderer = _RENDERERS.get(fmt, plain_text)
    return renderer(value)
