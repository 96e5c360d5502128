"""Shared helpers — timestamps."""

from __future__ import annotations

from datetime import datetime, timezone


def local_timestamp(when: datetime | None = None) -> str:
    """Return *when* (default: now, local time) as ``YYYY-MM-DD HH:MM:SS``."""
    if when is None:
        when = datetime.now()
    return when.strftime("%Y-%m-%d %H:%M:%S")


def utcnow_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
