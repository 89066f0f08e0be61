"""Date utilities for costbook.

Pure functions for insertion stamps, timestamp parsing and month labels.
"""

from datetime import date, datetime
from typing import Any

import pandas as pd


def insertion_stamp(now: datetime) -> dict[str, Any]:
    """Derive the stored time fields for a record inserted at ``now``.

    Args:
        now: Moment of insertion.

    Returns:
        Dictionary with created_at (ISO-8601), created_year, created_month,
        created_day and the date-only ``date`` field.
    """
    return {
        "created_at": now.isoformat(),
        "created_year": now.year,
        "created_month": now.month,
        "created_day": now.day,
        "date": now.strftime("%Y-%m-%d"),
    }


def _to_timestamp(value: str | None) -> pd.Timestamp | None:
    if not value:
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if parsed is None or pd.isna(parsed):
        return None
    return parsed


def parse_timestamp(value: str | None) -> float | None:
    """Parse an ISO timestamp or date string to epoch seconds.

    Naive values are read as UTC. Returns None for missing or unparsable input.
    """
    parsed = _to_timestamp(value)
    if parsed is None:
        return None
    return parsed.timestamp()


def parse_legacy_date(value: str | None) -> date | None:
    """Parse a legacy ``date`` field (YYYY-MM-DD or similar) to a date."""
    parsed = _to_timestamp(value)
    if parsed is None:
        return None
    return parsed.date()


def parse_month(value: str) -> tuple[int, int]:
    """Parse a YYYY-MM string to (year, month).

    Raises:
        ValueError: If the string is not a valid month.
    """
    dt = datetime.strptime(value, "%Y-%m")
    return dt.year, dt.month


def month_label(year: int, month: int) -> str:
    """Human-readable month, e.g. "March 2026"."""
    return date(year, month, 1).strftime("%B %Y")


def month_abbr(month: int) -> str:
    """Three letter month name, e.g. "Mar"."""
    return date(2000, month, 1).strftime("%b")
