"""Database query functions.

Each function opens its own connection and runs one read or read-write
transaction. Rows come back as LedgerEntry objects with legacy values
coerced, so callers never see a missing currency.
"""

import logging
import math
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from functools import cmp_to_key
from pathlib import Path
from typing import Any

from costbook.dates import insertion_stamp, parse_legacy_date, parse_timestamp
from costbook.domain.models import (
    CURRENCIES,
    DEFAULT_CURRENCY,
    CategoryName,
    CurrencyCode,
    LedgerEntry,
    NewCost,
)
from costbook.store.schema import INDEX_BY_CATEGORY, INDEX_BY_YEAR_MONTH, STORE_NAME, connect

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = (
    "id, amount, currency, category, description, created_at, created_year, created_month, created_day, date"
)


@contextmanager
def _transaction(db_path: Path) -> Iterator[Any]:
    """Yield a connection that commits on success and rolls back on error."""
    conn = connect(db_path)
    try:
        with conn:
            yield conn
    finally:
        conn.close()


def coerce_amount(value: Any) -> float:
    """Coerce an amount to a float; missing or invalid values become 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def coerce_currency(value: Any) -> CurrencyCode:
    """Coerce a currency code; missing or unsupported values become USD."""
    code = str(value or "").strip().upper()
    if code in CURRENCIES:
        return CurrencyCode(code)
    return DEFAULT_CURRENCY


def coerce_text(value: Any) -> str:
    """Coerce a text field; missing values become the empty string."""
    if value is None:
        return ""
    return str(value)


def row_to_entry(row: Mapping[str, Any]) -> LedgerEntry:
    """Build a LedgerEntry from a database row."""
    return LedgerEntry(
        id=int(row["id"]),
        amount=coerce_amount(row["amount"]),
        currency=coerce_currency(row["currency"]),
        category=CategoryName(coerce_text(row["category"])),
        description=coerce_text(row["description"]),
        created_at=row["created_at"],
        created_year=row["created_year"],
        created_month=row["created_month"],
        created_day=row["created_day"],
        date=row["date"],
    )


def entry_year_month(entry: LedgerEntry) -> tuple[int | None, int | None]:
    """Year and month of an entry, parsed from the legacy date when not derived."""
    year, month = entry.created_year, entry.created_month
    if year is None or month is None:
        legacy = parse_legacy_date(entry.date)
        if legacy is not None:
            year = legacy.year if year is None else year
            month = legacy.month if month is None else month
    return year, month


def entry_timestamp(entry: LedgerEntry) -> float | None:
    """Ordering timestamp: created_at, else the legacy date."""
    if entry.created_at:
        return parse_timestamp(entry.created_at)
    return parse_timestamp(entry.date)


def sort_ascending(entries: list[LedgerEntry]) -> list[LedgerEntry]:
    """Sort oldest first; undated entries sort as epoch, ties keep id order."""
    stamped = [(entry_timestamp(e) or 0.0, e.id, e) for e in entries]
    return [e for _, _, e in sorted(stamped, key=lambda x: (x[0], x[1]))]


def _compare_recent(a: tuple[float | None, LedgerEntry], b: tuple[float | None, LedgerEntry]) -> int:
    (ta, ea), (tb, eb) = a, b
    if ta is not None and tb is not None and ta != tb:
        return -1 if ta > tb else 1
    return eb.id - ea.id


def sort_recent(entries: list[LedgerEntry]) -> list[LedgerEntry]:
    """Sort newest first, falling back to descending id."""
    stamped = [(entry_timestamp(e), e) for e in entries]
    return [e for _, e in sorted(stamped, key=cmp_to_key(_compare_recent))]


def has_index(conn: Any, name: str) -> bool:
    """Check whether an index exists on the costs table."""
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'index' AND tbl_name = ? AND name = ?",
        (STORE_NAME, name),
    ).fetchone()
    return row is not None


def insert_cost(db_path: Path, draft: Mapping[str, Any], now: datetime) -> tuple[int, NewCost]:
    """Insert a cost stamped with the insertion time.

    Args:
        db_path: Path to the database file.
        draft: Caller-supplied fields (amount, currency, category, description).
        now: Moment of insertion.

    Returns:
        Tuple of (new_id, cost) where cost holds the coerced values.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    cost = NewCost(
        amount=coerce_amount(draft.get("amount")),
        currency=coerce_currency(draft.get("currency")),
        category=CategoryName(coerce_text(draft.get("category"))),
        description=coerce_text(draft.get("description")),
    )
    stamp = insertion_stamp(now)

    with _transaction(db_path) as conn:
        cursor = conn.execute(
            f"""
            INSERT INTO {STORE_NAME}
                (amount, currency, category, description, created_at, created_year, created_month, created_day, date)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                cost.amount,
                cost.currency,
                cost.category,
                cost.description,
                stamp["created_at"],
                stamp["created_year"],
                stamp["created_month"],
                stamp["created_day"],
                stamp["date"],
            ),
        )
        new_id = int(cursor.lastrowid)

    logger.debug("Inserted cost %d: %s %s %s", new_id, cost.amount, cost.currency, cost.category)
    return new_id, cost


def get_all_costs(db_path: Path) -> list[LedgerEntry]:
    """Get every stored cost in id order.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _transaction(db_path) as conn:
        rows = conn.execute(f"SELECT {ENTRY_COLUMNS} FROM {STORE_NAME} ORDER BY id").fetchall()
    return [row_to_entry(row) for row in rows]


def get_costs_by_month(db_path: Path, year: int, month: int) -> list[LedgerEntry]:
    """Get costs recorded in a month, oldest first.

    Uses the year/month index when it exists, otherwise scans every row so
    records written before the index existed are still found.

    Args:
        db_path: Path to the database file.
        year: Calendar year.
        month: Month (1-12).

    Returns:
        List of entries in ascending insertion order.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _transaction(db_path) as conn:
        if has_index(conn, INDEX_BY_YEAR_MONTH):
            rows = conn.execute(
                f"SELECT {ENTRY_COLUMNS} FROM {STORE_NAME} INDEXED BY {INDEX_BY_YEAR_MONTH} "
                "WHERE created_year = ? AND created_month = ? ORDER BY id",
                (year, month),
            ).fetchall()
        else:
            logger.info("Index %s missing, scanning all costs", INDEX_BY_YEAR_MONTH)
            rows = conn.execute(f"SELECT {ENTRY_COLUMNS} FROM {STORE_NAME} ORDER BY id").fetchall()

    entries = [row_to_entry(row) for row in rows]
    matching = [e for e in entries if entry_year_month(e) == (year, month)]
    return sort_ascending(matching)


def get_costs_by_year(db_path: Path, year: int) -> list[LedgerEntry]:
    """Get costs recorded in a year, oldest first.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    entries = get_all_costs(db_path)
    matching = [e for e in entries if entry_year_month(e)[0] == year]
    return sort_ascending(matching)


def get_costs_by_category(db_path: Path, category: str) -> list[LedgerEntry]:
    """Get costs with an exact category label, oldest first.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _transaction(db_path) as conn:
        if has_index(conn, INDEX_BY_CATEGORY):
            query = f"SELECT {ENTRY_COLUMNS} FROM {STORE_NAME} INDEXED BY {INDEX_BY_CATEGORY} WHERE category = ?"
        else:
            query = f"SELECT {ENTRY_COLUMNS} FROM {STORE_NAME} WHERE category = ?"
        rows = conn.execute(query + " ORDER BY id", (category,)).fetchall()
    return sort_ascending([row_to_entry(row) for row in rows])


def get_recent_costs(db_path: Path, limit: int) -> list[LedgerEntry]:
    """Get the most recently added costs, newest first.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    if limit <= 0:
        return []
    return sort_recent(get_all_costs(db_path))[:limit]


def delete_cost(db_path: Path, entry_id: int) -> bool:
    """Delete a cost by id.

    Args:
        db_path: Path to the database file.
        entry_id: Cost id.

    Returns:
        True if a row was removed, False if the id did not exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _transaction(db_path) as conn:
        cursor = conn.execute(f"DELETE FROM {STORE_NAME} WHERE id = ?", (int(entry_id),))
        removed = cursor.rowcount > 0

    if removed:
        logger.debug("Deleted cost %d", entry_id)
    else:
        logger.debug("Cost %d not found, nothing to delete", entry_id)
    return removed
