"""Database schema initialization and migrations."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from costbook.errors import UnsupportedEnvironmentError

try:
    import sqlite3
except ImportError:  # interpreter built without SQLite
    sqlite3 = None  # type: ignore[assignment]


if sqlite3 is not None:
    StorageError = sqlite3.Error
else:

    class StorageError(Exception):  # type: ignore[no-redef]
        """Stands in for sqlite3.Error; never raised without the engine."""


logger = logging.getLogger(__name__)

DB_NAME = "costsdb"
DB_VERSION = 2

STORE_NAME = "costs"
INDEX_BY_YEAR_MONTH = "by_year_month"
INDEX_BY_CATEGORY = "by_category"

# Columns missing from tables written by schema version 1
MIGRATED_COLUMNS = {
    "currency": "TEXT",
    "created_at": "TEXT",
    "created_year": "INTEGER",
    "created_month": "INTEGER",
    "created_day": "INTEGER",
    "date": "TEXT",
}


@dataclass(frozen=True)
class StoreHandle:
    """An opened store: where it lives and the schema version it is at."""

    path: Path
    version: int


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path(name: str = DB_NAME) -> Path:
    """Get the database path for ``name`` (XDG compliant).

    The ``COSTBOOK_DB`` environment variable overrides the full path.
    """
    override = os.environ.get("COSTBOOK_DB")
    if override:
        return Path(override).expanduser()
    return get_xdg_data_home() / "costbook" / f"{name}.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def connect(db_path: Path) -> "sqlite3.Connection":
    """Create a database connection with row factory.

    Raises:
        UnsupportedEnvironmentError: If SQLite is not available.
    """
    if sqlite3 is None:
        raise UnsupportedEnvironmentError("SQLite storage engine is not available in this Python installation")
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _user_version(conn: "sqlite3.Connection") -> int:
    return int(conn.execute("PRAGMA user_version").fetchone()[0])


def get_schema_version(db_path: Path | None = None) -> int:
    """Get the on-disk schema version, 0 when there is no database yet."""
    if db_path is None:
        db_path = get_db_path()
    if not db_path.exists():
        return 0
    conn = connect(db_path)
    try:
        return _user_version(conn)
    finally:
        conn.close()


def ensure_store(conn: "sqlite3.Connection") -> None:
    """Create whatever part of the schema is missing.

    Existing rows are left untouched.
    """
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {STORE_NAME} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            amount REAL NOT NULL DEFAULT 0,
            currency TEXT,
            category TEXT NOT NULL DEFAULT '',
            description TEXT NOT NULL DEFAULT '',
            created_at TEXT,
            created_year INTEGER,
            created_month INTEGER,
            created_day INTEGER,
            date TEXT
        )
    """
    )

    # Migrations for tables created by older versions (before creating indexes on new columns)
    columns = {row[1] for row in conn.execute(f"PRAGMA table_info({STORE_NAME})").fetchall()}
    for name, column_type in MIGRATED_COLUMNS.items():
        if name not in columns:
            logger.info("Adding column %s to %s", name, STORE_NAME)
            conn.execute(f"ALTER TABLE {STORE_NAME} ADD COLUMN {name} {column_type}")

    conn.execute(
        f"CREATE INDEX IF NOT EXISTS {INDEX_BY_YEAR_MONTH} ON {STORE_NAME}(created_year, created_month)"
    )
    conn.execute(f"CREATE INDEX IF NOT EXISTS {INDEX_BY_CATEGORY} ON {STORE_NAME}(category)")


def open_database(db_path: Path | None = None, version: int | None = None) -> StoreHandle:
    """Open the store, upgrading the schema when ``version`` is newer.

    Args:
        db_path: Path to the database file. If None, uses default location.
        version: Requested schema version. If None, opens at the on-disk
            version (version 1 for a new database).

    Returns:
        StoreHandle for the opened database.

    Raises:
        UnsupportedEnvironmentError: If SQLite is not available.
        ValueError: If ``version`` is not a positive integer.
        sqlite3.Error: If the storage engine fails.
    """
    if version is not None and (isinstance(version, bool) or not isinstance(version, int) or version < 1):
        raise ValueError(f"Schema version must be a positive integer, got {version!r}")

    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = connect(db_path)

    try:
        current = _user_version(conn)
        target = version if version is not None else max(current, 1)

        if target < current:
            logger.warning(
                "Requested schema version %d is older than on-disk version %d, opening at %d",
                target,
                current,
                current,
            )
            target = current

        if target > current:
            logger.info("Upgrading %s from schema version %d to %d", db_path, current, target)
            try:
                conn.execute("BEGIN")
                ensure_store(conn)
                conn.execute(f"PRAGMA user_version = {int(target)}")
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
    finally:
        conn.close()

    return StoreHandle(path=db_path, version=target)
