"""Tests for costbook.store.schema."""

import sqlite3
from pathlib import Path

import pytest

from costbook.errors import UnsupportedEnvironmentError
from costbook.store import schema
from costbook.store.schema import (
    DB_VERSION,
    INDEX_BY_CATEGORY,
    INDEX_BY_YEAR_MONTH,
    STORE_NAME,
    database_exists,
    get_db_path,
    get_schema_version,
    open_database,
)


def index_names(db_path: Path) -> set[str]:
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'index'").fetchall()
        return {row[0] for row in rows}
    finally:
        conn.close()


def create_legacy_store(db_path: Path) -> None:
    """Create a version 1 store with a date-only record."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.execute(
        f"""
        CREATE TABLE {STORE_NAME} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            amount REAL NOT NULL,
            category TEXT,
            description TEXT,
            date TEXT
        )
        """
    )
    conn.execute(
        f"INSERT INTO {STORE_NAME} (amount, category, description, date) VALUES (?, ?, ?, ?)",
        (12.5, "Food", "old lunch", "2024-06-21"),
    )
    conn.execute("PRAGMA user_version = 1")
    conn.commit()
    conn.close()


class TestOpenDatabase:
    """Tests for open_database."""

    def test_creates_store_and_indexes(self, db_path: Path) -> None:
        """Should create the table and both indexes on first open."""
        handle = open_database(db_path, DB_VERSION)

        assert handle.path == db_path
        assert handle.version == DB_VERSION
        assert database_exists(db_path)
        assert {INDEX_BY_YEAR_MONTH, INDEX_BY_CATEGORY} <= index_names(db_path)
        assert get_schema_version(db_path) == DB_VERSION

    def test_new_database_without_version(self, db_path: Path) -> None:
        """Should create the schema at version 1 when no version is requested."""
        handle = open_database(db_path)

        assert handle.version == 1
        assert INDEX_BY_YEAR_MONTH in index_names(db_path)

    def test_lower_version_opens_at_existing(self, db_path: Path) -> None:
        """Should fall back to the on-disk version instead of failing."""
        open_database(db_path, 5)

        handle = open_database(db_path, 2)

        assert handle.version == 5
        assert get_schema_version(db_path) == 5

    def test_upgrade_keeps_existing_rows(self, db_path: Path) -> None:
        """Should add missing columns and indexes without touching old rows."""
        create_legacy_store(db_path)

        handle = open_database(db_path, 2)

        assert handle.version == 2
        conn = sqlite3.connect(db_path)
        conn.row_factory = sqlite3.Row
        rows = conn.execute(f"SELECT * FROM {STORE_NAME}").fetchall()
        conn.close()
        assert len(rows) == 1
        assert rows[0]["amount"] == 12.5
        assert rows[0]["date"] == "2024-06-21"
        assert rows[0]["currency"] is None
        assert rows[0]["created_year"] is None
        assert INDEX_BY_YEAR_MONTH in index_names(db_path)

    def test_same_version_does_not_recreate_dropped_index(self, db_path: Path) -> None:
        """Should only run the schema setup on a version increase."""
        open_database(db_path, 2)
        conn = sqlite3.connect(db_path)
        conn.execute(f"DROP INDEX {INDEX_BY_YEAR_MONTH}")
        conn.commit()
        conn.close()

        open_database(db_path, 2)
        assert INDEX_BY_YEAR_MONTH not in index_names(db_path)

        open_database(db_path, 3)
        assert INDEX_BY_YEAR_MONTH in index_names(db_path)

    @pytest.mark.parametrize("version", [0, -1, 1.5, True])
    def test_rejects_invalid_version(self, db_path: Path, version: object) -> None:
        """Should reject versions that are not positive integers."""
        with pytest.raises(ValueError):
            open_database(db_path, version)  # type: ignore[arg-type]

    def test_unsupported_environment(self, db_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should fail with an unsupported environment error when SQLite is missing."""
        monkeypatch.setattr(schema, "sqlite3", None)

        with pytest.raises(UnsupportedEnvironmentError):
            open_database(db_path, DB_VERSION)

    def test_engine_errors_propagate(self, tmp_path: Path) -> None:
        """Should surface storage engine errors unchanged."""
        db_path = tmp_path / "not-a-db.db"
        db_path.write_bytes(b"this is not a sqlite database file at all" * 10)

        with pytest.raises(sqlite3.DatabaseError):
            open_database(db_path, DB_VERSION)


class TestPaths:
    """Tests for database path helpers."""

    def test_xdg_location(self, isolated_env: Path) -> None:
        """Should place the database under XDG_DATA_HOME."""
        assert get_db_path() == isolated_env / "xdg-data" / "costbook" / "costsdb.db"

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should honour COSTBOOK_DB."""
        monkeypatch.setenv("COSTBOOK_DB", str(tmp_path / "custom.db"))
        assert get_db_path() == tmp_path / "custom.db"

    def test_missing_database_version(self, tmp_path: Path) -> None:
        """Should report version 0 when no database exists."""
        assert get_schema_version(tmp_path / "missing.db") == 0
