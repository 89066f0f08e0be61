"""Database store layer - provides persistence for the application.

This module re-exports the public store API for easy importing.
"""

# Re-export repository and schema
from costbook.store.repository import CostRepository
from costbook.store.schema import (
    DB_NAME,
    DB_VERSION,
    StorageError,
    StoreHandle,
    database_exists,
    get_db_path,
    get_schema_version,
    open_database,
)

__all__ = [
    # Schema
    "DB_NAME",
    "DB_VERSION",
    "StorageError",
    "StoreHandle",
    "database_exists",
    "get_db_path",
    "get_schema_version",
    "open_database",
    # Repository
    "CostRepository",
]
