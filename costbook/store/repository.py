"""Asynchronous cost repository.

Wraps the query functions so every operation is awaitable. The store is
opened lazily on first use and the open is shared by all callers of the same
repository instance.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from costbook.domain.models import LedgerEntry, NewCost
from costbook.store import queries
from costbook.store.schema import DB_VERSION, StoreHandle, get_db_path, open_database

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    """Current local time with its UTC offset."""
    return datetime.now().astimezone()


class CostRepository:
    """Insert, query and delete costs in one SQLite store.

    Args:
        db_path: Path to the database file. If None, uses default location.
        version: Schema version to open the store at.
        clock: Returns the insertion time. Defaults to local time.
    """

    def __init__(
        self,
        db_path: Path | None = None,
        version: int = DB_VERSION,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.db_path = db_path or get_db_path()
        self.version = version
        self._clock = clock or local_now
        self._handle: StoreHandle | None = None
        self._opening: asyncio.Task[StoreHandle] | None = None

    async def handle(self) -> StoreHandle:
        """Open the store once and return the shared handle.

        Raises:
            UnsupportedEnvironmentError: If SQLite is not available.
            sqlite3.Error: If the storage engine fails.
        """
        if self._handle is not None:
            return self._handle

        if self._opening is not None and self._opening.get_loop() is not asyncio.get_running_loop():
            # Left behind by an event loop that has since finished
            self._opening = None

        if self._opening is None:
            self._opening = asyncio.ensure_future(asyncio.to_thread(open_database, self.db_path, self.version))

        opening = self._opening
        try:
            handle = await asyncio.shield(opening)
        except BaseException:
            # Let a later call retry a failed or cancelled open
            if self._opening is opening:
                self._opening = None
            raise

        if self._handle is None:
            logger.debug("Opened %s at schema version %d", handle.path, handle.version)
            self._handle = handle
        return self._handle

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        handle = await self.handle()
        return await asyncio.to_thread(func, handle.path, *args)

    async def insert(self, draft: Mapping[str, Any]) -> NewCost:
        """Add a cost stamped with the current time.

        Args:
            draft: Mapping with amount, currency, category and description.
                Missing or invalid values are coerced to defaults.

        Returns:
            The stored amount, currency, category and description.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        _, cost = await self._run(queries.insert_cost, draft, self._clock())
        return cost

    async def find_by_month(self, year: int, month: int) -> list[LedgerEntry]:
        """Costs recorded in ``month`` of ``year``, oldest first."""
        return await self._run(queries.get_costs_by_month, int(year), int(month))

    async def find_by_year(self, year: int) -> list[LedgerEntry]:
        """Costs recorded in ``year``, oldest first."""
        return await self._run(queries.get_costs_by_year, int(year))

    async def find_by_category(self, category: str) -> list[LedgerEntry]:
        """Costs with the given category label, oldest first."""
        return await self._run(queries.get_costs_by_category, str(category))

    async def find_recent(self, n: int = 15) -> list[LedgerEntry]:
        """The ``n`` most recently added costs, newest first."""
        return await self._run(queries.get_recent_costs, int(n))

    async def delete_by_id(self, entry_id: int) -> None:
        """Delete a cost. Deleting an unknown id is a no-op."""
        await self._run(queries.delete_cost, int(entry_id))
