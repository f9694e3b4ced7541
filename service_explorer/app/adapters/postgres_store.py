"""
PostgreSQL persistence layer for the Explorer Service.
"""

from typing import List, Optional

import asyncpg

from shared.errors import StorageError
from shared.logging import get_logger

from ..domain.records import Location, ResourceRecord
from ..domain.registry import ResourceSpec
from .schema import SCHEMA_SQL


_FIND_LOCATION_SQL = """
    SELECT id, search_query, formatted_query, latitude, longitude
    FROM locations
    WHERE search_query = $1
    ORDER BY id ASC
    LIMIT 1
"""

# Concurrent first lookups of one search text converge on a single row
_UPSERT_LOCATION_SQL = """
    INSERT INTO locations (search_query, formatted_query, latitude, longitude)
    VALUES ($1, $2, $3, $4)
    ON CONFLICT (search_query) DO UPDATE SET search_query = EXCLUDED.search_query
    RETURNING id, search_query, formatted_query, latitude, longitude
"""

_STORAGE_FAILURES = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class PostgresStore:
    """Query/insert/delete contract over an asyncpg pool."""

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.logger = get_logger("explorer.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Open the pool and apply the schema."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )

            async with self.pool.acquire() as conn:
                await conn.execute(SCHEMA_SQL)

            self.logger.info("PostgreSQL persistence started")

        except _STORAGE_FAILURES as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            raise StorageError("start", str(e)) from e

    async def stop(self):
        """Close the pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL persistence stopped")

    async def find_location(self, search_query: str) -> Optional[Location]:
        """Location stored for exactly ``search_query``, if any."""
        try:
            async with self._acquire() as conn:
                row = await conn.fetchrow(_FIND_LOCATION_SQL, search_query)
        except _STORAGE_FAILURES as e:
            self.logger.error("Error loading location", search_query=search_query, error=str(e))
            raise StorageError("find_location", str(e)) from e

        return Location.from_row(row) if row else None

    async def insert_location(self, location: Location) -> Location:
        """Persist ``location`` and return it with its storage-assigned id."""
        try:
            async with self._acquire() as conn:
                row = await conn.fetchrow(_UPSERT_LOCATION_SQL, *location.values())
        except _STORAGE_FAILURES as e:
            self.logger.error("Error saving location", search_query=location.search_query, error=str(e))
            raise StorageError("insert_location", str(e)) from e

        saved = Location.from_row(row)
        self.logger.info("Location saved", location_id=saved.id, search_query=saved.search_query)
        return saved

    async def select(self, spec: ResourceSpec, location_id: int) -> List[ResourceRecord]:
        """All stored rows of ``spec.kind`` for the location, in insert order."""
        try:
            async with self._acquire() as conn:
                rows = await conn.fetch(spec.select_sql, location_id)
        except _STORAGE_FAILURES as e:
            self.logger.error("Error loading rows", kind=spec.kind.value, location_id=location_id, error=str(e))
            raise StorageError("select", str(e)) from e

        return [spec.from_row(row) for row in rows]

    async def insert_many(self, spec: ResourceSpec, records: List[ResourceRecord]) -> None:
        """Insert ``records`` in one transaction."""
        if not records:
            return

        try:
            async with self._acquire() as conn:
                async with conn.transaction():
                    await conn.executemany(spec.insert_sql, [record.values() for record in records])
        except _STORAGE_FAILURES as e:
            self.logger.error("Error saving rows", kind=spec.kind.value, count=len(records), error=str(e))
            raise StorageError("insert", str(e)) from e

        self.logger.debug("Rows saved", kind=spec.kind.value, count=len(records))

    async def delete(self, spec: ResourceSpec, location_id: int) -> int:
        """Delete every row of ``spec.kind`` for the location."""
        try:
            async with self._acquire() as conn:
                result = await conn.execute(spec.delete_sql, location_id)
        except _STORAGE_FAILURES as e:
            self.logger.error("Error deleting rows", kind=spec.kind.value, location_id=location_id, error=str(e))
            raise StorageError("delete", str(e)) from e

        # asyncpg reports the command tag, e.g. "DELETE 7"
        deleted = int(result.split()[-1]) if result else 0
        self.logger.info("Rows deleted", kind=spec.kind.value, location_id=location_id, deleted=deleted)
        return deleted

    async def health_check(self) -> bool:
        """Check database health."""
        if self.pool is None:
            return False
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
                return True
        except _STORAGE_FAILURES:
            return False

    def _acquire(self):
        if self.pool is None:
            raise StorageError("acquire", "PostgreSQL persistence not started")
        return self.pool.acquire()
