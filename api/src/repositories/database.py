"""
Persistence gateway over PostgreSQL.

Handlers never talk to asyncpg directly. They go through a ``Database``,
which exposes three primitives:

- ``fetch_all``: query returning zero or more rows
- ``fetch_one``: query returning a single row, or ``None`` when no row matched
- ``execute``:   statement returning the number of rows affected

Driver failures are translated into ``StoreError`` (``StoreTimeoutError``
when the per-call deadline expires) so callers can tell "no rows" apart from
a broken store.
"""

import asyncio
import asyncpg
import structlog
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Dict, Iterator, List, Optional, Protocol

from api.src.config import Settings
from api.src.errors import StoreError, StoreTimeoutError

logger = structlog.get_logger(__name__)

Row = Dict[str, Any]


class Database(Protocol):
    """Query primitives consumed by the repositories."""

    async def fetch_all(self, sql: str, *args: Any) -> List[Row]:
        ...

    async def fetch_one(self, sql: str, *args: Any) -> Optional[Row]:
        ...

    async def execute(self, sql: str, *args: Any) -> int:
        ...

    async def ping(self) -> None:
        ...


def rows_affected(command_status: str) -> int:
    """
    Extract the affected row count from a PostgreSQL command tag.

    Args:
        command_status: Tag returned by asyncpg, e.g. "DELETE 1" or "INSERT 0 1"

    Returns:
        Number of rows affected (0 when the tag carries no count)
    """
    parts = command_status.split() if command_status else []
    if parts and parts[-1].isdigit():
        return int(parts[-1])
    return 0


class PostgresGateway:
    """``Database`` implementation backed by an asyncpg connection pool."""

    def __init__(self, pool: asyncpg.Pool, timeout: float = 30.0):
        """
        Initialize gateway.

        Args:
            pool: asyncpg connection pool
            timeout: Deadline applied to every call (seconds)
        """
        self.pool = pool
        self.timeout = timeout

    @asynccontextmanager
    async def _translate_errors(self, sql: str) -> AsyncIterator[None]:
        try:
            yield
        except asyncio.TimeoutError as e:
            logger.error("database_timeout", sql=sql, timeout=self.timeout)
            raise StoreTimeoutError() from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error("database_error", sql=sql, error=str(e))
            raise StoreError() from e

    async def fetch_all(self, sql: str, *args: Any) -> List[Row]:
        async with self._translate_errors(sql):
            records = await self.pool.fetch(sql, *args, timeout=self.timeout)
        return [dict(record) for record in records]

    async def fetch_one(self, sql: str, *args: Any) -> Optional[Row]:
        async with self._translate_errors(sql):
            record = await self.pool.fetchrow(sql, *args, timeout=self.timeout)
        return dict(record) if record is not None else None

    async def execute(self, sql: str, *args: Any) -> int:
        async with self._translate_errors(sql):
            result = await self.pool.execute(sql, *args, timeout=self.timeout)
        return rows_affected(result)

    async def ping(self) -> None:
        async with self._translate_errors("SELECT 1"):
            await self.pool.fetchval("SELECT 1", timeout=self.timeout)


async def create_pool(settings: Settings) -> asyncpg.Pool:
    """
    Create the asyncpg pool described by settings and verify connectivity.

    Args:
        settings: Application settings

    Returns:
        Connected pool
    """
    logger.info(
        "initializing_database_pool",
        host=settings.database_host,
        port=settings.database_port,
        database=settings.database_name,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size
    )

    pool = await asyncpg.create_pool(
        settings.database_dsn,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
        command_timeout=settings.database_query_timeout
    )

    async with pool.acquire() as conn:
        version = await conn.fetchval("SELECT version()")
        logger.info("database_connected", postgres_version=version)

    return pool


@contextmanager
def store_errors(message: str, event: str, **context: Any) -> Iterator[None]:
    """
    Re-raise gateway failures with a caller-facing message.

    Timeouts keep their own type (and status). Everything else becomes a
    ``StoreError`` carrying ``message``; the original error is logged
    under ``event``.

    Args:
        message: Public error message
        event: Log event name
        **context: Extra fields for the log entry
    """
    try:
        yield
    except StoreTimeoutError:
        logger.error(event, error="timeout", **context)
        raise
    except StoreError as e:
        logger.error(event, error=str(e.__cause__ or e), **context)
        raise StoreError(message) from e
