"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. FastAPI opens it on startup, stores it on
`app.state.database` and closes it on shutdown (see `api/main.py`).
Repositories receive the handle through their constructor; a `None` handle
means the service runs in sample mode.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import settings
from .errors import ConfigError, StorageError

logger = logging.getLogger(__name__)

# Errors that mean "the statement did not run", as opposed to programming errors.
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool: asyncpg.Pool | None = pool

    @classmethod
    async def connect(
        cls,
        dsn: str,
        *,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ) -> Database:
        """
        Create the pool and verify the database answers.

        Raises ConfigError when the DSN is empty or the server is unreachable.
        """
        dsn = (dsn or "").strip()
        if not dsn:
            raise ConfigError("Database connection string is empty.")

        try:
            pool = await asyncpg.create_pool(
                dsn=_sanitize_database_url(dsn),
                min_size=min(min_size, max_size),
                max_size=max_size,
                command_timeout=command_timeout,
            )
        except Exception as exc:
            raise ConfigError(f"Failed to create connection pool: {exc}") from exc

        database = cls(pool)
        if not await database.ping():
            await database.close()
            raise ConfigError("Failed to ping database.")

        logger.info("database_connected min_size=%s max_size=%s", min(min_size, max_size), max_size)
        return database

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StorageError("Database pool is closed.")
        return self._pool

    async def ping(self) -> bool:
        try:
            return await self.fetch_value("SELECT 1") == 1
        except StorageError:
            return False

    async def close(self) -> None:
        if self._pool is None:
            return None
        pool, self._pool = self._pool, None
        await pool.close()
        logger.info("database_closed")

    async def fetch_one(self, sql: str, *args: Any, timeout: float | None = None) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            row = await self.pool.fetchrow(sql, *args, timeout=timeout)
        except _DRIVER_ERRORS as exc:
            raise StorageError(str(exc) or type(exc).__name__) from exc
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any, timeout: float | None = None) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            rows = await self.pool.fetch(sql, *args, timeout=timeout)
        except _DRIVER_ERRORS as exc:
            raise StorageError(str(exc) or type(exc).__name__) from exc
        return [_record_to_dict(r) for r in rows]

    async def fetch_value(self, sql: str, *args: Any, timeout: float | None = None) -> Any:
        try:
            return await self.pool.fetchval(sql, *args, timeout=timeout)
        except _DRIVER_ERRORS as exc:
            raise StorageError(str(exc) or type(exc).__name__) from exc

    async def execute(self, sql: str, *args: Any, timeout: float | None = None) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the command status tag.
        """
        try:
            return await self.pool.execute(sql, *args, timeout=timeout)
        except _DRIVER_ERRORS as exc:
            raise StorageError(str(exc) or type(exc).__name__) from exc


async def open_database() -> Database | None:
    """
    Open the database selected by settings, or return None in sample mode.
    """
    if settings.storage_mode() == settings.STORAGE_MODE_SAMPLE:
        logger.warning("storage_mode=sample serving fixed sample data; writes are not persisted")
        return None

    return await Database.connect(
        settings.database_url(),
        min_size=settings.pool_min_size(),
        max_size=settings.pool_max_size(),
        command_timeout=settings.command_timeout(),
    )


def get_database(request: Request) -> Database | None:
    return getattr(request.app.state, "database", None)
