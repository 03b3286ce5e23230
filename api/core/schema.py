"""
Startup schema setup.

Only idempotent statements are issued: tables are created if missing and
optional columns/indexes are added if missing. Nothing is ever dropped or
renamed. Installations created by older revisions gain the newer columns
through the ADD COLUMN statements.
"""

from __future__ import annotations

import logging

from .db import Database
from .errors import SchemaError, StorageError

logger = logging.getLogger(__name__)


CREATE_TUTORS_TABLE = """
CREATE TABLE IF NOT EXISTS tutors (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    email VARCHAR(255),
    subjects TEXT[] NOT NULL,
    pay DECIMAL(10,2) NOT NULL,
    rating DECIMAL(3,2) DEFAULT 5.0,
    bio TEXT NOT NULL DEFAULT '',
    language TEXT,
    location TEXT,
    availability TEXT,
    experience TEXT,
    education TEXT,
    certification TEXT,
    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now(),
    updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now()
)
"""

CREATE_CLIENTS_TABLE = """
CREATE TABLE IF NOT EXISTS clients (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    email VARCHAR(255),
    subjects TEXT[] NOT NULL,
    budget DECIMAL(10,2) NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    language TEXT,
    location TEXT,
    availability TEXT,
    education TEXT,
    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now(),
    updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now()
)
"""

TUTOR_OPTIONAL_COLUMNS: tuple[tuple[str, str], ...] = (
    ("email", "VARCHAR(255)"),
    ("language", "TEXT"),
    ("location", "TEXT"),
    ("availability", "TEXT"),
    ("experience", "TEXT"),
    ("education", "TEXT"),
    ("certification", "TEXT"),
)

CLIENT_OPTIONAL_COLUMNS: tuple[tuple[str, str], ...] = (
    ("email", "VARCHAR(255)"),
    ("description", "TEXT NOT NULL DEFAULT ''"),
    ("language", "TEXT"),
    ("location", "TEXT"),
    ("availability", "TEXT"),
    ("education", "TEXT"),
)

TUTOR_EXTRAS = (
    "CREATE INDEX IF NOT EXISTS idx_tutors_created_at ON tutors (created_at DESC, id DESC)",
    "CREATE INDEX IF NOT EXISTS idx_tutors_email ON tutors (email)",
)

CLIENT_EXTRAS = (
    # Older revisions declared clients.email as required.
    "ALTER TABLE clients ALTER COLUMN email DROP NOT NULL",
    "CREATE INDEX IF NOT EXISTS idx_clients_created_at ON clients (created_at DESC, id DESC)",
    "CREATE INDEX IF NOT EXISTS idx_clients_email ON clients (email)",
)


async def _create_table(database: Database, table: str, ddl: str) -> None:
    try:
        await database.execute(ddl)
    except StorageError as exc:
        raise SchemaError(f"Failed to create {table} table: {exc}") from exc
    logger.info("schema_table_ready table=%s", table)


async def _best_effort(database: Database, table: str, statements: list[str]) -> int:
    """
    Run statements whose failure must not stop startup. Returns the failure count.
    """
    failures = 0
    for sql in statements:
        try:
            await database.execute(sql)
        except StorageError as exc:
            failures += 1
            logger.warning("schema_statement_failed table=%s sql=%r error=%s", table, sql, exc)
    return failures


def _add_column_statements(table: str, columns: tuple[tuple[str, str], ...]) -> list[str]:
    return [f"ALTER TABLE {table} ADD COLUMN IF NOT EXISTS {name} {column_type}" for name, column_type in columns]


async def ensure_schema(database: Database | None) -> None:
    """
    Create the tutors and clients tables (in that order) and their optional columns.

    Raises SchemaError only when a base table cannot be created.
    """
    if database is None:
        logger.info("schema_skipped reason=no_database")
        return None

    await _create_table(database, "tutors", CREATE_TUTORS_TABLE)
    warnings = await _best_effort(
        database,
        "tutors",
        _add_column_statements("tutors", TUTOR_OPTIONAL_COLUMNS) + list(TUTOR_EXTRAS),
    )

    await _create_table(database, "clients", CREATE_CLIENTS_TABLE)
    warnings += await _best_effort(
        database,
        "clients",
        _add_column_statements("clients", CLIENT_OPTIONAL_COLUMNS) + list(CLIENT_EXTRAS),
    )

    logger.info("schema_ready warnings=%s", warnings)
