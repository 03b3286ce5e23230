"""
Client persistence (raw SQL).

Same contract as the tutor repository: no database handle means sample reads
and discarded writes.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from core.db import Database
from core.errors import NotFoundError
from core.fallback import sample_clients

from .schemas import Client, ClientIn

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, name, email, subjects, budget, COALESCE(description, '') AS description,
    language, location, availability, education, created_at, updated_at
"""


def _row_to_client(row: dict[str, Any]) -> Client:
    return Client.model_validate(row)


def _mutable_args(payload: ClientIn) -> tuple[Any, ...]:
    return (
        payload.name,
        payload.email,
        list(payload.subjects),
        Decimal(str(payload.budget)),
        payload.description,
        payload.language,
        payload.location,
        payload.availability,
        payload.education,
    )


class ClientRepository:
    def __init__(self, database: Database | None) -> None:
        self._db = database

    async def list(self) -> list[Client]:
        if self._db is None:
            return sample_clients()

        rows = await self._db.fetch_all(
            f"""
            SELECT {_COLUMNS}
            FROM clients
            ORDER BY created_at DESC, id DESC
            """
        )
        return [_row_to_client(row) for row in rows]

    async def count(self) -> int:
        if self._db is None:
            return len(sample_clients())
        return int(await self._db.fetch_value("SELECT count(*) FROM clients"))

    async def create(self, payload: ClientIn) -> Client:
        if self._db is None:
            return Client(**payload.model_dump())

        row = await self._db.fetch_one(
            f"""
            INSERT INTO clients (
                name, email, subjects, budget, description, language, location,
                availability, education
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING {_COLUMNS}
            """,
            *_mutable_args(payload),
        )
        if row is None:
            raise RuntimeError("Failed to create client.")
        client = _row_to_client(row)
        logger.info("client_created id=%s", client.id)
        return client

    async def get_by_id(self, client_id: int) -> Client:
        if self._db is None:
            for client in sample_clients():
                if client.id == client_id:
                    return client
            raise NotFoundError("Client", client_id)

        row = await self._db.fetch_one(
            f"""
            SELECT {_COLUMNS}
            FROM clients
            WHERE id = $1
            """,
            client_id,
        )
        if row is None:
            raise NotFoundError("Client", client_id)
        return _row_to_client(row)

    async def get_by_email(self, email: str) -> Client | None:
        if self._db is None:
            for client in sample_clients():
                if client.email == email:
                    return client
            return None

        # Newest match wins when several clients share an email.
        row = await self._db.fetch_one(
            f"""
            SELECT {_COLUMNS}
            FROM clients
            WHERE email = $1
            ORDER BY created_at DESC, id DESC
            LIMIT 1
            """,
            email,
        )
        return _row_to_client(row) if row is not None else None

    async def update(self, client_id: int, payload: ClientIn) -> Client:
        if self._db is None:
            return Client(id=client_id, **payload.model_dump())

        row = await self._db.fetch_one(
            f"""
            UPDATE clients
            SET name = $2, email = $3, subjects = $4, budget = $5,
                description = $6, language = $7, location = $8,
                availability = $9, education = $10,
                updated_at = GREATEST(clock_timestamp(), updated_at + interval '1 microsecond')
            WHERE id = $1
            RETURNING {_COLUMNS}
            """,
            client_id,
            *_mutable_args(payload),
        )
        if row is None:
            raise NotFoundError("Client", client_id)
        logger.info("client_updated id=%s", client_id)
        return _row_to_client(row)

    async def delete(self, client_id: int) -> None:
        if self._db is None:
            return None

        row = await self._db.fetch_one(
            """
            DELETE FROM clients
            WHERE id = $1
            RETURNING id
            """,
            client_id,
        )
        if row is None:
            raise NotFoundError("Client", client_id)
        logger.info("client_deleted id=%s", client_id)
