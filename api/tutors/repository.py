"""
Tutor persistence (raw SQL).

With no database handle every read is served from the fixed sample set and
every write is accepted but not stored.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from core.db import Database
from core.errors import NotFoundError
from core.fallback import sample_tutors

from .schemas import Tutor, TutorIn

logger = logging.getLogger(__name__)

# Older installations may hold NULL in columns that are NOT NULL today.
_COLUMNS = """
    id, name, email, subjects, pay, COALESCE(rating, 5.0) AS rating,
    COALESCE(bio, '') AS bio, language, location, availability,
    experience, education, certification, created_at, updated_at
"""


def _row_to_tutor(row: dict[str, Any]) -> Tutor:
    return Tutor.model_validate(row)


def _mutable_args(payload: TutorIn) -> tuple[Any, ...]:
    return (
        payload.name,
        payload.email,
        list(payload.subjects),
        Decimal(str(payload.pay)),
        Decimal(str(payload.rating)),
        payload.bio,
        payload.language,
        payload.location,
        payload.availability,
        payload.experience,
        payload.education,
        payload.certification,
    )


class TutorRepository:
    def __init__(self, database: Database | None) -> None:
        self._db = database

    async def list(self) -> list[Tutor]:
        """
        All tutors, newest first.
        """
        if self._db is None:
            return sample_tutors()

        rows = await self._db.fetch_all(
            f"""
            SELECT {_COLUMNS}
            FROM tutors
            ORDER BY created_at DESC, id DESC
            """
        )
        return [_row_to_tutor(row) for row in rows]

    async def count(self) -> int:
        if self._db is None:
            return len(sample_tutors())
        return int(await self._db.fetch_value("SELECT count(*) FROM tutors"))

    async def create(self, payload: TutorIn) -> Tutor:
        if self._db is None:
            return Tutor(**payload.model_dump())

        row = await self._db.fetch_one(
            f"""
            INSERT INTO tutors (
                name, email, subjects, pay, rating, bio, language, location,
                availability, experience, education, certification
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
            RETURNING {_COLUMNS}
            """,
            *_mutable_args(payload),
        )
        if row is None:
            raise RuntimeError("Failed to create tutor.")
        tutor = _row_to_tutor(row)
        logger.info("tutor_created id=%s", tutor.id)
        return tutor

    async def get_by_id(self, tutor_id: int) -> Tutor:
        if self._db is None:
            for tutor in sample_tutors():
                if tutor.id == tutor_id:
                    return tutor
            raise NotFoundError("Tutor", tutor_id)

        row = await self._db.fetch_one(
            f"""
            SELECT {_COLUMNS}
            FROM tutors
            WHERE id = $1
            """,
            tutor_id,
        )
        if row is None:
            raise NotFoundError("Tutor", tutor_id)
        return _row_to_tutor(row)

    async def get_by_email(self, email: str) -> Tutor | None:
        """
        Exact, case-sensitive match. Email is not unique; the newest match wins.
        """
        if self._db is None:
            for tutor in sample_tutors():
                if tutor.email == email:
                    return tutor
            return None

        row = await self._db.fetch_one(
            f"""
            SELECT {_COLUMNS}
            FROM tutors
            WHERE email = $1
            ORDER BY created_at DESC, id DESC
            LIMIT 1
            """,
            email,
        )
        return _row_to_tutor(row) if row is not None else None

    async def update(self, tutor_id: int, payload: TutorIn) -> Tutor:
        """
        Replace every mutable field. updated_at always moves forward.
        """
        if self._db is None:
            return Tutor(id=tutor_id, **payload.model_dump())

        row = await self._db.fetch_one(
            f"""
            UPDATE tutors
            SET name = $2, email = $3, subjects = $4, pay = $5, rating = $6,
                bio = $7, language = $8, location = $9, availability = $10,
                experience = $11, education = $12, certification = $13,
                updated_at = GREATEST(clock_timestamp(), updated_at + interval '1 microsecond')
            WHERE id = $1
            RETURNING {_COLUMNS}
            """,
            tutor_id,
            *_mutable_args(payload),
        )
        if row is None:
            raise NotFoundError("Tutor", tutor_id)
        logger.info("tutor_updated id=%s", tutor_id)
        return _row_to_tutor(row)

    async def delete(self, tutor_id: int) -> None:
        if self._db is None:
            return None

        row = await self._db.fetch_one(
            """
            DELETE FROM tutors
            WHERE id = $1
            RETURNING id
            """,
            tutor_id,
        )
        if row is None:
            raise NotFoundError("Tutor", tutor_id)
        logger.info("tutor_deleted id=%s", tutor_id)
