"""
Tutor entity schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from core.numeric import Amount, Rating


class TutorIn(BaseModel):
    """
    Request body for create and update. Every mutable field of a tutor.

    Unknown fields (including `id` and timestamps) are ignored.
    """

    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    subjects: list[str]
    pay: Amount = Field(..., gt=0)
    # Intended range is 0-5; only the column bounds are enforced.
    rating: Rating = 5.0
    bio: str = ""
    language: str | None = None
    location: str | None = None
    availability: str | None = None
    experience: str | None = None
    education: str | None = None
    certification: str | None = None


class Tutor(TutorIn):
    # id == 0 and created_at is None means "not persisted".
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
