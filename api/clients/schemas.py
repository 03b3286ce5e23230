"""
Client entity schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from core.numeric import Amount


class ClientIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    subjects: list[str]
    budget: Amount = Field(..., gt=0)
    description: str = ""
    language: str | None = None
    location: str | None = None
    availability: str | None = None
    education: str | None = None


class Client(ClientIn):
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
