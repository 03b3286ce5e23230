from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from clients import router as clients_router
from clients.schemas import Client, ClientIn
from core.errors import NotFoundError, StorageError
from tutors import router as tutors_router
from tutors.schemas import Tutor, TutorIn

ADMIN_EMAIL = "admin@example.com"


class StubDatabase:
    """
    Stands in for core.db.Database: records every call and replays queued results.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self.results: list[Any] = []
        self.fail_when: Callable[[str], bool] | None = None

    async def _run(self, kind: str, sql: str, args: tuple[Any, ...], default: Any) -> Any:
        normalized = " ".join(sql.split())
        self.calls.append((kind, normalized, args))
        if self.fail_when is not None and self.fail_when(normalized):
            raise StorageError(f"stub failure: {normalized[:40]}")
        if self.results:
            return self.results.pop(0)
        return default

    async def fetch_one(self, sql: str, *args: Any, timeout: float | None = None) -> dict | None:
        return await self._run("fetch_one", sql, args, None)

    async def fetch_all(self, sql: str, *args: Any, timeout: float | None = None) -> list[dict]:
        return await self._run("fetch_all", sql, args, [])

    async def fetch_value(self, sql: str, *args: Any, timeout: float | None = None) -> Any:
        return await self._run("fetch_value", sql, args, 0)

    async def execute(self, sql: str, *args: Any, timeout: float | None = None) -> str:
        return await self._run("execute", sql, args, "OK")

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _next_updated_at(previous: datetime | None) -> datetime:
    now = _now()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class InMemoryTutorRepository:
    """Mimics TutorRepository in database mode, without a database."""

    def __init__(self) -> None:
        self.rows: dict[int, Tutor] = {}
        self._next_id = 1
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise StorageError("connection refused")

    async def list(self) -> list[Tutor]:
        self._check()
        return sorted(self.rows.values(), key=lambda t: (t.created_at, t.id), reverse=True)

    async def count(self) -> int:
        self._check()
        return len(self.rows)

    async def create(self, payload: TutorIn) -> Tutor:
        self._check()
        created = _now()
        tutor = Tutor(id=self._next_id, created_at=created, updated_at=created, **payload.model_dump())
        self.rows[tutor.id] = tutor
        self._next_id += 1
        return tutor

    async def get_by_id(self, tutor_id: int) -> Tutor:
        self._check()
        if tutor_id not in self.rows:
            raise NotFoundError("Tutor", tutor_id)
        return self.rows[tutor_id]

    async def get_by_email(self, email: str) -> Tutor | None:
        self._check()
        matches = [t for t in await self.list() if t.email == email]
        return matches[0] if matches else None

    async def update(self, tutor_id: int, payload: TutorIn) -> Tutor:
        self._check()
        current = await self.get_by_id(tutor_id)
        tutor = Tutor(
            id=tutor_id,
            created_at=current.created_at,
            updated_at=_next_updated_at(current.updated_at),
            **payload.model_dump(),
        )
        self.rows[tutor_id] = tutor
        return tutor

    async def delete(self, tutor_id: int) -> None:
        self._check()
        if self.rows.pop(tutor_id, None) is None:
            raise NotFoundError("Tutor", tutor_id)


class InMemoryClientRepository:
    def __init__(self) -> None:
        self.rows: dict[int, Client] = {}
        self._next_id = 1

    async def list(self) -> list[Client]:
        return sorted(self.rows.values(), key=lambda c: (c.created_at, c.id), reverse=True)

    async def count(self) -> int:
        return len(self.rows)

    async def create(self, payload: ClientIn) -> Client:
        created = _now()
        client = Client(id=self._next_id, created_at=created, updated_at=created, **payload.model_dump())
        self.rows[client.id] = client
        self._next_id += 1
        return client

    async def get_by_id(self, client_id: int) -> Client:
        if client_id not in self.rows:
            raise NotFoundError("Client", client_id)
        return self.rows[client_id]

    async def get_by_email(self, email: str) -> Client | None:
        matches = [c for c in await self.list() if c.email == email]
        return matches[0] if matches else None

    async def update(self, client_id: int, payload: ClientIn) -> Client:
        current = await self.get_by_id(client_id)
        client = Client(
            id=client_id,
            created_at=current.created_at,
            updated_at=_next_updated_at(current.updated_at),
            **payload.model_dump(),
        )
        self.rows[client_id] = client
        return client

    async def delete(self, client_id: int) -> None:
        if self.rows.pop(client_id, None) is None:
            raise NotFoundError("Client", client_id)


@pytest.fixture
def stub_db() -> StubDatabase:
    return StubDatabase()


@pytest.fixture
def tutor_row() -> Callable[..., dict[str, Any]]:
    def make(**overrides: Any) -> dict[str, Any]:
        created = datetime(2025, 1, 1, tzinfo=timezone.utc)
        row = {
            "id": 7,
            "name": "Ann",
            "email": "ann@example.com",
            "subjects": ["Math"],
            "pay": Decimal("40.00"),
            "rating": Decimal("5.00"),
            "bio": "x",
            "language": None,
            "location": None,
            "availability": None,
            "experience": None,
            "education": None,
            "certification": None,
            "created_at": created,
            "updated_at": created,
        }
        row.update(overrides)
        return row

    return make


@pytest.fixture
def client_row() -> Callable[..., dict[str, Any]]:
    def make(**overrides: Any) -> dict[str, Any]:
        created = datetime(2025, 1, 1, tzinfo=timezone.utc)
        row = {
            "id": 3,
            "name": "Ben",
            "email": "ben@example.com",
            "subjects": ["Chemistry"],
            "budget": Decimal("55.50"),
            "description": "exam prep",
            "language": "English",
            "location": None,
            "availability": None,
            "education": "High school",
            "created_at": created,
            "updated_at": created,
        }
        row.update(overrides)
        return row

    return make


@pytest.fixture
def sample_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_MODE", "sample")
    monkeypatch.setenv("ADMIN_EMAILS", f"{ADMIN_EMAIL}, Boss@Example.com")


@pytest.fixture
def api_client(sample_mode: None):
    """
    App started in sample mode (no database).
    """
    import main

    with TestClient(main.app) as client:
        yield client
    main.app.dependency_overrides.clear()


@pytest.fixture
def memory_repos(api_client: TestClient):
    """
    Route the app's repositories to in-memory stores that behave like the database.
    """
    import main

    tutors = InMemoryTutorRepository()
    clients = InMemoryClientRepository()
    main.app.dependency_overrides[tutors_router.get_repository] = lambda: tutors
    main.app.dependency_overrides[clients_router.get_repository] = lambda: clients
    yield tutors, clients
    main.app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-User-Email": ADMIN_EMAIL}
