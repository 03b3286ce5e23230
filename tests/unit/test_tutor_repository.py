from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.errors import NotFoundError, StorageError
from tutors.repository import TutorRepository
from tutors.schemas import TutorIn


def _payload(**overrides) -> TutorIn:
    data = {"name": "Ann", "email": "ann@example.com", "subjects": ["Math"], "pay": 40, "bio": "x"}
    data.update(overrides)
    return TutorIn(**data)


async def test_create_returns_storage_assigned_fields(stub_db, tutor_row):
    stub_db.results.append(tutor_row(id=11))
    tutor = await TutorRepository(stub_db).create(_payload())

    assert tutor.id == 11
    assert tutor.created_at is not None and tutor.updated_at is not None
    assert tutor.pay == 40.0
    assert tutor.rating == 5.0

    kind, sql, args = stub_db.calls[0]
    assert kind == "fetch_one"
    assert sql.startswith("INSERT INTO tutors")
    assert "RETURNING" in sql
    assert args[:4] == ("Ann", "ann@example.com", ["Math"], Decimal("40.0"))
    assert len(args) == 12


async def test_list_keeps_storage_order_newest_first(stub_db, tutor_row):
    stub_db.results.append([tutor_row(id=2, name="Newer"), tutor_row(id=1, name="Older")])
    tutors = await TutorRepository(stub_db).list()

    assert [t.id for t in tutors] == [2, 1]
    assert "ORDER BY created_at DESC, id DESC" in stub_db.calls[0][1]


async def test_list_of_empty_table_is_empty(stub_db):
    assert await TutorRepository(stub_db).list() == []


async def test_get_by_id_missing_is_not_found(stub_db):
    with pytest.raises(NotFoundError):
        await TutorRepository(stub_db).get_by_id(999)
    assert stub_db.calls[0][2] == (999,)


async def test_get_by_email_miss_is_none(stub_db):
    assert await TutorRepository(stub_db).get_by_email("none@x.com") is None


async def test_get_by_email_prefers_most_recent_match(stub_db, tutor_row):
    stub_db.results.append(tutor_row(id=9))
    tutor = await TutorRepository(stub_db).get_by_email("ann@example.com")

    assert tutor is not None and tutor.id == 9
    _, sql, args = stub_db.calls[0]
    assert "WHERE email = $1" in sql
    assert "ORDER BY created_at DESC, id DESC LIMIT 1" in sql
    assert args == ("ann@example.com",)


async def test_update_replaces_fields_and_keeps_identity(stub_db, tutor_row):
    later = datetime(2025, 1, 2, tzinfo=timezone.utc)
    stub_db.results.append(tutor_row(id=7, name="Ann B", updated_at=later))
    tutor = await TutorRepository(stub_db).update(7, _payload(name="Ann B"))

    assert tutor.id == 7
    assert tutor.updated_at == later
    _, sql, args = stub_db.calls[0]
    assert sql.startswith("UPDATE tutors")
    assert "updated_at = GREATEST(clock_timestamp(), updated_at + interval '1 microsecond')" in sql
    assert args[0] == 7 and args[1] == "Ann B"


async def test_update_missing_is_not_found(stub_db):
    with pytest.raises(NotFoundError):
        await TutorRepository(stub_db).update(999, _payload())


async def test_delete_missing_is_not_found(stub_db):
    with pytest.raises(NotFoundError):
        await TutorRepository(stub_db).delete(999)


async def test_delete_existing(stub_db):
    stub_db.results.append({"id": 7})
    assert await TutorRepository(stub_db).delete(7) is None
    assert stub_db.calls[0][1].startswith("DELETE FROM tutors")


async def test_null_optional_columns_decode(stub_db, tutor_row):
    stub_db.results.append(tutor_row(email=None, language=None, subjects=[]))
    tutor = await TutorRepository(stub_db).get_by_id(7)
    assert tutor.email is None
    assert tutor.subjects == []


async def test_count(stub_db):
    stub_db.results.append(4)
    assert await TutorRepository(stub_db).count() == 4


async def test_storage_errors_propagate(stub_db):
    stub_db.fail_when = lambda sql: True
    with pytest.raises(StorageError):
        await TutorRepository(stub_db).list()
