import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from support_triage.core import RepositoryException
from support_triage.triage.infrastructure import SQLAlchemyTriageRepository, TriageRequestModel

from conftest import make_result


class BrokenSession:
    """Session stand-in whose database is unreachable."""

    def __init__(self):
        self.rolled_back = False

    def add(self, instance):
        pass

    async def commit(self):
        raise OperationalError("INSERT", {}, Exception("connection refused"))

    async def rollback(self):
        self.rolled_back = True

    async def execute(self, stmt):
        raise ConnectionRefusedError("connection refused")


@pytest.mark.asyncio
async def test_create_persists_row(session):
    repo = SQLAlchemyTriageRepository(session)
    result = make_result()

    record = await repo.create("I was charged twice", result, "gpt-4o-mini")

    row = (await session.execute(select(TriageRequestModel))).scalar_one()
    assert str(row.id) == record.id
    assert row.input_text == "I was charged twice"
    assert row.result_json == result.to_dict()
    assert row.model == "gpt-4o-mini"
    assert record.result == result
    assert record.created_at is not None


@pytest.mark.asyncio
async def test_list_recent_is_newest_first_and_limited(session):
    repo = SQLAlchemyTriageRepository(session)
    for i in range(4):
        await repo.create(f"message {i}", make_result(), "gpt-4o-mini")

    records = await repo.list_recent(3)

    assert [r.text for r in records] == ["message 3", "message 2", "message 1"]


@pytest.mark.asyncio
async def test_list_recent_on_empty_table(session):
    assert await SQLAlchemyTriageRepository(session).list_recent(10) == []


@pytest.mark.asyncio
async def test_get_by_id_round_trip(session):
    repo = SQLAlchemyTriageRepository(session)
    created = await repo.create("Cannot reset my password", make_result(category="account"), "gpt-4o-mini")

    found = await repo.get_by_id(created.id)

    assert found is not None
    assert found.id == created.id
    assert found.result.category == "account"
    assert found.result.confidence == 0.92


@pytest.mark.asyncio
async def test_get_by_id_unknown_or_malformed(session):
    repo = SQLAlchemyTriageRepository(session)

    assert await repo.get_by_id(str(uuid.uuid4())) is None
    assert await repo.get_by_id("does-not-exist") is None


@pytest.mark.asyncio
async def test_create_failure_rolls_back_and_raises():
    broken = BrokenSession()
    repo = SQLAlchemyTriageRepository(broken)

    with pytest.raises(RepositoryException):
        await repo.create("hello", make_result(), "gpt-4o-mini")
    assert broken.rolled_back is True


@pytest.mark.asyncio
async def test_read_failures_raise_repository_exception():
    repo = SQLAlchemyTriageRepository(BrokenSession())

    with pytest.raises(RepositoryException):
        await repo.list_recent(10)
    with pytest.raises(RepositoryException):
        await repo.get_by_id(str(uuid.uuid4()))
