import json
import os
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

# Configure isolated environment before importing the app
TEST_DB_PATH = Path(tempfile.mkdtemp(prefix="support-triage-")) / "test_triage.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["ENVIRONMENT"] = "development"
os.environ["MOCK_LLM"] = "false"

from support_triage.core import LLMException, RepositoryException  # noqa: E402
from support_triage.infrastructure.database import Base  # noqa: E402
from support_triage.infrastructure.llm import ChatCompletionResult  # noqa: E402
from support_triage.main import app  # noqa: E402
from support_triage.triage.application import ILLMClient, ITriageRepository  # noqa: E402
from support_triage.triage.domain import TriageRecord, TriageResult  # noqa: E402
from support_triage.triage.infrastructure.models import TriageRequestModel  # noqa: E402,F401
from support_triage.triage.interfaces.controllers import (  # noqa: E402
    get_llm_client, get_triage_repository
)

VALID_MODEL_OUTPUT = {
    "title": "Double charge on invoice",
    "category": "billing",
    "priority": "high",
    "summary": "The customer was charged twice for the same invoice.",
    "suggested_response": "Sorry about that, we are refunding the duplicate charge.",
    "confidence": 0.92,
}


class FakeLLMClient(ILLMClient):
    """Returns canned content or raises, and records every call."""

    def __init__(
        self,
        content: Optional[str] = None,
        error: Optional[Exception] = None,
        model: str = "fake-model"
    ):
        self.content = json.dumps(VALID_MODEL_OUTPUT) if content is None else content
        self.error = error
        self.calls: List[dict] = []
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(self, messages, temperature, max_tokens, operation="chat_completion"):
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "operation": operation,
        })
        if self.error is not None:
            raise self.error
        return ChatCompletionResult(
            content=self.content,
            model=self._model,
            prompt_tokens=10,
            completion_tokens=20,
            latency_ms=1
        )


class InMemoryTriageRepository(ITriageRepository):
    """Keeps records in insertion order; can simulate storage failures."""

    def __init__(self, fail_writes: bool = False, fail_reads: bool = False):
        self.records: List[TriageRecord] = []
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads
        self.requested_limits: List[int] = []

    async def create(self, text: str, result: TriageResult, model: str) -> TriageRecord:
        if self.fail_writes:
            raise RepositoryException("connection refused")
        record = TriageRecord(
            id=str(uuid.uuid4()),
            text=text,
            result=result,
            model=model,
            created_at=datetime.now(timezone.utc)
        )
        self.records.append(record)
        return record

    async def list_recent(self, limit: int) -> List[TriageRecord]:
        if self.fail_reads:
            raise RepositoryException("connection refused")
        self.requested_limits.append(limit)
        return list(reversed(self.records))[:limit]

    async def get_by_id(self, triage_id: str) -> Optional[TriageRecord]:
        if self.fail_reads:
            raise RepositoryException("connection refused")
        return next((r for r in self.records if r.id == triage_id), None)


def make_result(**overrides) -> TriageResult:
    data = dict(VALID_MODEL_OUTPUT)
    data.update(overrides)
    return TriageResult(**data)


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def repository() -> InMemoryTriageRepository:
    return InMemoryTriageRepository()


@pytest.fixture
def client(fake_llm, repository):
    """API client whose LLM and storage are in-memory fakes."""
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_triage_repository] = lambda: repository
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def db_client(fake_llm):
    """API client backed by a fresh SQLite database."""
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        if TEST_DB_PATH.exists():
            TEST_DB_PATH.unlink()


@pytest_asyncio.fixture
async def session():
    """AsyncSession on an in-memory SQLite database with tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(bind=engine, expire_on_commit=False)
    async with session_maker() as db_session:
        yield db_session

    await engine.dispose()


@pytest.fixture
def llm_failure() -> LLMException:
    return LLMException("rate limited")
