"""
Triage Infrastructure Repositories
====================================

SQLAlchemy implementation of the triage repository.
"""

import json
from typing import List, Optional
from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from support_triage.core import RepositoryException
from support_triage.triage.application import ITriageRepository
from support_triage.triage.domain import TriageRecord, TriageResult
from support_triage.triage.infrastructure.models import TriageRequestModel

# Connection failures from the driver surface as OSError, not SQLAlchemyError
STORAGE_ERRORS = (SQLAlchemyError, OSError)


class SQLAlchemyTriageRepository(ITriageRepository):
    """SQLAlchemy implementation for triage records."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, text: str, result: TriageResult, model: str) -> TriageRecord:
        """Insert a triage record and commit it."""
        row = TriageRequestModel(
            id=uuid4(),
            input_text=text,
            result_json=result.to_dict(),
            model=model,
            created_at=datetime.now(timezone.utc)
        )

        try:
            self._session.add(row)
            await self._session.commit()
        except STORAGE_ERRORS as e:
            await self._session.rollback()
            raise RepositoryException(f"Failed to store triage: {e}")

        return self._to_record(row)

    async def list_recent(self, limit: int) -> List[TriageRecord]:
        """Newest records first, at most `limit`."""
        stmt = (
            select(TriageRequestModel)
            .order_by(TriageRequestModel.created_at.desc())
            .limit(limit)
        )
        try:
            result = await self._session.execute(stmt)
        except STORAGE_ERRORS as e:
            raise RepositoryException(f"Failed to list triage requests: {e}")
        return [self._to_record(row) for row in result.scalars().all()]

    async def get_by_id(self, triage_id: str) -> Optional[TriageRecord]:
        """Get record by ID; malformed IDs are treated as absent."""
        try:
            triage_uuid = UUID(triage_id)
        except ValueError:
            return None

        stmt = select(TriageRequestModel).where(TriageRequestModel.id == triage_uuid)
        try:
            result = await self._session.execute(stmt)
        except STORAGE_ERRORS as e:
            raise RepositoryException(f"Failed to load triage request: {e}")

        row = result.scalar_one_or_none()
        return self._to_record(row) if row is not None else None

    @staticmethod
    def _to_record(row: TriageRequestModel) -> TriageRecord:
        data = row.result_json
        if isinstance(data, str):
            data = json.loads(data)

        return TriageRecord(
            id=str(row.id),
            text=row.input_text,
            result=TriageResult(
                title=data["title"],
                category=data["category"],
                priority=data["priority"],
                summary=data["summary"],
                suggested_response=data["suggested_response"],
                confidence=float(data["confidence"])
            ),
            model=row.model,
            created_at=row.created_at
        )
