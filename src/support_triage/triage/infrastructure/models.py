"""
Triage Infrastructure Models
=============================

SQLAlchemy ORM models for the triage module.
"""

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4

from sqlalchemy import JSON, String, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from support_triage.infrastructure.database import Base


class TriageRequestModel(Base):
    """
    Database model for TriageRecord entity.

    The triage result is stored as an opaque JSON blob; the review flag
    is not stored and is recomputed from confidence on read.
    """
    __tablename__ = "triage_requests"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Original message
    input_text: Mapped[str] = mapped_column(Text, nullable=False)

    # Serialized TriageResult
    result_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)

    # Model that produced the result
    model: Mapped[str] = mapped_column(String(100), nullable=False)

    # Timestamp
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc)
    )
