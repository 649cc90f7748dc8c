"""
Triage Application DTOs
========================

Data Transfer Objects for Triage API layer.

Pydantic models for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

from support_triage.triage.domain import TriageRecord, TriageResult


# ========== Type Aliases for Literals ==========
CategoryStr = Literal["billing", "technical", "account", "other"]
PriorityStr = Literal["low", "medium", "high"]


# ========== Request DTOs ==========

class TriageRequest(BaseModel):
    """
    Request model for message triage.

    Emptiness and length are checked by the triage service so that
    missing, blank and oversized text all produce a 400.
    """
    text: Optional[str] = Field(None, description="Support message to triage (1-4000 characters)")


# ========== Response DTOs ==========

class TriageResultInfo(BaseModel):
    """Triage assessment without persistence metadata."""
    title: str
    category: CategoryStr
    priority: PriorityStr
    summary: str
    suggested_response: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    needs_human_review: bool

    @classmethod
    def from_domain(cls, result: TriageResult) -> "TriageResultInfo":
        return cls(
            title=result.title,
            category=result.category,
            priority=result.priority,
            summary=result.summary,
            suggested_response=result.suggested_response,
            confidence=result.confidence,
            needs_human_review=result.needs_human_review
        )


class TriageRecordResponse(BaseModel):
    """Response model for a stored triage record."""
    id: str = Field(..., description="Triage record UUID")
    text: str
    title: str
    category: CategoryStr
    priority: PriorityStr
    summary: str
    suggested_response: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    needs_human_review: bool
    created_at: datetime

    @classmethod
    def from_record(cls, record: TriageRecord) -> "TriageRecordResponse":
        """Create from domain record, recomputing the review flag."""
        result = record.result
        return cls(
            id=record.id,
            text=record.text,
            title=result.title,
            category=result.category,
            priority=result.priority,
            summary=result.summary,
            suggested_response=result.suggested_response,
            confidence=result.confidence,
            needs_human_review=result.needs_human_review,
            created_at=record.created_at
        )


class TriageSaveFailedResponse(BaseModel):
    """Response body when the triage ran but could not be stored."""
    detail: str
    error: str
    triage_result: TriageResultInfo


class ErrorResponse(BaseModel):
    """Generic error body."""
    detail: str
