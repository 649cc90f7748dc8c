"""
Triage Controllers (API Routes)
================================

FastAPI routes for support triage endpoints.

Controllers delegate to application services.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from support_triage.core import (
    RepositoryException, ResourceNotFoundException,
    TriageNotSavedException, ValidationException
)
from support_triage.infrastructure.database import get_session
from support_triage.shared.infrastructure.logging import get_logger
from support_triage.triage.application import (
    TriageService, TriageQueryService,
    TriageRequest, TriageRecordResponse, TriageResultInfo,
    TriageSaveFailedResponse, ErrorResponse,
    ITriageRepository, ILLMClient
)
from support_triage.triage.infrastructure import SQLAlchemyTriageRepository

logger = get_logger(__name__)
router = APIRouter(prefix="/triage", tags=["Support Triage"])


# ========== Example payloads for Swagger ==========

TRIAGE_RESPONSE_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "text": "I was charged twice for my subscription this month and need a refund for the duplicate charge.",
    "title": "Duplicate subscription charge",
    "category": "billing",
    "priority": "high",
    "summary": "The customer was billed twice for their subscription this month. They are requesting a refund for the duplicate charge.",
    "suggested_response": "I'm sorry about the duplicate charge. I've flagged it with our billing team and you'll receive a refund within 3-5 business days.",
    "confidence": 0.93,
    "needs_human_review": False,
    "created_at": "2024-05-01T12:00:00Z"
}


# ========== Dependencies ==========

def get_llm_client(request: Request) -> Optional[ILLMClient]:
    """LLM client from app state; None when no model is configured."""
    return getattr(request.app.state, "llm_client", None)


def get_triage_repository(db: AsyncSession = Depends(get_session)) -> ITriageRepository:
    """Triage repository bound to the request's database session."""
    return SQLAlchemyTriageRepository(db)


def get_triage_service(
    llm_client: Optional[ILLMClient] = Depends(get_llm_client),
    repository: ITriageRepository = Depends(get_triage_repository)
) -> TriageService:
    return TriageService(llm_client, repository)


def get_triage_query_service(
    repository: ITriageRepository = Depends(get_triage_repository)
) -> TriageQueryService:
    return TriageQueryService(repository)


# ========== Route Handlers ==========

@router.post(
    "",
    response_model=TriageRecordResponse,
    summary="Triage a support message",
    description="""
    Analyze a free-form support message with the LLM and store the result.

    - **category**: billing, technical, account, other
    - **priority**: low, medium, high
    - **needs_human_review**: true when confidence is below 0.6

    If the model is unavailable or returns unusable output, a fallback
    result with confidence 0.0 is stored and returned.
    """,
    responses={
        200: {
            "description": "Message triaged and stored",
            "content": {"application/json": {"example": TRIAGE_RESPONSE_EXAMPLE}}
        },
        400: {"model": ErrorResponse, "description": "Text is empty or longer than 4000 characters"},
        500: {"model": TriageSaveFailedResponse, "description": "Triage computed but not stored"}
    }
)
async def create_triage(
    request: Request,
    payload: Optional[TriageRequest] = None,
    service: TriageService = Depends(get_triage_service)
):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    # A request without a body is treated like one without text
    text = payload.text if payload is not None else None

    try:
        record = await service.triage(text)
    except ValidationException as e:
        logger.info("Triage request rejected", extra={"correlation_id": correlation_id, "reason": e.message})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except TriageNotSavedException as e:
        logger.error("Triage not stored", extra={"correlation_id": correlation_id, "error": e.cause.message})
        body = TriageSaveFailedResponse(
            detail=e.message,
            error=e.cause.message,
            triage_result=TriageResultInfo.from_domain(e.result)
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(mode="json")
        )

    return TriageRecordResponse.from_record(record)


@router.get(
    "",
    response_model=List[TriageRecordResponse],
    summary="List recent triage records",
    description="""
    Most recent triage records first.

    `limit` is clamped to 1-100; a missing or non-numeric value means 10.
    """,
    responses={500: {"model": ErrorResponse, "description": "Storage error"}}
)
async def list_triages(
    request: Request,
    limit: Optional[str] = Query(None, description="Number of records (1-100, default 10)"),
    service: TriageQueryService = Depends(get_triage_query_service)
):
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    try:
        records = await service.list_recent(limit)
    except RepositoryException as e:
        logger.error("Error listing triage requests", extra={"correlation_id": correlation_id, "error": e.message})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve triage requests"
        )

    return [TriageRecordResponse.from_record(record) for record in records]


@router.get(
    "/{triage_id}",
    response_model=TriageRecordResponse,
    summary="Get a triage record",
    responses={
        404: {"model": ErrorResponse, "description": "No triage record with this ID"},
        500: {"model": ErrorResponse, "description": "Storage error"}
    }
)
async def get_triage(
    request: Request,
    triage_id: str,
    service: TriageQueryService = Depends(get_triage_query_service)
):
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    try:
        record = await service.get(triage_id)
    except ResourceNotFoundException:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Triage request not found"
        )
    except RepositoryException as e:
        logger.error("Error loading triage request", extra={"correlation_id": correlation_id, "triage_id": triage_id, "error": e.message})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve triage request"
        )

    return TriageRecordResponse.from_record(record)


# Export router for inclusion in main app
triage_router = router
