"""
Triage Application Layer
=========================

Application layer for the support triage module.

Contains:
- Services: Business logic orchestration
- DTOs: Data transfer objects for API serialization
"""

from support_triage.triage.application.dto import (
    TriageRequest,
    TriageResultInfo,
    TriageRecordResponse,
    TriageSaveFailedResponse,
    ErrorResponse,
)
from support_triage.triage.application.services import (
    TriageService,
    TriageQueryService,
    ITriageRepository,
    ILLMClient,
    clamp_list_limit,
)

__all__ = [
    # DTOs
    "TriageRequest",
    "TriageResultInfo",
    "TriageRecordResponse",
    "TriageSaveFailedResponse",
    "ErrorResponse",
    # Services
    "TriageService",
    "TriageQueryService",
    "clamp_list_limit",
    # Repository Interfaces
    "ITriageRepository",
    "ILLMClient",
]
