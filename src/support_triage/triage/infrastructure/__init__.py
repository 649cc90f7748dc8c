"""
Triage Infrastructure Layer
============================

Infrastructure implementations for the support triage module.

Contains:
- Models: SQLAlchemy ORM models
- Repositories: Data access implementations
- External: External service adapters (LLM)
"""

from support_triage.triage.infrastructure.models import TriageRequestModel
from support_triage.triage.infrastructure.repositories import SQLAlchemyTriageRepository
from support_triage.triage.infrastructure.external import LLMClientAdapter

__all__ = [
    "TriageRequestModel",
    "SQLAlchemyTriageRepository",
    "LLMClientAdapter",
]
