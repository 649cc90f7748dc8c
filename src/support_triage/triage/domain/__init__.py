"""
Triage Domain Layer
===================

Domain layer for the support triage module.

Contains:
- Entities: Core business objects (TriageResult, TriageRecord, TriagePromptBuilder)
- Value Objects: Stateless policies (TriageInputValidator, ResponseNormalizer)

This layer is framework-agnostic and contains pure business logic.
"""

from support_triage.triage.domain.entities import (
    TriageResult,
    TriageRecord,
    TriagePromptBuilder,
    ConfidenceGuardrail,
)
from support_triage.triage.domain.value_objects import (
    TriageInputValidator,
    ResponseNormalizer,
)

__all__ = [
    "TriageResult",
    "TriageRecord",
    "TriagePromptBuilder",
    "ConfidenceGuardrail",
    "TriageInputValidator",
    "ResponseNormalizer",
]
