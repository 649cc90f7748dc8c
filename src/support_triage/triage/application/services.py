"""
Triage Application Services
============================

Application services for support message triage.

Orchestrates the triage pipeline between domain policies, the LLM
client and the triage repository.
"""

import re
from typing import Any, List, Optional
from abc import ABC, abstractmethod

from support_triage.config import (
    settings, DEFAULT_LIST_LIMIT, MIN_LIST_LIMIT, MAX_LIST_LIMIT
)
from support_triage.core import (
    LLMException, RepositoryException, ResourceNotFoundException,
    TriageNotSavedException
)
from support_triage.shared.infrastructure.logging import get_logger, log_latency
from support_triage.triage.domain import (
    TriageResult, TriageRecord, TriagePromptBuilder,
    TriageInputValidator, ResponseNormalizer
)

logger = get_logger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


# ========== Repository Interfaces ==========

class ITriageRepository(ABC):
    """Interface for triage record storage."""

    @abstractmethod
    async def create(self, text: str, result: TriageResult, model: str) -> TriageRecord:
        """Store a new triage record."""

    @abstractmethod
    async def list_recent(self, limit: int) -> List[TriageRecord]:
        """Newest records first, at most `limit`."""

    @abstractmethod
    async def get_by_id(self, triage_id: str) -> Optional[TriageRecord]:
        """Get record by ID, None when absent."""


class ILLMClient(ABC):
    """Interface for LLM operations."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Identifier of the configured model."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float,
        max_tokens: int,
        operation: str = "chat_completion"
    ) -> Any:
        """Generate chat completion."""


# ========== Helpers ==========

def clamp_list_limit(raw_limit: Any) -> int:
    """
    Clamp a requested page size into [1, 100].

    The leading integer is used ("5.5" and "12abc" give 5 and 12).
    Absent values or values without a leading integer fall back to
    the default of 10.
    """
    if raw_limit is None or isinstance(raw_limit, bool):
        return DEFAULT_LIST_LIMIT
    match = _LEADING_INT.match(str(raw_limit))
    if match is None:
        return DEFAULT_LIST_LIMIT
    return max(MIN_LIST_LIMIT, min(MAX_LIST_LIMIT, int(match.group(1))))


# ========== Application Services ==========

class TriageService:
    """
    Service for creating triage records.

    Pipeline: validate -> prompt -> LLM -> normalize -> persist. Every
    failure after validation degrades instead of aborting: a failed
    model call yields the fallback result and a failed write still
    hands the computed result back to the caller.
    """

    def __init__(
        self,
        llm_client: Optional[ILLMClient],
        repository: ITriageRepository,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ):
        self._llm = llm_client
        self._repository = repository
        self._temperature = settings.llm_temperature if temperature is None else temperature
        self._max_tokens = settings.llm_max_tokens if max_tokens is None else max_tokens

    @property
    def model_name(self) -> str:
        return self._llm.model if self._llm is not None else "unconfigured"

    async def assess(self, text: str) -> TriageResult:
        """
        Produce a triage result for already-validated text.

        Args:
            text: Message text that passed validation

        Returns:
            TriageResult, the fallback one if the model was unusable
        """
        if self._llm is None:
            logger.warning("No LLM client configured, using fallback result")
            return ResponseNormalizer.normalize(None)

        messages = TriagePromptBuilder.build_messages(text)

        raw: Optional[str]
        try:
            with log_latency(logger, "llm_triage", model=self._llm.model):
                response = await self._llm.chat_completion(
                    messages=messages,
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                    operation="triage"
                )
            raw = response.content
        except LLMException as e:
            logger.error(
                "AI triage failed",
                extra={"error": e.message, "model": self._llm.model}
            )
            raw = None

        return ResponseNormalizer.normalize(raw)

    async def triage(self, text: Optional[str]) -> TriageRecord:
        """
        Run the full creation pipeline.

        Args:
            text: Raw message text from the caller

        Returns:
            The stored TriageRecord

        Raises:
            ValidationException: If text is empty or too long
            TriageNotSavedException: If the result could not be stored
        """
        text = TriageInputValidator.validate(text)

        logger.info("Triaging message", extra={"text_preview": text[:100], "text_length": len(text)})

        result = await self.assess(text)

        try:
            record = await self._repository.create(text, result, self.model_name)
        except RepositoryException as e:
            logger.error("Failed to store triage", extra={"error": e.message})
            raise TriageNotSavedException(result, e)

        logger.info(
            "Triage completed",
            extra={
                "triage_id": record.id,
                "category": result.category,
                "priority": result.priority,
                "confidence": result.confidence,
                "needs_human_review": result.needs_human_review
            }
        )
        return record


class TriageQueryService:
    """
    Read paths over stored triage records.

    Page size is clamped here rather than trusted from the caller.
    """

    def __init__(self, repository: ITriageRepository):
        self._repository = repository

    async def list_recent(self, raw_limit: Any = None) -> List[TriageRecord]:
        """
        List the newest records.

        Args:
            raw_limit: Requested page size as received (may be None or non-numeric)

        Returns:
            Records ordered newest first
        """
        return await self._repository.list_recent(clamp_list_limit(raw_limit))

    async def get(self, triage_id: str) -> TriageRecord:
        """
        Get a record by ID.

        Raises:
            ResourceNotFoundException: If no record has this ID
        """
        record = await self._repository.get_by_id(triage_id)
        if record is None:
            raise ResourceNotFoundException("Triage request", triage_id)
        return record
