"""
Triage Value Objects
=====================

Stateless policies for the triage domain.

- TriageInputValidator: rejects unusable input before any model call
- ResponseNormalizer: turns raw model output into a TriageResult
"""

import json
import math
import re
from typing import Any, Optional

from support_triage.config import (
    Category, Priority, VALID_CATEGORIES, VALID_PRIORITIES,
    MAX_TEXT_LENGTH, DEFAULT_CONFIDENCE
)
from support_triage.core import EmptyInputException, TextTooLongException
from support_triage.shared.infrastructure.logging import get_logger
from support_triage.triage.domain.entities import TriageResult, FALLBACK_TITLE

logger = get_logger(__name__)

REQUIRED_FIELDS = (
    "title", "category", "priority", "summary", "suggested_response", "confidence"
)

_CODE_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


class TriageInputValidator:
    """Input checks that run before any external call."""

    @staticmethod
    def validate(text: Optional[str], max_length: int = MAX_TEXT_LENGTH) -> str:
        """
        Validate the message text.

        Args:
            text: Raw message text, possibly None
            max_length: Largest accepted length in characters

        Returns:
            The text, unchanged

        Raises:
            EmptyInputException: If text is missing or blank
            TextTooLongException: If text is longer than max_length
        """
        if text is None or not text.strip():
            raise EmptyInputException()
        if len(text) > max_length:
            raise TextTooLongException(max_length, len(text))
        return text


class ResponseNormalizer:
    """
    Converts untrusted model output into a TriageResult.

    Never raises: output that cannot be decoded into an object with all
    required fields becomes the fallback result, while out-of-schema
    values inside an otherwise valid object are repaired in place.
    """

    @staticmethod
    def strip_code_fences(raw: str) -> str:
        return _CODE_FENCE.sub("", raw).strip()

    @classmethod
    def normalize(cls, raw: Optional[str]) -> TriageResult:
        """
        Normalize a raw model response.

        Args:
            raw: Text returned by the model, or None when the call failed

        Returns:
            TriageResult, either repaired model output or the fallback
        """
        if raw is None:
            return TriageResult.fallback()

        cleaned = cls.strip_code_fences(raw)
        try:
            data = json.loads(cleaned)
        except ValueError:
            logger.warning(
                "Model returned invalid JSON, using fallback result",
                extra={"raw_preview": raw[:200]}
            )
            return TriageResult.fallback()

        if not isinstance(data, dict):
            logger.warning(
                "Model returned a non-object JSON value, using fallback result",
                extra={"json_type": type(data).__name__}
            )
            return TriageResult.fallback()

        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            logger.warning(
                "Model response missing required fields, using fallback result",
                extra={"missing_fields": missing}
            )
            return TriageResult.fallback()

        return TriageResult(
            title=cls._title(data["title"]),
            category=cls._closed_set(data["category"], VALID_CATEGORIES, Category.OTHER, "category"),
            priority=cls._closed_set(data["priority"], VALID_PRIORITIES, Priority.MEDIUM, "priority"),
            summary=cls._text(data["summary"]),
            suggested_response=cls._text(data["suggested_response"]),
            confidence=cls.coerce_confidence(data["confidence"])
        )

    @staticmethod
    def coerce_confidence(value: Any) -> float:
        """Coerce to a float in [0.0, 1.0], defaulting to 0.5 when not numeric."""
        number: Optional[float] = None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                number = float(value)
            except OverflowError:
                # Integers beyond float range clamp like infinities
                number = math.copysign(math.inf, value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                number = None

        if number is None or math.isnan(number):
            logger.warning(
                "Invalid confidence, defaulting",
                extra={"confidence_value": repr(value)[:50], "default": DEFAULT_CONFIDENCE}
            )
            number = DEFAULT_CONFIDENCE

        return max(0.0, min(1.0, number))

    @staticmethod
    def _closed_set(value: Any, allowed: list, default: str, field_name: str) -> str:
        candidate = value.strip().lower() if isinstance(value, str) else value
        if candidate in allowed:
            return candidate
        logger.warning(
            f"Invalid {field_name}, defaulting to {default}",
            extra={"field": field_name, "value": repr(value)[:50]}
        )
        return default

    @staticmethod
    def _title(value: Any) -> str:
        title = ResponseNormalizer._text(value).strip()
        return title or FALLBACK_TITLE

    @staticmethod
    def _text(value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)
