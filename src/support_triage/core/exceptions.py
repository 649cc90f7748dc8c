"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries.
"""

from typing import Optional, Any


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class EmptyInputException(ValidationException):
    """Raised when the text to triage is missing or blank."""

    def __init__(self, details: Optional[dict] = None):
        super().__init__("Text is required and cannot be empty", details)


class TextTooLongException(ValidationException):
    """Raised when the text to triage exceeds the length limit."""

    def __init__(self, max_length: int, actual_length: int):
        self.max_length = max_length
        self.actual_length = actual_length
        super().__init__(
            f"Text must be {max_length} characters or less",
            {"max_length": max_length, "actual_length": actual_length}
        )


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class LLMException(ExternalServiceException):
    """Exception for LLM API failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("LLM Service", message, details)


class TriageNotSavedException(ApplicationException):
    """
    Raised when a triage was computed but could not be persisted.

    Carries the computed result so the caller can still return it.
    """

    def __init__(self, result: Any, cause: RepositoryException):
        self.result = result
        self.cause = cause
        super().__init__("Failed to save triage to database", {"error": cause.message})
