"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from support_triage.core.exceptions import (
    ApplicationException,
    RepositoryException,
    ValidationException,
    EmptyInputException,
    TextTooLongException,
    ResourceNotFoundException,
    ConfigurationException,
    ExternalServiceException,
    LLMException,
    TriageNotSavedException,
)

__all__ = [
    "ApplicationException",
    "RepositoryException",
    "ValidationException",
    "EmptyInputException",
    "TextTooLongException",
    "ResourceNotFoundException",
    "ConfigurationException",
    "ExternalServiceException",
    "LLMException",
    "TriageNotSavedException",
]
