"""
LLM Client Infrastructure
==========================

Wrapper for OpenAI-compatible LLM providers providing a clean interface for
LLM operations.

This module abstracts the LLM client implementation following the
Dependency Inversion Principle - the application layer depends on
abstractions, not concrete implementations.
"""

import json
import time
from typing import List, Optional
from abc import ABC, abstractmethod

from openai import AsyncOpenAI

from support_triage.config import settings
from support_triage.core import LLMException, ConfigurationException
from support_triage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ChatCompletionResult:
    """Result of a chat completion."""

    def __init__(
        self,
        content: str,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        latency_ms: int
    ):
        self.content = content
        self.model = model
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = prompt_tokens + completion_tokens
        self.latency_ms = latency_ms


class BaseLLMClient(ABC):
    """
    Interface for LLM client operations.

    Following Interface Segregation Principle - only methods
    actually needed by the application are defined.
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Identifier of the model this client talks to."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Generate chat completion."""


class OpenAILLMClient(BaseLLMClient):
    """
    OpenAI client implementation for GPT models.

    Provides async wrapper around OpenAI SDK operations. Any
    OpenAI-compatible endpoint can be used through ``base_url``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None
    ):
        self._api_key = api_key or settings.llm_api_key
        if not self._api_key:
            raise ConfigurationException("LLM API key not configured")

        self._client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=base_url or settings.llm_base_url,
            timeout=timeout if timeout is not None else settings.llm_timeout_seconds,
            max_retries=max_retries if max_retries is not None else settings.llm_max_retries,
        )
        self._model = model or settings.llm_model

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """
        Generate chat completion using OpenAI GPT.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens to generate
            operation: Operation type for logging

        Returns:
            ChatCompletionResult with generated text

        Raises:
            LLMException: If completion fails
        """
        start_time = time.perf_counter()

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except Exception as e:
            raise LLMException(f"Chat completion failed: {str(e)}")

        latency_ms = int((time.perf_counter() - start_time) * 1000)

        content = response.choices[0].message.content if response.choices else None
        usage = response.usage

        logger.info(
            "LLM completion finished",
            extra={
                "operation": operation,
                "model": response.model or self._model,
                "latency_ms": latency_ms,
                "prompt_tokens": usage.prompt_tokens if usage else 0,
                "completion_tokens": usage.completion_tokens if usage else 0
            }
        )

        return ChatCompletionResult(
            content=content or "",
            model=response.model or self._model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            latency_ms=latency_ms
        )


class MockLLMClient(BaseLLMClient):
    """
    Mock LLM client for testing.

    Returns predictable responses without calling external APIs.
    """

    def __init__(self, model: str = "mock-model"):
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Return a canned triage assessment wrapped in a code fence."""
        user_content = str(messages[-1].get("content", "")) if messages else ""

        mock_response = {
            "title": "Mock: Support request",
            "category": "technical",
            "priority": "medium",
            "summary": "Mock: The customer reports a problem that needs follow-up.",
            "suggested_response": "Thanks for reaching out. We are looking into this and will update you shortly.",
            "confidence": 0.85
        }
        content = f"```json\n{json.dumps(mock_response, indent=2)}\n```"

        return ChatCompletionResult(
            content=content,
            model=self._model,
            prompt_tokens=len(user_content.split()),
            completion_tokens=len(content.split()),
            latency_ms=0
        )


def build_llm_client() -> Optional[BaseLLMClient]:
    """
    Build the LLM client described by settings.

    Returns None when no API key is configured; callers then run
    without a model and every triage degrades to the fallback result.
    """
    if settings.mock_llm:
        return MockLLMClient()
    try:
        return OpenAILLMClient()
    except ConfigurationException as e:
        logger.warning(f"LLM client not configured: {e}")
        return None
