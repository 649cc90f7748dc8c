"""
Triage External Service Adapters
==================================

Adapters for external services used by the triage module.

Implements the interfaces defined in the application layer using concrete
external service implementations.
"""

from typing import List

from support_triage.triage.application import ILLMClient
from support_triage.infrastructure.llm import BaseLLMClient, ChatCompletionResult


class LLMClientAdapter(ILLMClient):
    """
    Adapter that wraps the infrastructure LLM client.

    Implements the application layer ILLMClient interface using
    any infrastructure layer BaseLLMClient (OpenAI or mock).
    """

    def __init__(self, client: BaseLLMClient):
        self._client = client

    @property
    def model(self) -> str:
        return self._client.model

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Generate chat completion."""
        return await self._client.chat_completion(messages, temperature, max_tokens, operation)
