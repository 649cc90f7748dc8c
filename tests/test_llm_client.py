from types import SimpleNamespace

import pytest

from support_triage.config import settings
from support_triage.core import ConfigurationException, LLMException
from support_triage.infrastructure.llm import (
    MockLLMClient, OpenAILLMClient, build_llm_client
)
from support_triage.triage.domain import ResponseNormalizer
from support_triage.triage.infrastructure import LLMClientAdapter

MESSAGES = [{"role": "user", "content": "Classify this message"}]


def _completion(content, model="gpt-4o-mini"):
    return SimpleNamespace(
        model=model,
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=34)
    )


@pytest.fixture
def openai_client():
    return OpenAILLMClient(api_key="sk-test", model="gpt-4o-mini", max_retries=0)


def test_openai_client_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "llm_api_key", None)

    with pytest.raises(ConfigurationException):
        OpenAILLMClient()


@pytest.mark.asyncio
async def test_openai_client_returns_content(openai_client, monkeypatch):
    captured = {}

    async def fake_create(**kwargs):
        captured.update(kwargs)
        return _completion('{"title": "x"}')

    monkeypatch.setattr(openai_client._client.chat.completions, "create", fake_create)

    result = await openai_client.chat_completion(MESSAGES, temperature=0.3, max_tokens=1000)

    assert result.content == '{"title": "x"}'
    assert result.model == "gpt-4o-mini"
    assert result.total_tokens == 46
    assert captured == {
        "model": "gpt-4o-mini",
        "messages": MESSAGES,
        "temperature": 0.3,
        "max_tokens": 1000,
    }


@pytest.mark.asyncio
async def test_openai_client_empty_content(openai_client, monkeypatch):
    async def fake_create(**kwargs):
        return _completion(None)

    monkeypatch.setattr(openai_client._client.chat.completions, "create", fake_create)

    result = await openai_client.chat_completion(MESSAGES)

    assert result.content == ""


@pytest.mark.asyncio
async def test_openai_client_wraps_sdk_errors(openai_client, monkeypatch):
    async def fake_create(**kwargs):
        raise TimeoutError("request timed out")

    monkeypatch.setattr(openai_client._client.chat.completions, "create", fake_create)

    with pytest.raises(LLMException) as exc_info:
        await openai_client.chat_completion(MESSAGES)
    assert "request timed out" in exc_info.value.message


@pytest.mark.asyncio
async def test_mock_client_output_normalizes_cleanly():
    result = await MockLLMClient().chat_completion(MESSAGES)

    triage = ResponseNormalizer.normalize(result.content)

    assert result.content.startswith("```json")
    assert triage.category == "technical"
    assert triage.confidence == 0.85


@pytest.mark.asyncio
async def test_adapter_delegates_to_client():
    adapter = LLMClientAdapter(MockLLMClient(model="mock-x"))

    result = await adapter.chat_completion(MESSAGES, temperature=0.3, max_tokens=1000, operation="triage")

    assert adapter.model == "mock-x"
    assert result.model == "mock-x"


def test_build_llm_client_prefers_mock(monkeypatch):
    monkeypatch.setattr(settings, "mock_llm", True)

    assert isinstance(build_llm_client(), MockLLMClient)


def test_build_llm_client_without_key(monkeypatch):
    monkeypatch.setattr(settings, "mock_llm", False)
    monkeypatch.setattr(settings, "llm_api_key", None)

    assert build_llm_client() is None


def test_build_llm_client_with_key(monkeypatch):
    monkeypatch.setattr(settings, "mock_llm", False)
    monkeypatch.setattr(settings, "llm_api_key", "sk-test")

    client = build_llm_client()

    assert isinstance(client, OpenAILLMClient)
    assert client.model == settings.llm_model
