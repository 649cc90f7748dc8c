import json
import logging

import pytest
from pydantic import ValidationError

from support_triage.config import Settings
from support_triage.shared.infrastructure.logging import CustomJsonFormatter

ENV_VARS = (
    "LLM_API_KEY", "OPENAI_API_KEY", "LLM_MODEL", "OPENAI_MODEL",
    "ENVIRONMENT", "DATABASE_URL", "PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = Settings(_env_file=None)

    assert config.port == 4000
    assert config.llm_model == "gpt-4o-mini"
    assert config.llm_temperature == 0.3
    assert config.llm_max_tokens == 1000
    assert config.llm_max_retries == 0
    assert config.llm_api_key is None
    assert config.db_pool_size + config.db_max_overflow == 20
    assert config.db_pool_timeout == 2.0
    assert config.max_request_body_bytes == 1024 * 1024
    assert config.is_production is False


def test_openai_env_names_are_accepted(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-openai")
    clean_env.setenv("OPENAI_MODEL", "gpt-4o")

    config = Settings(_env_file=None)

    assert config.llm_api_key == "sk-openai"
    assert config.llm_model == "gpt-4o"


def test_llm_env_names_take_precedence(clean_env):
    clean_env.setenv("LLM_API_KEY", "sk-llm")
    clean_env.setenv("OPENAI_API_KEY", "sk-openai")

    assert Settings(_env_file=None).llm_api_key == "sk-llm"


def test_environment_is_validated(clean_env):
    clean_env.setenv("ENVIRONMENT", "qa")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_production_flag(clean_env):
    clean_env.setenv("ENVIRONMENT", "production")

    assert Settings(_env_file=None).is_production is True


# ========== Logging ==========

def _format(**fields) -> dict:
    formatter = CustomJsonFormatter("%(name)s %(levelname)s %(message)s", environment="staging")
    record = logging.makeLogRecord({"name": "triage", "levelname": "INFO", "msg": "hello", **fields})
    return json.loads(formatter.format(record))


def test_json_log_carries_context():
    entry = _format(correlation_id="req-1", triage_id="abc")

    assert entry["message"] == "hello"
    assert entry["correlation_id"] == "req-1"
    assert entry["triage_id"] == "abc"
    assert entry["environment"] == "staging"
    assert entry["timestamp"]


def test_json_log_redacts_secrets():
    entry = _format(api_key="sk-secret", auth_token="t0k", prompt_tokens=12)

    assert entry["api_key"] == "***REDACTED***"
    assert entry["auth_token"] == "***REDACTED***"
    assert entry["prompt_tokens"] == 12
