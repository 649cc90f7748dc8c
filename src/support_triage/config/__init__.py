"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="support-triage", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=4000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/triage",
        description="PostgreSQL connection URL (async)"
    )
    db_pool_size: int = Field(default=10, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)
    db_pool_timeout: float = Field(
        default=2.0,
        description="Seconds to wait for a pooled connection before failing",
        gt=0
    )
    db_pool_recycle: int = Field(
        default=30,
        description="Seconds after which a pooled connection is recycled",
        ge=1
    )

    # ========== LLM Settings ==========
    llm_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LLM_API_KEY", "OPENAI_API_KEY"),
        description="API key for the OpenAI-compatible LLM endpoint"
    )
    llm_model: str = Field(
        default="gpt-4o-mini",
        validation_alias=AliasChoices("LLM_MODEL", "OPENAI_MODEL"),
        description="Model used for triage"
    )
    llm_base_url: Optional[str] = Field(
        default=None,
        description="Override base URL for OpenAI-compatible providers"
    )
    llm_temperature: float = Field(
        default=0.3,
        description="Sampling temperature for triage",
        ge=0.0,
        le=1.0
    )
    llm_max_tokens: int = Field(
        default=1000,
        description="Max tokens for the triage completion",
        ge=1,
        le=8000
    )
    llm_timeout_seconds: float = Field(
        default=30.0,
        description="Deadline for a single LLM request",
        gt=0
    )
    llm_max_retries: int = Field(
        default=0,
        description="Retries performed by the LLM SDK on transient errors",
        ge=0,
        le=5
    )
    mock_llm: bool = Field(
        default=False,
        description="Use mock LLM responses for testing (no API calls)"
    )

    # ========== HTTP ==========
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    max_request_body_bytes: int = Field(
        default=1024 * 1024,
        description="Largest accepted request body",
        ge=1
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class Category(str):
    """Categories a support message can be triaged into."""
    BILLING = "billing"        # Payments, invoices, refunds, charges
    TECHNICAL = "technical"    # Bugs, errors, login problems, performance
    ACCOUNT = "account"        # Access, settings, profile, permissions
    OTHER = "other"            # Everything else


class Priority(str):
    """Triage priority levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ========== Lists for validation ==========

VALID_CATEGORIES = [
    Category.BILLING, Category.TECHNICAL,
    Category.ACCOUNT, Category.OTHER
]
VALID_PRIORITIES = [Priority.LOW, Priority.MEDIUM, Priority.HIGH]

# ========== Triage limits ==========

MAX_TEXT_LENGTH = 4000
REVIEW_CONFIDENCE_THRESHOLD = 0.6
DEFAULT_CONFIDENCE = 0.5

DEFAULT_LIST_LIMIT = 10
MIN_LIST_LIMIT = 1
MAX_LIST_LIMIT = 100
