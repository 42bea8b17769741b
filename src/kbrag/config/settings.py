"""Configuration management for the knowledge-base RAG engine."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.services.prompts import DEFAULT_FALLBACK_ANSWER


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets mounted from files or copied from dashboards may carry a BOM that
    breaks HTTP headers.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google AI API
    google_api_key: str = ""

    @field_validator("google_api_key", mode="after")
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Knowledge base
    kb_directory: Path = Path("./kb")

    # Retrieval
    top_k: int = Field(default=3, gt=0)

    # Models (passed through to providers)
    embedding_backend: Literal["gemini", "local"] = "gemini"
    embedding_model: str = "models/text-embedding-004"
    local_embedding_model: str = "all-MiniLM-L6-v2"
    generation_model: str = "gemini-2.0-flash"

    # Generation
    max_answer_tokens: int = Field(default=300, gt=0)
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    fallback_answer: str = DEFAULT_FALLBACK_ANSWER

    # Outbound calls
    request_timeout_s: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=1)
    embedding_requests_per_minute: int | None = 60
    llm_requests_per_minute: int | None = 15

    # Logging
    log_level: str = "INFO"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    """Settings singleton for the composition root."""
    return Settings()
