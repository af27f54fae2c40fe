"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Embedding provider (OpenAI-compatible /embeddings endpoint)
    openrouter_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer credential for the embedding provider",
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Provider base URL; requests go to '{base_url}/embeddings'",
    )
    embedding_model: str = "qwen/qwen3-embedding-0.6b"
    embedding_dimensions: int = Field(default=1024, gt=0)
    embedding_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Seconds allowed for a single provider call, batch or single",
    )

    # Chunking (token budgets, see ingestion.chunker)
    chunk_size: int = Field(default=400, gt=0)
    chunk_overlap: int = Field(default=80, ge=0)

    # Concurrency
    max_concurrent_documents: int = Field(
        default=4,
        ge=1,
        description="Upper bound on documents embedding at the same time",
    )

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "snippet_rag"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("openrouter_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def embeddings_url(self) -> str:
        return f"{self.openrouter_base_url}/embeddings"


# Process-wide instance; pass an explicit Settings to constructors in tests.
settings = Settings()
