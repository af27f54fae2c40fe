"""Unit tests for settings resolution."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from snippet_rag.config import Settings


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.embedding_model == "qwen/qwen3-embedding-0.6b"
    assert s.embedding_dimensions == 1024
    assert s.chunk_size == 400
    assert s.chunk_overlap == 80
    assert s.max_concurrent_documents >= 1


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHUNK_SIZE", "200")
    monkeypatch.setenv("EMBEDDING_DIMENSIONS", "1536")
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-from-env")

    s = Settings(_env_file=None)

    assert s.chunk_size == 200
    assert s.embedding_dimensions == 1536
    assert s.openrouter_api_key.get_secret_value() == "sk-from-env"


def test_embeddings_url_strips_trailing_slash() -> None:
    s = Settings(_env_file=None, openrouter_base_url="https://example.test/api/v1/")
    assert s.embeddings_url == "https://example.test/api/v1/embeddings"


@pytest.mark.parametrize(
    "overrides",
    [
        {"chunk_size": 0},
        {"chunk_overlap": -1},
        {"embedding_dimensions": 0},
        {"max_concurrent_documents": 0},
        {"embedding_timeout": 0},
    ],
)
def test_invalid_values_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
