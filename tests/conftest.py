"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from snippet_rag.config import Settings
from tests.helpers import API_KEY, FakeChunkStore, FakeEmbeddings


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        openrouter_api_key=API_KEY,
        openrouter_base_url="https://provider.test/v1/",
        embedding_model="test/embed-small",
        embedding_dimensions=3,
        embedding_timeout=5.0,
        chunk_size=400,
        chunk_overlap=80,
        max_concurrent_documents=2,
    )


@pytest.fixture()
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture()
def fake_store() -> FakeChunkStore:
    return FakeChunkStore()


@pytest.fixture()
def make_response():
    """Factory for ``requests.Response``-like mocks."""

    def _make(status_code: int = 200, payload: Any = None, text: str = "") -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.text = text
        response.json.return_value = payload
        return response

    return _make
