"""Fakes shared across the unit tests."""

from __future__ import annotations

import asyncio

from langchain_core.embeddings import Embeddings

from snippet_rag.ingestion.models import IngestedDocument
from snippet_rag.storage.base import ChunkStoreBase

API_KEY = "sk-test-secret"


class FakeEmbeddings(Embeddings):
    """Deterministic 3-dim embeddings that record every batch it receives."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.batches: list[list[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.batches.append(list(texts))
        return [self.vector(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        return self.vector(text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return self.embed_documents(texts)
        finally:
            self.in_flight -= 1

    @staticmethod
    def vector(text: str) -> list[float]:
        return [float(len(text)), float(len(text.split())), 1.0]


class FakeChunkStore(ChunkStoreBase):
    """In-memory store that keeps every batch it is given."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        super().__init__("test-collection")
        self.batches: list[IngestedDocument] = []
        self._fail_with = fail_with

    def write_batch(self, document: IngestedDocument) -> None:
        if self._fail_with is not None:
            raise self._fail_with
        self.batches.append(document)

    def health_check(self) -> bool:
        return True
