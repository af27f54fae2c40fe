"""Ingestion pipeline — chunk, tag, embed and hand off one document at a time.

Data flow per document::

    text ─► chunk_markdown ─► tag_chunks ─► one batch embedding request
         ─► vectors zipped onto chunks by order ─► store.write_batch

Embedding starts only after the whole document is chunked, and the whole
document fails as a unit: no chunk reaches the store without its vector.
Several documents can run concurrently through :meth:`IngestionPipeline.ingest_many`;
the number of in-flight embedding requests is capped by
``Settings.max_concurrent_documents``.

Usage::

    from snippet_rag.ingestion.pipeline import IngestionPipeline

    pipeline = IngestionPipeline()
    document = asyncio.run(pipeline.ingest_document(markdown, source="reverse.md"))
"""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from snippet_rag.config import Settings, settings
from snippet_rag.exceptions import (
    DocumentValidationError,
    IngestionError,
    ProviderError,
    ProviderShapeError,
    ProviderTimeoutError,
    StorageError,
)
from snippet_rag.ingestion.chunker import chunk_markdown
from snippet_rag.ingestion.embedder import (
    ProviderEmbedder,
    check_vector,
    warn_on_dimension_mismatch,
)
from snippet_rag.ingestion.models import Chunk, EmbeddedChunk, IngestedDocument, IngestionOutcome
from snippet_rag.ingestion.tagger import detect_language, tag_chunks

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.embeddings import Embeddings

    from snippet_rag.storage.base import ChunkStoreBase

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "inline"


def document_id(source: str, text: str) -> str:
    """Stable 16-hex-char id derived from the document's source and text."""
    return hashlib.sha256(f"{source}\n{text}".encode()).hexdigest()[:16]


class IngestionPipeline:
    """Stateless document → embedded-chunks transform.

    Parameters
    ----------
    embedder:
        Any LangChain ``Embeddings``; defaults to a :class:`ProviderEmbedder`
        built from *config*.
    store:
        Optional persistence backend receiving each embedded document.
    config:
        Chunk budgets, timeout and concurrency limit.  Defaults to the
        process-wide settings.
    tag:
        Attach topical tags to chunks before embedding.
    """

    def __init__(
        self,
        embedder: Embeddings | None = None,
        store: ChunkStoreBase | None = None,
        *,
        config: Settings | None = None,
        tag: bool = True,
    ) -> None:
        self._config = config or settings
        self._embedder = embedder or ProviderEmbedder(self._config)
        self._store = store
        self._tag = tag

    # -- public API -----------------------------------------------------------

    def prepare(self, text: str) -> list[Chunk]:
        """Chunk and tag *text* without touching the network.

        Raises
        ------
        DocumentValidationError
            When *text* is not a string or contains no non-empty section.
        """
        if not isinstance(text, str):
            raise DocumentValidationError(
                "Document text must be a string",
                details={"type": type(text).__name__},
            )

        chunks = chunk_markdown(
            text,
            chunk_size=self._config.chunk_size,
            chunk_overlap=self._config.chunk_overlap,
        )
        if not chunks:
            raise DocumentValidationError("Document has no non-empty sections to embed")

        if self._tag:
            tag_chunks(chunks)
        return chunks

    async def ingest_document(
        self,
        text: str,
        *,
        source: str = DEFAULT_SOURCE,
        language: str | None = None,
    ) -> IngestedDocument:
        """Run the full pipeline for one document.

        Returns
        -------
        IngestedDocument
            Every chunk with its vector, in chunk order.

        Raises
        ------
        IngestionError
            Validation, provider or storage failure; the document was not
            (partially) stored.
        """
        return await self._ingest(text, source=source, language=language, limiter=None)

    async def ingest_many(self, documents: Sequence[Document]) -> list[IngestionOutcome]:
        """Ingest LangChain documents concurrently.

        ``metadata["source"]`` and ``metadata["language"]`` are honoured when
        present.  A failing document yields a failed outcome and does not
        affect the others; outcomes follow input order.
        """
        limiter = asyncio.Semaphore(self._config.max_concurrent_documents)

        async def _one(doc: Document) -> IngestionOutcome:
            source = str(doc.metadata.get("source", DEFAULT_SOURCE))
            try:
                ingested = await self._ingest(
                    doc.page_content,
                    source=source,
                    language=doc.metadata.get("language"),
                    limiter=limiter,
                )
            except IngestionError as exc:
                logger.warning(
                    "Ingestion of %s failed (retryable=%s): %s",
                    source,
                    exc.retryable,
                    exc,
                )
                return IngestionOutcome(source=source, error=exc)
            return IngestionOutcome(source=source, document=ingested)

        outcomes = await asyncio.gather(*(_one(doc) for doc in documents))
        failed = sum(1 for o in outcomes if not o.ok)
        logger.info("Ingested %d documents (%d failed)", len(outcomes) - failed, failed)
        return list(outcomes)

    # -- internals ------------------------------------------------------------

    async def _ingest(
        self,
        text: str,
        *,
        source: str,
        language: str | None,
        limiter: asyncio.Semaphore | None,
    ) -> IngestedDocument:
        chunks = self.prepare(text)
        logger.info("Chunked %s into %d chunks", source, len(chunks))

        async with limiter or contextlib.nullcontext():
            vectors = await self._embed([c.content for c in chunks])

        document = IngestedDocument(
            document_id=document_id(source, text),
            source=source,
            language=language or detect_language(source),
            chunks=[
                EmbeddedChunk(**chunk.model_dump(), embedding=vector)
                for chunk, vector in zip(chunks, vectors)
            ],
        )

        if self._store is not None:
            await self._write(document)
        return document

    async def _embed(self, contents: list[str]) -> list[list[float]]:
        if isinstance(self._embedder, ProviderEmbedder):
            # Already bounded by its own timeout; shape and dimensions are checked there.
            return await self._embedder.aembed_many(contents)

        timeout = self._config.embedding_timeout
        try:
            vectors = await asyncio.wait_for(
                self._embedder.aembed_documents(contents), timeout=timeout
            )
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                f"Embedding {len(contents)} chunks exceeded the {timeout}s timeout"
            ) from exc
        except IngestionError:
            raise
        except Exception as exc:
            raise ProviderError(
                f"Embedder {type(self._embedder).__name__} failed",
                details={"error": type(exc).__name__},
            ) from exc

        if not isinstance(vectors, (list, tuple)) or len(vectors) != len(contents):
            raise ProviderShapeError(
                "Embedder returned the wrong number of vectors",
                details={
                    "expected": len(contents),
                    "received": len(vectors) if isinstance(vectors, (list, tuple)) else None,
                },
            )
        vectors = [check_vector(v) for v in vectors]
        warn_on_dimension_mismatch(
            vectors,
            self._config.embedding_dimensions,
            type(self._embedder).__name__,
            stacklevel=3,
        )
        return vectors

    async def _write(self, document: IngestedDocument) -> None:
        try:
            await asyncio.to_thread(self._store.write_batch, document)
        except IngestionError:
            raise
        except Exception as exc:
            raise StorageError(
                f"Store {type(self._store).__name__} failed to write {document.source}",
                details={"error": type(exc).__name__},
            ) from exc
