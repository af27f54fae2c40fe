"""Chroma implementation of the chunk-store abstraction."""

from __future__ import annotations

import logging
from typing import Any

import chromadb

from snippet_rag.config import settings
from snippet_rag.exceptions import StorageError
from snippet_rag.ingestion.models import EmbeddedChunk, IngestedDocument
from snippet_rag.storage.base import ChunkStoreBase

logger = logging.getLogger(__name__)


def _chunk_metadata(document: IngestedDocument, chunk: EmbeddedChunk) -> dict[str, Any]:
    """Flatten a chunk's metadata; Chroma values must be str/int/float/bool."""
    meta: dict[str, Any] = {
        "document_id": document.document_id,
        "source": document.source,
        "language": document.language,
        "section": chunk.section,
        "chunk_index": chunk.chunk_index,
    }
    if chunk.token_count is not None:
        meta["token_count"] = chunk.token_count
    if chunk.tags:
        meta["tags"] = ",".join(chunk.tags)
    return meta


class ChromaChunkStore(ChunkStoreBase):
    """Chroma-backed chunk store.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    distance_metric:
        HNSW space used when the collection is created (``cosine`` | ``l2`` | ``ip``).
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        distance_metric: str = "cosine",
    ) -> None:
        super().__init__(collection_name)
        self._client = chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": distance_metric},
        )

    # -- ChunkStoreBase overrides ---------------------------------------------

    def write_batch(self, document: IngestedDocument) -> None:
        if not document.chunks:
            return

        ids = [f"{document.document_id}_{c.chunk_index}" for c in document.chunks]
        try:
            # A single upsert keeps the document all-or-nothing.
            self._collection.upsert(
                ids=ids,
                embeddings=[c.embedding for c in document.chunks],
                documents=[c.content for c in document.chunks],
                metadatas=[_chunk_metadata(document, c) for c in document.chunks],
            )
        except Exception as exc:
            raise StorageError(
                f"Chroma rejected document {document.document_id}",
                details={"collection": self.collection_name, "chunks": len(ids)},
            ) from exc

        logger.info(
            "Stored %d chunks of %s in collection %r",
            len(ids),
            document.source,
            self.collection_name,
        )

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    def delete_document(self, document_id: str) -> None:
        self._collection.delete(where={"document_id": document_id})
