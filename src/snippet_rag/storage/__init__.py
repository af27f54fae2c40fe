"""
Storage — persistence boundary for embedded chunks.

Public surface
--------------
- :class:`ChunkStoreBase` — abstract backend (subclass for Postgres, etc.).
- :class:`ChromaChunkStore` — default Chroma backend.
"""

from snippet_rag.storage.base import ChunkStoreBase

__all__ = ["ChromaChunkStore", "ChunkStoreBase"]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaChunkStore to avoid pulling in chromadb at import time."""
    if name == "ChromaChunkStore":
        from snippet_rag.storage.chroma_store import ChromaChunkStore

        return ChromaChunkStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
