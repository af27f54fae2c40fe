"""Domain models flowing through the ingestion pipeline.

``Section`` → ``Chunk`` → ``EmbeddedChunk`` → ``IngestedDocument``.
Chunks are created once by the chunker, tagged in place, and never
mutated after embedding.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from snippet_rag.exceptions import IngestionError


class Section(BaseModel):
    """A heading-delimited region of a document."""

    name: str
    body: str


class Chunk(BaseModel):
    """A retrieval-sized unit of document text.

    Attributes
    ----------
    content:
        Chunk text; never empty.
    section:
        Name of the heading the chunk was cut from (``""`` for a preamble).
    chunk_index:
        Position within the document's chunk sequence, contiguous from 0.
    token_count:
        Estimated tokens; set only for chunks holding a whole section.
    tags:
        Topical labels from :data:`~snippet_rag.ingestion.tagger.TAG_VOCABULARY`.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str = Field(min_length=1)
    section: str
    chunk_index: int = Field(ge=0)
    token_count: int | None = None
    tags: list[str] = Field(default_factory=list)


class EmbeddedChunk(Chunk):
    """A chunk paired with its embedding vector."""

    embedding: list[float]


class IngestedDocument(BaseModel):
    """All embedded chunks of one document, ready to be written as a batch."""

    document_id: str
    source: str
    language: str = "unknown"
    chunks: list[EmbeddedChunk] = Field(default_factory=list)

    def records(self) -> list[dict[str, Any]]:
        """Return persistence rows in chunk order.

        Each row is ``{content, section, chunkIndex, tokenCount?, tags?, embedding}``;
        optional keys are omitted when unset or empty.
        """
        rows: list[dict[str, Any]] = []
        for chunk in self.chunks:
            row = chunk.model_dump(by_alias=True, exclude_none=True)
            if not row.get("tags"):
                row.pop("tags", None)
            rows.append(row)
        return rows


class IngestionOutcome(BaseModel):
    """Result of one document's ingestion attempt inside a concurrent run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: str
    document: IngestedDocument | None = None
    error: IngestionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def retryable(self) -> bool:
        return self.error is not None and self.error.retryable
