"""Section-aware markdown chunking with token-budgeted overlap.

A document is cut at every ``#`` / ``##`` heading.  Sections that fit the
token budget become one chunk each; oversized sections are split into
overlapping word windows.  All sizing uses :func:`estimate_tokens`, a
4-characters-per-token approximation, so chunk boundaries are
reproducible without a tokenizer.
"""

from __future__ import annotations

import logging
import math
import re

from snippet_rag.ingestion.models import Chunk, Section

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4
TOKENS_PER_WORD = 1.3

# Lookahead: the heading line opens the next section instead of ending this one.
HEADING_SPLIT_RE = re.compile(r"(?=^#{1,2})", re.MULTILINE)
_HEADING_PREFIX_RE = re.compile(r"^#+\s*")


def estimate_tokens(text: str) -> int:
    """Approximate token count as ``ceil(len(text) / 4)``."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def split_sections(text: str) -> list[Section]:
    """Partition *text* into heading-delimited sections.

    Parameters
    ----------
    text:
        Markdown source.

    Returns
    -------
    list[Section]
        Sections in document order.  Text before the first heading forms a
        section with an empty name; sections with an empty body are dropped.
    """
    sections: list[Section] = []
    for segment in HEADING_SPLIT_RE.split(text):
        segment = segment.strip()
        if not segment:
            continue

        if segment.startswith("#"):
            heading, _, rest = segment.partition("\n")
            name = _HEADING_PREFIX_RE.sub("", heading).strip()
            body = rest.strip()
        else:
            name = ""
            body = segment

        if not body:
            continue
        sections.append(Section(name=name, body=body))
    return sections


def split_by_size(
    body: str,
    section: str,
    start_index: int,
    *,
    chunk_size: int = 400,
    chunk_overlap: int = 80,
) -> list[Chunk]:
    """Slide an overlapping word window across an oversized section body.

    Token budgets are converted to word budgets with the empirical
    1.3 tokens-per-word ratio: ``max_words = floor(chunk_size / 1.3)`` and
    ``overlap_words = floor(chunk_overlap)``.

    Parameters
    ----------
    body:
        Section text to split.
    section:
        Section name copied onto every chunk.
    start_index:
        ``chunk_index`` of the first emitted chunk.
    chunk_size:
        Token budget per chunk.
    chunk_overlap:
        Token budget repeated between consecutive chunks.

    Returns
    -------
    list[Chunk]
        Consecutive chunks; the last one may be shorter than ``max_words``.
        When the overlap is not smaller than the window only the first
        window is emitted.
    """
    words = body.split()
    total = len(words)
    max_words = max(1, math.floor(chunk_size / TOKENS_PER_WORD))
    overlap_words = math.floor(chunk_overlap)

    chunks: list[Chunk] = []
    start = 0
    while start < total:
        end = min(start + max_words, total)
        chunks.append(
            Chunk(
                content=" ".join(words[start:end]),
                section=section,
                chunk_index=start_index + len(chunks),
            )
        )
        if end == total:
            break

        next_start = end - overlap_words
        if next_start <= start:
            logger.warning(
                "Overlap of %d words does not advance a %d-word window; "
                "section %r truncated after one chunk",
                overlap_words,
                max_words,
                section,
            )
            break
        start = next_start
    return chunks


def chunk_markdown(
    text: str,
    *,
    chunk_size: int = 400,
    chunk_overlap: int = 80,
) -> list[Chunk]:
    """Split a markdown document into an ordered chunk sequence.

    ``chunk_index`` runs contiguously from 0 across all sections, in
    section-then-position order.
    """
    chunks: list[Chunk] = []
    for section in split_sections(text):
        token_count = estimate_tokens(section.body)
        if token_count <= chunk_size:
            chunks.append(
                Chunk(
                    content=section.body,
                    section=section.name,
                    chunk_index=len(chunks),
                    token_count=token_count,
                )
            )
        else:
            chunks.extend(
                split_by_size(
                    section.body,
                    section.name,
                    len(chunks),
                    chunk_size=chunk_size,
                    chunk_overlap=chunk_overlap,
                )
            )

    logger.debug("Produced %d chunks", len(chunks))
    return chunks
