"""Deterministic labelling: topical tags for chunks, languages for files."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from snippet_rag.ingestion.models import Chunk

# Closed vocabulary: tag -> keywords, any of which triggers the tag.
TAG_VOCABULARY: dict[str, tuple[str, ...]] = {
    "reverse": ("reverse", "reversed", "reversal"),
    "sort": ("sort", "sorted", "sorting", "order"),
    "filter": ("filter", "filtering", "where", "condition"),
    "map": ("map", "transform", "mapping"),
    "reduce": ("reduce", "accumulate", "sum", "total"),
    "search": ("find", "search", "indexof", "findindex", "includes"),
    "string": ("string", "str", "text", "char"),
    "array": ("array", "list", "collection", "[]"),
    "duplicate": ("duplicate", "deduplicate", "unique", "set"),
    "format": ("format", "template", "interpolat"),
    "split": ("split", "join", "delimiter"),
    "case": ("upper", "lower", "case", "title"),
}

UNKNOWN_LANGUAGE = "unknown"

# Evaluated in order, first match wins.
LANGUAGE_RULES: tuple[tuple[Callable[[str], bool], str], ...] = (
    (lambda name: "python" in name or ".py" in name, "python"),
    (lambda name: "javascript" in name or "js" in name, "javascript"),
    (lambda name: "typescript" in name or "ts" in name, "typescript"),
    (lambda name: "sql" in name, "general"),
)


def extract_tags(section: str, content: str) -> list[str]:
    """Return the vocabulary tags whose keywords occur in *section* + *content*.

    Matching is a case-insensitive substring test.  The result follows
    vocabulary order, so identical inputs always give identical output.
    """
    haystack = f"{section} {content}".lower()
    return [
        tag
        for tag, keywords in TAG_VOCABULARY.items()
        if any(keyword in haystack for keyword in keywords)
    ]


def tag_chunks(chunks: Iterable[Chunk]) -> None:
    """Attach tags to every chunk in place."""
    for chunk in chunks:
        chunk.tags = extract_tags(chunk.section, chunk.content)


def detect_language(filename: str) -> str:
    """Label a snippet file by the language its name suggests.

    Returns ``"unknown"`` when no rule matches.
    """
    name = filename.lower()
    for predicate, label in LANGUAGE_RULES:
        if predicate(name):
            return label
    return UNKNOWN_LANGUAGE
