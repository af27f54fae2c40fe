"""Unit tests for tag extraction and language detection."""

from __future__ import annotations

import pytest

from snippet_rag.ingestion.chunker import chunk_markdown
from snippet_rag.ingestion.tagger import (
    TAG_VOCABULARY,
    detect_language,
    extract_tags,
    tag_chunks,
)


class TestExtractTags:
    def test_reverse_a_string_scenario(self) -> None:
        tags = extract_tags("Reverse a String", "Use s[::-1] to reverse a string.")
        assert {"reverse", "string"} <= set(tags)

    def test_vocabulary_is_closed(self) -> None:
        assert len(TAG_VOCABULARY) == 12
        text = " ".join(kw for kws in TAG_VOCABULARY.values() for kw in kws)
        assert set(extract_tags("", text)) == set(TAG_VOCABULARY)

    def test_matching_is_case_insensitive(self) -> None:
        assert extract_tags("", "Return a SORTED copy") == ["sort"]
        assert extract_tags("", "arr.indexOf(x)") == ["search"]

    def test_section_name_contributes(self) -> None:
        assert extract_tags("Deduplicate", "") == ["duplicate"]

    def test_substring_semantics(self) -> None:
        # "interpolation" contains "interpolat", "summary" contains "sum"
        assert set(extract_tags("", "interpolation summary")) == {"format", "reduce"}

    def test_square_brackets_mean_array(self) -> None:
        assert extract_tags("", "x = []") == ["array"]

    def test_no_match(self) -> None:
        assert extract_tags("", "") == []
        assert extract_tags("Hello", "okay") == []

    def test_deterministic(self) -> None:
        args = ("Sort and filter", "Use sorted(filter(pred, items)) on the list")
        first = extract_tags(*args)
        extract_tags("Other", "unrelated call in between")
        assert extract_tags(*args) == first

    def test_output_follows_vocabulary_order(self) -> None:
        tags = extract_tags("", "upper case string reversed")
        order = list(TAG_VOCABULARY)
        assert tags == sorted(tags, key=order.index)


def test_tag_chunks_enriches_in_place() -> None:
    chunks = chunk_markdown("# Sort a List\nUse sorted(items).\n# Misc\nhello")
    tag_chunks(chunks)
    assert {"sort", "array"} <= set(chunks[0].tags)
    assert chunks[1].tags == []


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("python_snippets.md", "python"),
        ("reverse.py", "python"),
        ("javascript.md", "javascript"),
        ("array.js", "javascript"),
        ("types.ts", "typescript"),
        ("TypeScript.md", "typescript"),
        ("query.sql", "general"),
        ("readme.md", "unknown"),
    ],
)
def test_detect_language(filename: str, expected: str) -> None:
    assert detect_language(filename) == expected
