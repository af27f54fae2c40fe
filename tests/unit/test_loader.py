"""Unit tests for the document loaders."""

from __future__ import annotations

from pathlib import Path

from snippet_rag.ingestion.loader import load_directory, load_markdown


def test_load_directory_labels_and_sorts(tmp_path: Path) -> None:
    (tmp_path / "python_reverse.md").write_text("# Reverse\nUse s[::-1].", encoding="utf-8")
    (tmp_path / "notes.md").write_text("# Notes\nplain prose", encoding="utf-8")
    nested = tmp_path / "web"
    nested.mkdir()
    (nested / "sort_js.md").write_text("# Sort\narr.sort()", encoding="utf-8")
    (tmp_path / "ignored.txt").write_text("not markdown", encoding="utf-8")

    docs = load_directory(tmp_path)

    names = [Path(d.metadata["source"]).name for d in docs]
    assert sorted(names) == ["notes.md", "python_reverse.md", "sort_js.md"]
    assert [d.metadata["source"] for d in docs] == sorted(d.metadata["source"] for d in docs)
    languages = {Path(d.metadata["source"]).name: d.metadata["language"] for d in docs}
    assert languages == {
        "notes.md": "unknown",
        "python_reverse.md": "python",
        "sort_js.md": "javascript",
    }


def test_load_directory_custom_glob(tmp_path: Path) -> None:
    (tmp_path / "a.md").write_text("# A\nbody", encoding="utf-8")
    (tmp_path / "b.txt").write_text("# B\nbody", encoding="utf-8")

    docs = load_directory(tmp_path, glob="*.txt")

    assert [Path(d.metadata["source"]).name for d in docs] == ["b.txt"]


def test_load_markdown_single_file(tmp_path: Path) -> None:
    path = tmp_path / "query.sql.md"
    path.write_text("# Select\nSELECT * FROM t WHERE x = 1;", encoding="utf-8")

    [doc] = load_markdown(path)

    assert doc.page_content.startswith("# Select")
    assert doc.metadata["language"] == "general"
