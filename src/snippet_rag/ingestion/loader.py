"""Document loaders — thin wrappers around LangChain document loaders."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from langchain_community.document_loaders import DirectoryLoader, TextLoader

from snippet_rag.ingestion.tagger import detect_language

if TYPE_CHECKING:
    from langchain_core.documents import Document


def _label(documents: list[Document]) -> list[Document]:
    for doc in documents:
        source = str(doc.metadata.get("source", ""))
        doc.metadata["language"] = detect_language(Path(source).name)
    return documents


def load_directory(path: str | Path, glob: str = "**/*.md") -> list[Document]:
    """Recursively load markdown snippet files from *path*.

    Parameters
    ----------
    path:
        Root directory containing source documents.
    glob:
        File-matching pattern forwarded to ``DirectoryLoader``.

    Returns
    -------
    list[Document]
        One LangChain ``Document`` per file, sorted by ``metadata["source"]``,
        with ``metadata["language"]`` derived from the file name.
    """
    loader = DirectoryLoader(
        str(path),
        glob=glob,
        loader_cls=TextLoader,  # type: ignore[arg-type]
        loader_kwargs={"encoding": "utf-8"},
        use_multithreading=True,
    )
    documents = sorted(loader.load(), key=lambda d: str(d.metadata.get("source", "")))
    return _label(documents)


def load_markdown(path: str | Path) -> list[Document]:
    """Load a single markdown file."""
    return _label(TextLoader(str(path), encoding="utf-8").load())
