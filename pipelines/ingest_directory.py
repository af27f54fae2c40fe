"""Ingest a directory of markdown snippets into the chunk store.

    load → chunk → tag → embed (one request per document) → store

Run
---
    python -m pipelines.ingest_directory --path data/snippets
    python -m pipelines.ingest_directory --path data/snippets --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from snippet_rag.config import settings
from snippet_rag.exceptions import DocumentValidationError
from snippet_rag.ingestion.loader import load_directory
from snippet_rag.ingestion.pipeline import IngestionPipeline

log = logging.getLogger("ingest_directory")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Snippet ingestion pipeline")
    parser.add_argument("--path", required=True, help="Directory of markdown snippets")
    parser.add_argument("--glob", default="**/*.md", help="File-matching pattern")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Chunk and tag only; no provider or store calls",
    )
    parser.add_argument(
        "--no-store",
        action="store_true",
        help="Embed but do not write to the vector store",
    )
    return parser


def _dry_run(pipeline: IngestionPipeline, documents: list) -> int:
    failures = 0
    for doc in documents:
        source = doc.metadata.get("source", "inline")
        try:
            chunks = pipeline.prepare(doc.page_content)
        except DocumentValidationError as exc:
            log.warning("Skipping %s: %s", source, exc)
            failures += 1
            continue
        for chunk in chunks:
            log.info(
                "%s #%d [%s] tags=%s words=%d",
                source,
                chunk.chunk_index,
                chunk.section,
                ",".join(chunk.tags) or "-",
                len(chunk.content.split()),
            )
    return failures


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = _build_parser().parse_args(argv)

    documents = load_directory(args.path, glob=args.glob)
    log.info("Loaded %d documents from %s", len(documents), args.path)

    if args.dry_run:
        failures = _dry_run(IngestionPipeline(config=settings), documents)
        return 1 if failures else 0

    store = None
    if not args.no_store:
        from snippet_rag.storage.chroma_store import ChromaChunkStore

        store = ChromaChunkStore()

    pipeline = IngestionPipeline(store=store, config=settings)
    outcomes = asyncio.run(pipeline.ingest_many(documents))

    failed = [o for o in outcomes if not o.ok]
    for outcome in failed:
        log.error(
            "FAILED %s (retryable=%s): %s",
            outcome.source,
            outcome.retryable,
            outcome.error,
        )
    chunks = sum(len(o.document.chunks) for o in outcomes if o.document is not None)
    log.info(
        "Ingested %d/%d documents, %d chunks",
        len(outcomes) - len(failed),
        len(outcomes),
        chunks,
    )
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
