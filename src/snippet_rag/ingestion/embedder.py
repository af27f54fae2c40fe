"""Embedding client for an OpenAI-compatible ``/embeddings`` endpoint.

One text becomes one request; a batch of texts also becomes exactly one
request, so a whole document is vectorized in a single round trip.  The
provider tags every returned vector with the ``index`` of its input and
does not promise to keep submission order, so batch results are sorted
by that index before use.

Usage::

    from snippet_rag.ingestion.embedder import ProviderEmbedder

    embedder = ProviderEmbedder()
    vectors  = embedder.embed_many(["reverse a string", "sort an array"])
"""

from __future__ import annotations

import asyncio
import logging
import warnings
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

import requests
from langchain_core.embeddings import Embeddings

from snippet_rag.config import Settings, settings
from snippet_rag.exceptions import (
    DimensionMismatchWarning,
    ProviderConnectionError,
    ProviderHTTPError,
    ProviderShapeError,
    ProviderTimeoutError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def sanitize(text: str) -> str:
    """Replace CRLF and tabs with single spaces and trim."""
    return text.replace("\r\n", " ").replace("\t", " ").strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_vector(vector: Any) -> list[float]:
    """Return *vector* as a list, or raise if it is not a non-empty list of numbers."""
    if not isinstance(vector, (list, tuple)) or not vector:
        raise ProviderShapeError("Embedding vector is missing or empty")
    if not all(_is_number(v) for v in vector):
        raise ProviderShapeError(
            "Embedding vector contains non-numeric values",
            details={"types": sorted({type(v).__name__ for v in vector if not _is_number(v)})},
        )
    return list(vector)


def warn_on_dimension_mismatch(
    vectors: Sequence[Sequence[float]],
    expected: int,
    model: str,
    *,
    stacklevel: int = 2,
) -> None:
    """Log and emit :class:`DimensionMismatchWarning` for each unexpected vector length.

    *stacklevel* counts from the caller of this function, as in ``warnings.warn``.
    """
    for actual in sorted({len(v) for v in vectors if len(v) != expected}):
        logger.warning(
            "Model %s returned %d-dimensional vectors, configuration expects %d",
            model,
            actual,
            expected,
        )
        warnings.warn(DimensionMismatchWarning(expected, actual), stacklevel=stacklevel + 1)


def _extract_data(payload: Any, expected: int) -> list[Any]:
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list) or not data:
        raise ProviderShapeError("Embedding response has no 'data' list")
    if len(data) != expected:
        raise ProviderShapeError(
            "Embedding response has the wrong number of vectors",
            details={"expected": expected, "received": len(data)},
        )
    return data


def _vector_of(item: Any) -> list[float]:
    if not isinstance(item, dict) or "embedding" not in item:
        raise ProviderShapeError("Embedding response item has no 'embedding' vector")
    return check_vector(item["embedding"])


def _order_by_index(data: list[Any]) -> list[Any]:
    """Sort batch items by their ``index``, which must cover ``0..n-1`` exactly."""
    indices = [item.get("index") if isinstance(item, dict) else None for item in data]
    if not all(isinstance(i, int) for i in indices):
        raise ProviderShapeError("Embedding response item has no integer 'index'")
    if sorted(indices) != list(range(len(data))):
        raise ProviderShapeError(
            "Embedding response indices do not match the inputs",
            details={"indices": indices},
        )
    return sorted(data, key=lambda item: item["index"])


class ProviderEmbedder(Embeddings):
    """HTTP embedding client bound to one model configuration.

    Parameters
    ----------
    config:
        Settings supplying the model id, base URL, credential, expected
        dimensionality and timeout.  Defaults to the process-wide settings.
    session:
        ``requests.Session`` to send requests through; one is created when
        omitted.  The session owns the provider connection pool.
    """

    def __init__(
        self,
        config: Settings | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config or settings
        self._session = session or requests.Session()

    @property
    def model(self) -> str:
        return self._config.embedding_model

    # -- public API -----------------------------------------------------------

    def embed(self, text: str) -> list[float]:
        """Embed a single text and return its vector."""
        payload = self._post(sanitize(text))
        vector = _vector_of(_extract_data(payload, expected=1)[0])
        self._check_dimensions([vector])
        return vector

    def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed *texts* in one request; ``result[i]`` belongs to ``texts[i]``."""
        if not texts:
            return []

        payload = self._post([sanitize(t) for t in texts])
        data = _order_by_index(_extract_data(payload, expected=len(texts)))
        vectors = [_vector_of(item) for item in data]
        self._check_dimensions(vectors)
        logger.debug("Embedded %d texts with model=%s", len(vectors), self.model)
        return vectors

    async def aembed(self, text: str) -> list[float]:
        """Non-blocking :meth:`embed` bounded by the configured timeout."""
        return await self._run_with_timeout(self.embed, text)

    async def aembed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """Non-blocking :meth:`embed_many` bounded by the configured timeout."""
        return await self._run_with_timeout(self.embed_many, texts)

    def close(self) -> None:
        self._session.close()

    # -- LangChain Embeddings interface ---------------------------------------

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return self.embed_many(texts)

    def embed_query(self, text: str) -> list[float]:
        return self.embed(text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return await self.aembed_many(texts)

    async def aembed_query(self, text: str) -> list[float]:
        return await self.aembed(text)

    # -- internals ------------------------------------------------------------

    def _post(self, model_input: str | list[str]) -> Any:
        url = self._config.embeddings_url
        timeout = self._config.embedding_timeout
        headers = {
            "Authorization": f"Bearer {self._config.openrouter_api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }
        body = {"model": self._config.embedding_model, "input": model_input}

        try:
            response = self._session.post(url, json=body, headers=headers, timeout=timeout)
        except requests.Timeout as exc:
            raise ProviderTimeoutError(
                f"Embedding request to {url} timed out after {timeout}s"
            ) from exc
        except requests.RequestException as exc:
            raise ProviderConnectionError(
                f"Embedding request to {url} failed: {type(exc).__name__}"
            ) from exc

        if not 200 <= response.status_code < 300:
            raise ProviderHTTPError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderShapeError("Embedding response is not valid JSON") from exc

    def _check_dimensions(self, vectors: list[list[float]]) -> None:
        warn_on_dimension_mismatch(
            vectors, self._config.embedding_dimensions, self.model, stacklevel=3
        )

    async def _run_with_timeout(self, func: Callable[[Any], T], arg: Any) -> T:
        timeout = self._config.embedding_timeout
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, arg), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                f"Embedding call exceeded the {timeout}s timeout"
            ) from exc
