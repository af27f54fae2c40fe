"""Exception hierarchy for the ingestion pipeline.

Every failure is scoped to one document's ingestion attempt.  Callers
inspect :attr:`IngestionError.retryable` to decide between retrying the
document and skipping it.
"""

from __future__ import annotations

from typing import Any


class IngestionError(Exception):
    """Base exception for all ingestion errors."""

    retryable: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DocumentValidationError(IngestionError, ValueError):
    """Raised when a document yields nothing to embed."""


class ProviderError(IngestionError):
    """Base exception for embedding-provider failures."""


class ProviderHTTPError(ProviderError):
    """The provider answered with a non-success status.

    ``body`` is the raw response text, surfaced verbatim.
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Embedding request failed with HTTP {status_code}: {body}")

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status_code == 429 or self.status_code >= 500


class ProviderShapeError(ProviderError):
    """The provider answered 2xx but the payload is not what we expect."""


class ProviderTimeoutError(ProviderError):
    """The request-scoped timeout elapsed before the provider answered."""

    retryable = True


class ProviderConnectionError(ProviderError):
    """The request never produced an HTTP response."""

    retryable = True


class StorageError(IngestionError):
    """The persistence backend rejected a document batch."""

    retryable = True


class DimensionMismatchWarning(UserWarning):
    """A returned vector's length disagrees with the configured dimensionality."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Embedding has {actual} dimensions, configuration expects {expected}"
        )
