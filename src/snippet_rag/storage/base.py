"""Abstract base class for chunk persistence backends.

The pipeline hands every successfully embedded document to a
:class:`ChunkStoreBase` as one batch.  Backends must write the batch
all-or-nothing: a document is either fully stored or not at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from snippet_rag.ingestion.models import IngestedDocument


class ChunkStoreBase(ABC):
    """Backend-agnostic chunk-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / table / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def write_batch(self, document: IngestedDocument) -> None:
        """Persist every chunk of *document* with its vector.

        Raises
        ------
        StorageError
            When the backend rejects the batch.  Nothing of the document
            may remain stored in that case.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def delete_document(self, document_id: str) -> None:
        """Delete all chunks of a document.  Optional; raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support delete")
