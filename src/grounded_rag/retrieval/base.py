"""Storage interface shared by the vector-store backends.

Both backends (in-memory and Chroma) implement the same four methods so
the rest of the pipeline never needs to know which one is active.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grounded_rag.retrieval.models import QueryResult, VectorRecord


class VectorStoreBase(ABC):
    """Append-only store of :class:`VectorRecord` with cosine top-k search.

    Parameters
    ----------
    collection_name:
        Collection the records live in; informational for the in-memory backend.
    """

    #: Short name reported in logs and ``/health``.
    backend_name: str = "base"

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add(self, records: list[VectorRecord]) -> None:
        """Append *records*. Existing records are never updated or removed."""
        ...

    @abstractmethod
    def query(self, vector: list[float], k: int) -> QueryResult:
        """Return at most *k* records ranked by descending similarity.

        Fewer than *k* records are returned only when the store holds
        fewer. Each returned record has ``score`` populated.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """``True`` when the backend accepts reads and writes."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of stored records."""
        ...
