"""
Retrieval — vector storage, store selection, and top-k search.

Public surface
--------------
- :class:`Retriever` — embeds a question and queries the active store.
- :class:`VectorStoreBase` — abstract backend.
- :class:`InMemoryVectorStore` — ephemeral backend.
- :class:`ChromaVectorStore` — persistent backend (lazy import).
- :func:`select_store`, :class:`StoreSelection`, :class:`StoreKind` — startup selection.
- :class:`VectorRecord`, :class:`IngestResult`, :class:`AnswerResult` — data models.
"""

from grounded_rag.retrieval.base import VectorStoreBase
from grounded_rag.retrieval.memory_store import InMemoryVectorStore
from grounded_rag.retrieval.models import AnswerResult, IngestResult, QueryResult, VectorRecord
from grounded_rag.retrieval.retriever import Retriever
from grounded_rag.retrieval.selector import StoreKind, StoreSelection, select_store

__all__ = [
    "AnswerResult",
    "ChromaVectorStore",
    "InMemoryVectorStore",
    "IngestResult",
    "QueryResult",
    "Retriever",
    "StoreKind",
    "StoreSelection",
    "VectorRecord",
    "VectorStoreBase",
    "select_store",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from grounded_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
