"""In-process vector store — the ephemeral backend.

Records live in a LangChain :class:`~langchain_core.vectorstores.InMemoryVectorStore`
and are lost when the process exits. Vectors always arrive precomputed
from the shared embedding provider, so the LangChain store is written to
directly instead of through ``add_documents`` (which would embed again).
"""

from __future__ import annotations

import threading
import uuid
from typing import TYPE_CHECKING

from langchain_core.documents import Document
from langchain_core.vectorstores import InMemoryVectorStore as LangChainMemoryStore

from grounded_rag.errors import VectorStoreError
from grounded_rag.retrieval.base import VectorStoreBase
from grounded_rag.retrieval.models import QueryResult, VectorRecord

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings


class InMemoryVectorStore(VectorStoreBase):
    """Thread-safe, append-only adapter over LangChain's in-memory store.

    Parameters
    ----------
    collection_name:
        Informational only.
    embedding:
        Handed to the LangChain store for its text-search helpers; this
        adapter itself only searches by vector and never calls it.
    """

    backend_name = "memory"

    def __init__(self, collection_name: str = "memory", embedding: Embeddings | None = None) -> None:
        super().__init__(collection_name)
        self._index = LangChainMemoryStore(embedding=embedding)
        self._dimension: int | None = None
        self._lock = threading.Lock()

    def add(self, records: list[VectorRecord]) -> None:
        if not records:
            return
        with self._lock:
            self._dimension = self._batch_dimension([r.embedding for r in records])
            for record in records:
                doc_id = str(uuid.uuid4())
                # Same entry layout LangChain's add_documents writes.
                self._index.store[doc_id] = {
                    "id": doc_id,
                    "vector": list(record.embedding),
                    "text": record.chunk.page_content,
                    "metadata": dict(record.chunk.metadata),
                }

    def query(self, vector: list[float], k: int) -> QueryResult:
        if k <= 0:
            return []
        with self._lock:
            if not self._index.store:
                return []
            self._batch_dimension([vector])
            order = {doc_id: i for i, doc_id in enumerate(self._index.store)}
            if any(vector) and any(any(entry["vector"]) for entry in self._index.store.values()):
                hits = self._index.similarity_search_with_score_by_vector(vector, k=len(order))
            else:
                # Zero-norm on one side: every similarity is 0.
                hits = [(self._document(entry), 0.0) for entry in self._index.store.values()]
            vectors = {doc_id: entry["vector"] for doc_id, entry in self._index.store.items()}

        # Equal scores keep insertion order.
        hits.sort(key=lambda hit: (-hit[1], order[hit[0].id]))
        return [
            VectorRecord(chunk=self._strip_id(doc), embedding=vectors[doc.id], score=score)
            for doc, score in hits[:k]
        ]

    def health_check(self) -> bool:
        return True

    def count(self) -> int:
        with self._lock:
            return len(self._index.store)

    def records(self) -> list[VectorRecord]:
        """Snapshot of everything stored, in insertion order."""
        with self._lock:
            return [
                VectorRecord(chunk=self._strip_id(self._document(entry)), embedding=entry["vector"])
                for entry in self._index.store.values()
            ]

    # -- internals ------------------------------------------------------------

    def _batch_dimension(self, vectors: list[list[float]]) -> int:
        """Check every vector against the store's dimension before anything is written."""
        expected = self._dimension if self._dimension is not None else len(vectors[0])
        for vector in vectors:
            if len(vector) != expected:
                raise VectorStoreError(
                    f"Embedding dimension mismatch: store holds {expected}-d vectors, got {len(vector)}-d"
                )
        return expected

    @staticmethod
    def _document(entry: dict) -> Document:
        return Document(id=entry["id"], page_content=entry["text"], metadata=entry["metadata"])

    @staticmethod
    def _strip_id(doc: Document) -> Document:
        return Document(page_content=doc.page_content, metadata=dict(doc.metadata))
