"""Top-k semantic retrieval against the active vector store.

Usage::

    retriever = Retriever(store, embedder, default_k=8)
    records = retriever.search("What was shipped for order ORD-1001?")
    for r in records:
        print(r.source, r.score, r.chunk.page_content[:80])
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grounded_rag.ingestion.embedder import EmbeddingProvider
    from grounded_rag.retrieval.base import VectorStoreBase
    from grounded_rag.retrieval.models import QueryResult

logger = logging.getLogger(__name__)


class Retriever:
    """Embed the question once, then query the store.

    Parameters
    ----------
    store:
        The active backend chosen by the store selector.
    embedder:
        Must be the same provider used at ingestion time.
    default_k:
        Number of results when :meth:`search` is called without *k*.
    """

    def __init__(self, store: VectorStoreBase, embedder: EmbeddingProvider, *, default_k: int = 8) -> None:
        if default_k < 1:
            raise ValueError(f"default_k must be >= 1, got {default_k}")
        self._store = store
        self._embedder = embedder
        self.default_k = default_k

    def search(self, query: str, *, k: int | None = None) -> QueryResult:
        """Return up to *k* records ranked by descending similarity."""
        k = self.default_k if k is None else k
        vector = self._embedder.embed_query(query)
        records = self._store.query(vector, k)
        logger.debug("Retrieved %d/%d records from %s", len(records), k, self._store.backend_name)
        return records
