"""Chroma implementation of the vector-store abstraction — the persistent backend."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse
from uuid import uuid4

import chromadb
from langchain_core.documents import Document

from grounded_rag.errors import VectorStoreError
from grounded_rag.retrieval.base import VectorStoreBase
from grounded_rag.retrieval.models import QueryResult, VectorRecord

logger = logging.getLogger(__name__)


def parse_chroma_url(url: str) -> tuple[str, int, bool]:
    """Split ``http(s)://host[:port]`` into ``(host, port, ssl)``."""
    parsed = urlparse(url if "://" in url else f"http://{url}")
    if not parsed.hostname:
        raise ValueError(f"Invalid Chroma URL: {url!r}")
    ssl = parsed.scheme == "https"
    port = parsed.port or (443 if ssl else 8000)
    return parsed.hostname, port, ssl


def _clean_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Chroma only accepts scalar, non-null metadata values."""
    cleaned: dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            cleaned[key] = value
        else:
            cleaned[key] = str(value)
    return cleaned


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    url:
        Chroma server URL, e.g. ``http://localhost:8000``.
    collection_name:
        Name of the Chroma collection (created on first use, cosine space).

    Constructing the store opens the HTTP client, so an unreachable server
    raises here; the store selector treats that as a failed probe.
    """

    backend_name = "chroma"

    def __init__(self, url: str, collection_name: str) -> None:
        super().__init__(collection_name)
        host, port, ssl = parse_chroma_url(url)
        self._url = url
        self._client = chromadb.HttpClient(host=host, port=port, ssl=ssl)
        self._collection = self._client.get_or_create_collection(
            collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    # -- VectorStoreBase overrides --------------------------------------------

    def add(self, records: list[VectorRecord]) -> None:
        if not records:
            return
        try:
            self._collection.add(
                ids=[uuid4().hex for _ in records],
                embeddings=[r.embedding for r in records],
                documents=[r.chunk.page_content for r in records],
                metadatas=[_clean_metadata(r.chunk.metadata) for r in records],
            )
        except Exception as exc:
            raise VectorStoreError(f"Chroma add failed: {exc}") from exc
        logger.debug("Added %d records to Chroma collection %r", len(records), self.collection_name)

    def query(self, vector: list[float], k: int) -> QueryResult:
        try:
            n_results = min(k, self._collection.count())
            if n_results <= 0:
                return []
            results = self._collection.query(
                query_embeddings=[vector],
                n_results=n_results,
                include=["documents", "metadatas", "distances", "embeddings"],
            )
        except Exception as exc:
            raise VectorStoreError(f"Chroma query failed: {exc}") from exc

        docs = results.get("documents", [[]])[0]
        metas = results.get("metadatas", [[]])[0]
        distances = results.get("distances", [[]])[0]
        embeddings = results.get("embeddings")
        vectors = embeddings[0] if embeddings is not None else [None] * len(docs)

        hits: QueryResult = []
        for content, meta, dist, emb in zip(docs, metas, distances, vectors):
            hits.append(
                VectorRecord(
                    chunk=Document(page_content=content or "", metadata=dict(meta or {})),
                    embedding=[float(x) for x in emb] if emb is not None else [],
                    # Cosine distance -> similarity.
                    score=1.0 - float(dist),
                )
            )
        return hits

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed for %s", self._url, exc_info=True)
            return False

    def count(self) -> int:
        return self._collection.count()
