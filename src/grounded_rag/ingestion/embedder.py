"""Embedding provider — text to fixed-dimension vectors.

Two providers, selected by configuration:

1. **Local sentence-transformers** (default) via ``HuggingFaceEmbeddings``.
2. **Ollama** embedding service — set ``EMBEDDING_BASE_URL`` (e.g.
   ``http://localhost:11434``) and ``EMBEDDING_MODEL`` (e.g.
   ``mxbai-embed-large``).

The vector dimension is fixed by the model; ingestion and query must use
the same model or retrieval results are meaningless.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from grounded_rag.errors import EmbeddingProviderError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

    from grounded_rag.config import Settings

logger = logging.getLogger(__name__)


def get_embedding_function(settings: Settings) -> Embeddings:
    """Return the configured LangChain embedding function."""
    if settings.embedding_base_url:
        from langchain_ollama import OllamaEmbeddings

        logger.info("Using Ollama embeddings at %s (%s)", settings.embedding_base_url, settings.embedding_model)
        return OllamaEmbeddings(base_url=settings.embedding_base_url, model=settings.embedding_model)

    from langchain_huggingface import HuggingFaceEmbeddings

    return HuggingFaceEmbeddings(model_name=settings.embedding_model)


class EmbeddingProvider:
    """Thin wrapper that maps provider failures to :class:`EmbeddingProviderError`.

    Safe to share between concurrent requests as long as the wrapped
    ``Embeddings`` is (both LangChain providers used here are).
    """

    def __init__(self, embeddings: Embeddings) -> None:
        self._embeddings = embeddings

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch; one vector per text, same order."""
        if not texts:
            return []
        try:
            vectors = self._embeddings.embed_documents(texts)
        except Exception as exc:
            raise EmbeddingProviderError(f"Embedding provider failed: {exc}") from exc
        if len(vectors) != len(texts):
            raise EmbeddingProviderError(
                f"Embedding provider returned {len(vectors)} vectors for {len(texts)} texts"
            )
        return vectors

    def embed_query(self, text: str) -> list[float]:
        try:
            return self._embeddings.embed_query(text)
        except Exception as exc:
            raise EmbeddingProviderError(f"Embedding provider failed: {exc}") from exc
