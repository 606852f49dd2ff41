"""Ingestion orchestrator — normalise, chunk, embed, store.

Ingestion is append-only: re-ingesting the same content stores duplicate
records.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from grounded_rag.errors import DocumentReadError, EmptyIngestError
from grounded_rag.ingestion.chunker import DEFAULT_SEPARATORS, chunk_documents
from grounded_rag.ingestion.normalizer import normalize_inline, normalize_pdf
from grounded_rag.retrieval.models import IngestResult, VectorRecord

if TYPE_CHECKING:
    from langchain_core.documents import Document

    from grounded_rag.ingestion.embedder import EmbeddingProvider
    from grounded_rag.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


class IngestionOrchestrator:
    """Compose Normaliser → Chunker → Embedder → Vector store.

    Parameters
    ----------
    store:
        Active backend.
    embedder:
        Embedding provider shared with the query path.
    chunk_size / chunk_overlap / separators:
        Forwarded to :func:`~grounded_rag.ingestion.chunker.chunk_documents`.
    skip_unreadable:
        When ``True`` an unreadable PDF is logged and skipped; when
        ``False`` (default) it aborts the whole batch before anything is
        stored.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: EmbeddingProvider,
        *,
        chunk_size: int = 1000,
        chunk_overlap: int = 150,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
        skip_unreadable: bool = False,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = tuple(separators)
        self.skip_unreadable = skip_unreadable

    def run(
        self,
        docs: Iterable[dict[str, Any]] | None = None,
        pdf_paths: Iterable[str] | None = None,
    ) -> IngestResult:
        """Ingest inline documents and PDF files in one batch.

        Parameters
        ----------
        docs:
            ``{"content": str, "meta": dict | None}`` mappings.
        pdf_paths:
            Local PDF file paths.

        Raises
        ------
        EmptyIngestError
            Neither *docs* nor *pdf_paths* holds anything.
        DocumentReadError
            A PDF could not be read and ``skip_unreadable`` is off.
        """
        inline = list(docs or [])
        paths = list(pdf_paths or [])
        if not inline and not paths:
            raise EmptyIngestError()

        documents: list[Document] = [
            normalize_inline(d.get("content", ""), d.get("meta")) for d in inline
        ]
        pdfs_processed = 0
        for path in paths:
            try:
                documents.append(normalize_pdf(path))
            except DocumentReadError as exc:
                if not self.skip_unreadable:
                    raise
                logger.warning("Skipping unreadable document: %s", exc.message)
                continue
            pdfs_processed += 1

        if not documents:
            raise EmptyIngestError("None of the supplied documents could be read")

        chunks = chunk_documents(
            documents,
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            separators=self.separators,
        )
        vectors = self._embedder.embed_texts([c.page_content for c in chunks])
        records = [VectorRecord(chunk=c, embedding=v) for c, v in zip(chunks, vectors)]
        self._store.add(records)

        logger.debug("Stored %d chunks from %d documents", len(records), len(documents))
        return IngestResult(
            success=True,
            message="Documents ingested",
            chunks_added=len(records),
            documents_processed=len(documents),
            pdfs_processed=pdfs_processed,
        )
