"""Service facade — lazy, single-flight initialisation plus error shaping.

:class:`RAGService` is what transport layers (FastAPI, KServe) talk to.
It owns the explicit initialisation state: the store selector, embedding
provider, and chat model are built exactly once, on first use, behind a
lock, so concurrent first requests cannot race into a double
initialisation or observe a half-built pipeline.

Every public call returns a result model; pipeline failures
(:class:`~grounded_rag.errors.RAGError`) are turned into failed result
shapes and logged, never raised to the transport.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

from grounded_rag.answering.orchestrator import QueryOrchestrator
from grounded_rag.answering.synthesizer import AnswerSynthesizer
from grounded_rag.errors import (
    EmbeddingProviderError,
    EmptyIngestError,
    EmptyQuestionError,
    GenerationError,
    RAGError,
)
from grounded_rag.ingestion.embedder import EmbeddingProvider, get_embedding_function
from grounded_rag.ingestion.orchestrator import IngestionOrchestrator
from grounded_rag.logging_utils import log_event
from grounded_rag.retrieval.models import AnswerResult, IngestResult
from grounded_rag.retrieval.retriever import Retriever
from grounded_rag.retrieval.selector import StoreSelection, select_store

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings
    from langchain_core.language_models import BaseChatModel

    from grounded_rag.config import Settings

logger = logging.getLogger(__name__)


class RAGService:
    """Ingestion and question answering over one active vector store.

    Parameters
    ----------
    settings:
        Defaults to the global :data:`grounded_rag.config.settings`.
    embeddings / llm / selector:
        Factories for the external collaborators, injected in tests.
        Each is called at most once, during initialisation.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        embeddings: Callable[[], Embeddings] | None = None,
        llm: Callable[[], BaseChatModel] | None = None,
        selector: Callable[[Settings], StoreSelection] | None = None,
    ) -> None:
        if settings is None:
            from grounded_rag.config import settings as global_settings

            settings = global_settings
        self.settings = settings
        self._embeddings_factory = embeddings or (lambda: get_embedding_function(self.settings))
        self._llm_factory = llm or self._default_llm
        self._selector = selector or select_store

        self._init_lock = threading.Lock()
        self._selection: StoreSelection | None = None
        self._ingestion: IngestionOrchestrator | None = None
        self._query: QueryOrchestrator | None = None

    # -- initialisation -------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self._selection is not None

    @property
    def backend(self) -> str | None:
        """``"memory"`` or ``"chroma"`` once initialised."""
        return self._selection.store.backend_name if self._selection else None

    @property
    def fallback_reason(self) -> str | None:
        return self._selection.fallback_reason if self._selection else None

    def initialize(self) -> StoreSelection:
        """Select the store and build both orchestrators, exactly once."""
        if self._selection is not None:
            return self._selection
        with self._init_lock:
            if self._selection is None:
                self._build()
        return self._selection

    def _build(self) -> None:
        s = self.settings
        selection = self._selector(s)
        try:
            embedder = EmbeddingProvider(self._embeddings_factory())
        except Exception as exc:
            raise EmbeddingProviderError(f"Could not initialise embeddings: {exc}") from exc
        try:
            llm = self._llm_factory()
        except Exception as exc:
            raise GenerationError(f"Could not initialise chat model: {exc}") from exc

        self._ingestion = IngestionOrchestrator(
            selection.store,
            embedder,
            chunk_size=s.chunk_size,
            chunk_overlap=s.chunk_overlap,
        )
        self._query = QueryOrchestrator(
            Retriever(selection.store, embedder, default_k=s.retrieval_k),
            AnswerSynthesizer(llm),
            max_sources=s.max_sources,
        )
        # Published last: readers that see a selection see complete orchestrators.
        self._selection = selection
        logger.info(
            "RAG service ready",
            extra={"event": {"backend": self.backend, "fallback_reason": selection.fallback_reason}},
        )

    def _default_llm(self) -> BaseChatModel:
        from grounded_rag.answering.llm import get_llm

        return get_llm(self.settings)

    # -- public API -----------------------------------------------------------

    def ingest(
        self,
        docs: Iterable[dict[str, Any]] | None = None,
        pdf_paths: Iterable[str] | None = None,
    ) -> IngestResult:
        """Ingest inline documents and/or PDF files."""
        docs = list(docs or [])
        pdf_paths = list(pdf_paths or [])
        try:
            if not docs and not pdf_paths:
                raise EmptyIngestError()
            self.initialize()
            result = self._ingestion.run(docs=docs, pdf_paths=pdf_paths)
        except RAGError as exc:
            result = IngestResult.failed(exc.message)
            self._log_ingest(result, exc)
            return result
        self._log_ingest(result)
        return result

    def upload(self, paths: Sequence[str], original_names: Sequence[str]) -> IngestResult:
        """Ingest PDFs already staged on disk; echo the client-side file names."""
        if not paths:
            result = IngestResult.failed("No files uploaded")
            self._log_ingest(result)
            return result
        result = self.ingest(pdf_paths=paths)
        return result.model_copy(update={"uploaded_files": list(original_names)})

    def ask(self, question: str, *, k: int | None = None) -> AnswerResult:
        """Answer *question* from the indexed corpus."""
        try:
            if not (question or "").strip():
                raise EmptyQuestionError()
            self.initialize()
            result = self._query.run(question, k=k)
        except RAGError as exc:
            result = AnswerResult.failed(exc.message)
            self._log_query(result, exc)
            return result
        self._log_query(result)
        return result

    # -- events ---------------------------------------------------------------

    def _log_ingest(self, result: IngestResult, error: RAGError | None = None) -> None:
        log_event(
            logger,
            "ingest",
            level=logging.INFO if error is None else logging.WARNING,
            backend=self.backend,
            success=result.success,
            chunks_added=result.chunks_added,
            documents_processed=result.documents_processed or 0,
            error=type(error).__name__ if error else None,
            detail=result.message if error else None,
        )

    def _log_query(self, result: AnswerResult, error: RAGError | None = None) -> None:
        log_event(
            logger,
            "query",
            level=logging.INFO if error is None else logging.WARNING,
            backend=self.backend,
            success=result.success,
            context_count=result.context_count or 0,
            source_count=len(result.sources),
            error=type(error).__name__ if error else None,
            detail=result.message if error else None,
        )


@functools.lru_cache(maxsize=1)
def get_service() -> RAGService:
    """Process-wide service instance (created lazily, initialised on first use)."""
    return RAGService()
