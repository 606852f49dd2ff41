"""Query orchestrator — retrieve, answer, attribute."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from grounded_rag.answering.attribution import MAX_SOURCES, attribute_sources
from grounded_rag.errors import EmptyQuestionError
from grounded_rag.retrieval.models import AnswerResult

if TYPE_CHECKING:
    from grounded_rag.answering.synthesizer import AnswerSynthesizer
    from grounded_rag.retrieval.retriever import Retriever

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """Answer one question from the indexed corpus.

    Parameters
    ----------
    retriever:
        Top-k retriever over the active store.
    synthesizer:
        Grounded answer generator.
    max_sources:
        Cap on the attributed source list.
    """

    def __init__(
        self,
        retriever: Retriever,
        synthesizer: AnswerSynthesizer,
        *,
        max_sources: int = MAX_SOURCES,
    ) -> None:
        self._retriever = retriever
        self._synthesizer = synthesizer
        self.max_sources = max_sources

    def run(self, question: str, *, k: int | None = None) -> AnswerResult:
        """Return a grounded answer, or the no-context response.

        Raises
        ------
        EmptyQuestionError
            *question* is empty after trimming; nothing external is called.
        """
        question = (question or "").strip()
        if not question:
            raise EmptyQuestionError()

        records = self._retriever.search(question, k=k)
        if not records:
            logger.info("No indexed content matched the question")
            return AnswerResult.no_context()

        answer = self._synthesizer.answer(question, [r.chunk for r in records])
        return AnswerResult(
            success=True,
            answer=answer,
            sources=attribute_sources(records, limit=self.max_sources),
            context_count=len(records),
        )
