"""
Answering — grounded answer synthesis and source attribution.

Public API
----------
- :class:`QueryOrchestrator` — retrieve → synthesise → attribute for one question.
- :class:`AnswerSynthesizer` — single strict-grounding LLM call.
- :func:`attribute_sources` — distinct, capped provenance list.
"""

from grounded_rag.answering.attribution import attribute_sources
from grounded_rag.answering.orchestrator import QueryOrchestrator
from grounded_rag.answering.synthesizer import AnswerSynthesizer

__all__ = [
    "AnswerSynthesizer",
    "QueryOrchestrator",
    "attribute_sources",
]
