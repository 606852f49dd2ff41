"""Source attribution — which documents an answer drew on."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grounded_rag.retrieval.models import QueryResult

MAX_SOURCES = 10


def attribute_sources(records: QueryResult, limit: int = MAX_SOURCES) -> list[str]:
    """Distinct, non-empty ``source`` values in retrieval order, capped at *limit*."""
    sources: list[str] = []
    for record in records:
        source = record.source
        if source is None or source in sources:
            continue
        sources.append(source)
        if len(sources) >= limit:
            break
    return sources
