"""Domain models for stored vectors and pipeline results."""

from __future__ import annotations

from typing import Any

from langchain_core.documents import Document
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VectorRecord(BaseModel):
    """A chunk together with its embedding — the unit stored and retrieved.

    Attributes
    ----------
    chunk:
        The text fragment and its metadata. ``chunk.metadata["source"]``
        identifies the originating document.
    embedding:
        Dense vector produced by the embedding provider.
    score:
        Similarity to the query vector; only populated on query results.
    """

    chunk: Document
    embedding: list[float] = Field(default_factory=list)
    score: float | None = None

    @property
    def source(self) -> str | None:
        value = self.chunk.metadata.get("source")
        return str(value) if value not in (None, "") else None


# Ranked by descending similarity, length <= requested k.
QueryResult = list[VectorRecord]


class _CamelModel(BaseModel):
    """Serialises to the camelCase JSON the HTTP layer returns."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class IngestResult(_CamelModel):
    """Outcome of one ingestion call."""

    success: bool
    message: str
    chunks_added: int = 0
    documents_processed: int | None = None
    pdfs_processed: int | None = None
    uploaded_files: list[str] | None = None

    @classmethod
    def failed(cls, message: str) -> IngestResult:
        return cls(success=False, message=message, chunks_added=0)


NO_CONTEXT_MESSAGE = "No indexed content yet. Please ingest documents first."


class AnswerResult(_CamelModel):
    """Outcome of one question."""

    success: bool
    answer: str = ""
    sources: list[str] = Field(default_factory=list)
    context_count: int | None = None
    message: str | None = None

    @classmethod
    def no_context(cls) -> AnswerResult:
        """Well-formed response for a corpus with no relevant match."""
        return cls(success=False, answer=NO_CONTEXT_MESSAGE, sources=[], context_count=0)

    @classmethod
    def failed(cls, message: str) -> AnswerResult:
        return cls(success=False, message=message, answer="", sources=[])
