"""Exception hierarchy for the ingestion and query pipeline.

Every failure raised by :mod:`grounded_rag` derives from :class:`RAGError`
so that the service facade can turn it into a failed response shape
instead of crashing the process.
"""

from __future__ import annotations


class RAGError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ── Rejected before any external call ─────────────────────────────────


class InputValidationError(RAGError):
    """Malformed caller input."""


class EmptyIngestError(InputValidationError):
    def __init__(self, message: str = "No documents provided") -> None:
        super().__init__(message)


class EmptyQuestionError(InputValidationError):
    def __init__(self, message: str = "Question cannot be empty") -> None:
        super().__init__(message)


# ── Source documents ──────────────────────────────────────────────────


class DocumentReadError(RAGError):
    """A source file is missing, unreadable, or not a PDF."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Could not read document {source!r}: {reason}")
        self.source = source
        self.reason = reason


# ── External services ─────────────────────────────────────────────────


class EmbeddingProviderError(RAGError):
    """The embedding service failed or timed out."""


class GenerationError(RAGError):
    """The chat model failed to produce an answer."""


class StoreProbeFailure(RAGError):
    """One reachability probe of the persistent store failed.

    Never surfaces to callers: the store selector absorbs it and falls
    back to the in-memory backend.
    """


class VectorStoreError(RAGError):
    """The active vector store rejected an add or query."""
