"""Shared pytest configuration and fixtures.

External services are replaced by small fakes built on LangChain's own
interfaces, so no test touches the network or downloads a model.
"""

from __future__ import annotations

import re
import zlib
from typing import Any

import pytest
from langchain_core.embeddings import Embeddings
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from pydantic import Field

from grounded_rag.config import Settings
from grounded_rag.retrieval.selector import StoreKind, StoreSelection
from grounded_rag.retrieval.memory_store import InMemoryVectorStore
from grounded_rag.service import RAGService

_TOKEN_RE = re.compile(r"\w+")


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ──────────────────────────────────────────────────────────────


class BagOfWordsEmbeddings(Embeddings):
    """Deterministic hashed bag-of-words vectors; shared words ⇒ similar vectors."""

    def __init__(self, size: int = 64) -> None:
        self.size = size
        self.document_calls = 0
        self.query_calls = 0

    def _vector(self, text: str) -> list[float]:
        vec = [0.0] * self.size
        for token in _TOKEN_RE.findall(text.lower()):
            vec[zlib.crc32(token.encode()) % self.size] += 1.0
        return vec

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls += 1
        return [self._vector(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls += 1
        return self._vector(text)


class FailingEmbeddings(Embeddings):
    """Simulates an unreachable embedding service."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        raise ConnectionError("embedding service unreachable")

    def embed_query(self, text: str) -> list[float]:
        raise ConnectionError("embedding service unreachable")


class RecordingChatModel(FakeListChatModel):
    """Canned responses; remembers every message list it was called with."""

    calls: list[Any] = Field(default_factory=list)

    def _call(self, messages, stop=None, run_manager=None, **kwargs):  # noqa: ANN001, ANN201
        self.calls.append(messages)
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)


class FailingChatModel(FakeListChatModel):
    """Simulates a provider error from the chat endpoint."""

    def _call(self, messages, stop=None, run_manager=None, **kwargs):  # noqa: ANN001, ANN201
        raise RuntimeError("upstream 502")


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture()
def test_settings(tmp_path) -> Settings:  # noqa: ANN001
    return Settings(
        _env_file=None,
        chroma_url="",
        embedding_base_url="",
        upload_dir=str(tmp_path / "uploads"),
        store_probe_delay_seconds=0.0,
    )


@pytest.fixture()
def embeddings() -> BagOfWordsEmbeddings:
    return BagOfWordsEmbeddings()


@pytest.fixture()
def chat_model() -> RecordingChatModel:
    return RecordingChatModel(
        responses=["Order ORD-1001 shipped 2x Wireless Headphones via FastExpress."] * 10
    )


@pytest.fixture()
def memory_selection() -> StoreSelection:
    return StoreSelection(kind=StoreKind.EPHEMERAL, store=InMemoryVectorStore())


@pytest.fixture()
def service(
    test_settings: Settings,
    embeddings: BagOfWordsEmbeddings,
    chat_model: RecordingChatModel,
    memory_selection: StoreSelection,
) -> RAGService:
    return RAGService(
        test_settings,
        embeddings=lambda: embeddings,
        llm=lambda: chat_model,
        selector=lambda _s: memory_selection,
    )


@pytest.fixture()
def failing_embeddings() -> FailingEmbeddings:
    return FailingEmbeddings()


@pytest.fixture()
def failing_chat_model() -> FailingChatModel:
    return FailingChatModel(responses=[])


@pytest.fixture()
def make_chat_model():  # noqa: ANN201
    """Factory for a recording chat model with custom canned responses."""

    def factory(*responses: str) -> RecordingChatModel:
        return RecordingChatModel(responses=list(responses) or ["ok"])

    return factory
