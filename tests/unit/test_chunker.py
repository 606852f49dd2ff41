"""Unit tests for the chunker module."""

import pytest
from langchain_core.documents import Document

from grounded_rag.ingestion.chunker import chunk_documents


def test_each_chunk_gets_parent_metadata_and_its_ordinal() -> None:
    doc = Document(page_content="ORD-1001 " * 60, metadata={"source": "orders.pdf", "tenant": "acme"})
    chunks = chunk_documents([doc], chunk_size=120, chunk_overlap=20)
    assert len(chunks) > 1
    assert [c.metadata for c in chunks] == [
        {"source": "orders.pdf", "tenant": "acme", "chunk_index": i} for i in range(len(chunks))
    ]


def test_short_document_is_one_chunk_with_index_zero() -> None:
    chunks = chunk_documents([Document(page_content="Invoice 189012.", metadata={"source": "inline"})])
    assert [(c.page_content, c.metadata) for c in chunks] == [("Invoice 189012.", {"source": "inline", "chunk_index": 0})]


def test_no_documents_no_chunks() -> None:
    assert chunk_documents([], chunk_size=200, chunk_overlap=20) == []


def test_chunk_index_restarts_per_document() -> None:
    docs = [
        Document(page_content="alpha " * 100, metadata={"source": "a"}),
        Document(page_content="beta " * 100, metadata={"source": "b"}),
    ]
    chunks = chunk_documents(docs, chunk_size=100, chunk_overlap=10)
    for source in ("a", "b"):
        indexes = [c.metadata["chunk_index"] for c in chunks if c.metadata["source"] == source]
        assert indexes == list(range(len(indexes)))


def test_parent_metadata_is_not_mutated() -> None:
    doc = Document(page_content="text " * 100, metadata={"source": "a"})
    chunk_documents([doc], chunk_size=50, chunk_overlap=0)
    assert doc.metadata == {"source": "a"}


@pytest.mark.parametrize(("size", "overlap"), [(50, 0), (100, 20), (256, 64), (1000, 150)])
def test_chunks_respect_size_budget(size: int, overlap: int) -> None:
    text = "\n\n".join(
        f"Paragraph {i}. " + "lorem ipsum dolor sit amet " * (i % 7 + 1) for i in range(40)
    )
    chunks = chunk_documents([Document(page_content=text, metadata={"source": "s"})], size, overlap)
    assert chunks
    assert all(len(c.page_content) <= size for c in chunks)


def test_unbreakable_run_is_hard_split_with_character_fallback() -> None:
    token = "x" * 250
    chunks = chunk_documents([Document(page_content=token, metadata={"source": "s"})], 100, 0)
    assert all(len(c.page_content) <= 100 for c in chunks)
    assert "".join(c.page_content for c in chunks) == token


def test_unbreakable_run_is_kept_whole_without_character_fallback() -> None:
    token = "x" * 250
    docs = [Document(page_content=f"short words {token} more words", metadata={"source": "s"})]
    chunks = chunk_documents(docs, 100, 0, separators=("\n\n", "\n", " "))
    oversized = [c.page_content.strip() for c in chunks if len(c.page_content) > 100]
    assert oversized == [token]


def test_rejoin_without_overlap_is_lossless_up_to_whitespace() -> None:
    text = "First paragraph has words.\n\nSecond one is here\nwith a line break. " + "filler " * 80
    chunks = chunk_documents([Document(page_content=text, metadata={"source": "s"})], 60, 0)
    rejoined = " ".join(c.page_content for c in chunks)
    assert rejoined.split() == text.split()


def test_adjacent_chunks_overlap() -> None:
    words = " ".join(f"w{i}" for i in range(200))
    chunks = chunk_documents([Document(page_content=words, metadata={"source": "s"})], 80, 30)
    for left, right in zip(chunks, chunks[1:]):
        assert right.page_content.split()[0] in left.page_content.split()


def test_overlap_must_be_smaller_than_size() -> None:
    with pytest.raises(ValueError, match="chunk_overlap"):
        chunk_documents([Document(page_content="x")], chunk_size=10, chunk_overlap=10)
