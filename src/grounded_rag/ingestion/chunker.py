"""Text chunking strategies."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from langchain_text_splitters import RecursiveCharacterTextSplitter

if TYPE_CHECKING:
    from langchain_core.documents import Document

# Coarsest to finest; "" is a hard character split.
DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ", "")


def chunk_documents(
    documents: list[Document],
    chunk_size: int = 1000,
    chunk_overlap: int = 150,
    separators: Sequence[str] = DEFAULT_SEPARATORS,
) -> list[Document]:
    """Split *documents* into overlapping chunks for embedding.

    Parameters
    ----------
    documents:
        Normalised documents, each carrying a ``source`` in its metadata.
    chunk_size:
        Maximum number of characters per chunk. Only exceeded by a single
        unbreakable run when *separators* has no ``""`` fallback.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks of the
        same document.
    separators:
        Split boundaries tried recursively, coarsest first.

    Returns
    -------
    list[Document]
        Independent chunks. Each inherits its parent's metadata and adds
        ``chunk_index``, its ordinal position within the parent.
    """
    if chunk_overlap >= chunk_size:
        raise ValueError(f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})")

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=list(separators),
    )

    chunks: list[Document] = []
    for document in documents:
        pieces = splitter.split_documents([document])
        for index, piece in enumerate(pieces):
            piece.metadata = {**document.metadata, "chunk_index": index}
            chunks.append(piece)
    return chunks
