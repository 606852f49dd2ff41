"""
Ingestion — text normalisation, chunking, and embedding into the vector store.

Source documents (PDF files or inline text) become one normalised text
unit each, are split into overlapping chunks, embedded, and appended to
the active vector store.
"""
