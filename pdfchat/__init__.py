"""
PDF Chat Backend

A small retrieval-augmented chat backend: users upload PDFs, the text is
chunked and embedded into a per-user namespace of a vector index, and
questions are answered by a language model grounded on the retrieved chunks.

Features:
- Per-user vector namespaces in Qdrant
- Google Gemini embeddings and chat model
- Chat and file metadata persisted with SQLAlchemy
- Uniform response envelope
"""

__version__ = "1.0.0"
__author__ = "PDF Chat Team"
__description__ = "Chat with your PDFs through retrieval-augmented generation"
