"""Domain models for the knowledge-base RAG engine."""

from .document import Document, Embedding, RagResult, ScoredDocument

__all__ = ["Document", "Embedding", "RagResult", "ScoredDocument"]
