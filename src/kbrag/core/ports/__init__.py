"""Outbound ports used by the RAG engine."""

from .embedding_port import EmbeddingPort
from .llm_port import GenerationPort

__all__ = ["EmbeddingPort", "GenerationPort"]
