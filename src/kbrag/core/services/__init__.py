"""Core RAG services."""

from .document_store import DocumentStore, load_documents
from .rag_engine import PipelineStage, RagEngine
from .similarity_index import SimilarityIndex

__all__ = [
    "DocumentStore",
    "PipelineStage",
    "RagEngine",
    "SimilarityIndex",
    "load_documents",
]
