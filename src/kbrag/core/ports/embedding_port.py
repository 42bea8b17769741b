"""Embedding Port Interface."""

from abc import ABC, abstractmethod


class EmbeddingPort(ABC):
    """Abstract interface for embedding providers.

    Implementations return vectors of a fixed, provider-defined dimension and
    raise ``EmbeddingError`` (or a subclass) on any failure.
    """

    @abstractmethod
    def embed_query(self, text: str) -> list[float]: ...

    @abstractmethod
    def embed_document(self, text: str) -> list[float]: ...
