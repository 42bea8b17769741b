"""In-memory cosine similarity index over knowledge-base documents."""

from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable, Sequence

from ..domain import Document, Embedding, ScoredDocument
from ..domain.exceptions import (
    EmbeddingDimensionError,
    EmbeddingError,
    IndexBuildError,
    InvalidTopKError,
    NonFiniteEmbeddingError,
)
from ..ports import EmbeddingPort
from .similarity import cosine_similarity, is_finite_vector

logger = logging.getLogger(__name__)


def validate_top_k(k: object) -> int:
    """Return ``k`` if it is a positive integer, else raise InvalidTopKError."""
    if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
        raise InvalidTopKError(f"k must be a positive integer, got {k!r}", context={"k": k})
    return k


class SimilarityIndex:
    """Read-only set of ``(document, embedding)`` pairs in document order.

    Built once at startup and never mutated, so concurrent ``top_k`` calls need
    no locking. Replacing the knowledge base means building a new index.
    """

    def __init__(self, entries: Iterable[tuple[Document, Sequence[float]]] = ()) -> None:
        pairs: list[tuple[Document, Embedding]] = []
        dimension: int | None = None
        for document, vector in entries:
            embedding = tuple(float(x) for x in vector)
            if not is_finite_vector(embedding):
                raise NonFiniteEmbeddingError(
                    f"Embedding for '{document.id}' contains NaN or infinite values",
                    context={"document_id": document.id},
                )
            if dimension is None:
                dimension = len(embedding)
            elif len(embedding) != dimension:
                raise EmbeddingDimensionError(
                    f"Embedding for '{document.id}' has dimension {len(embedding)}, "
                    f"expected {dimension}",
                    context={"document_id": document.id},
                )
            pairs.append((document, embedding))
        self._entries: tuple[tuple[Document, Embedding], ...] = tuple(pairs)
        self._dimension = dimension

    @classmethod
    def build(cls, documents: Iterable[Document], embedder: EmbeddingPort) -> SimilarityIndex:
        """Embed each document exactly once and index the results.

        Raises:
            IndexBuildError: If any document fails to embed. The error names
                the document; a partial index is never returned.
        """
        entries: list[tuple[Document, list[float]]] = []
        for document in documents:
            try:
                vector = embedder.embed_document(document.text)
            except Exception as e:
                raise IndexBuildError(
                    f"Failed to embed document '{document.id}': {e}",
                    cause=e,
                    context={"document_id": document.id},
                ) from e
            if not vector:
                raise IndexBuildError(
                    f"Embedding provider returned an empty vector for document '{document.id}'",
                    context={"document_id": document.id},
                )
            entries.append((document, vector))

        try:
            index = cls(entries)
        except EmbeddingError as e:
            raise IndexBuildError(e.message, cause=e, context=e.extra_context) from e

        logger.info(
            "Built similarity index: %d documents, dimension %s", len(index), index.dimension
        )
        return index

    @property
    def dimension(self) -> int | None:
        """Shared embedding dimension, or None for an empty index."""
        return self._dimension

    @property
    def documents(self) -> list[Document]:
        return [document for document, _ in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def top_k(self, query_embedding: Sequence[float], k: int) -> list[ScoredDocument]:
        """Rank indexed documents by cosine similarity to ``query_embedding``.

        Results are ordered by descending score; equal scores keep document
        order. If ``k`` exceeds the index size every document is returned.

        Raises:
            InvalidTopKError: If ``k`` is not a positive integer.
            EmbeddingDimensionError: If the query dimension differs from the index.
            NonFiniteEmbeddingError: If the query embedding has NaN or infinite values.
        """
        k = validate_top_k(k)
        if not self._entries:
            return []

        if len(query_embedding) != self._dimension:
            raise EmbeddingDimensionError(
                f"Query embedding has dimension {len(query_embedding)}, "
                f"index expects {self._dimension}",
                context={
                    "query_dimension": len(query_embedding),
                    "index_dimension": self._dimension,
                },
            )
        if not is_finite_vector(query_embedding):
            raise NonFiniteEmbeddingError("Query embedding contains NaN or infinite values")

        scores = [cosine_similarity(query_embedding, vector) for _, vector in self._entries]
        best = heapq.nsmallest(k, range(len(scores)), key=lambda i: (-scores[i], i))
        return [ScoredDocument(document=self._entries[i][0], score=scores[i]) for i in best]
