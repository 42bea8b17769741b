"""Embedding exceptions."""

from .base import RagEngineError


class EmbeddingError(RagEngineError):
    """Failed to generate embeddings."""

    error_code = "RAG_EMB_001"
    http_status = 502


class EmbeddingAPIError(EmbeddingError):
    """Embedding API returned an error or an unusable payload."""

    error_code = "RAG_EMB_002"


class EmbeddingRateLimitError(EmbeddingError):
    """Embedding API rate limit exceeded after all retries."""

    error_code = "RAG_EMB_003"
    http_status = 429


class EmbeddingTimeoutError(EmbeddingError):
    """Embedding request did not complete within the configured timeout."""

    error_code = "RAG_EMB_004"
    http_status = 504


class EmbeddingDimensionError(EmbeddingError):
    """Embedding dimension does not match the index dimension."""

    error_code = "RAG_EMB_005"


class NonFiniteEmbeddingError(EmbeddingError):
    """Embedding contains NaN or infinite components."""

    error_code = "RAG_EMB_007"


class IndexBuildError(EmbeddingError):
    """A document could not be embedded while building the index.

    Fatal to startup. The offending document id is in ``extra_context``.
    """

    error_code = "RAG_EMB_006"
