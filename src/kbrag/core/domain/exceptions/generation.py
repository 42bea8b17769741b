"""Answer generation exceptions."""

from .base import RagEngineError


class GenerationError(RagEngineError):
    """Base error for answer generation."""

    error_code = "RAG_GEN_001"
    http_status = 502


class GenerationAPIError(GenerationError):
    """Generation provider returned an error.

    Common causes:
    - Invalid API key
    - Network issues
    - Service unavailable
    """

    error_code = "RAG_GEN_002"


class GenerationRateLimitError(GenerationError):
    """Rate limit exceeded on the generation provider after all retries."""

    error_code = "RAG_GEN_003"
    http_status = 429


class GenerationTimeoutError(GenerationError):
    """Generation request did not complete within the configured timeout."""

    error_code = "RAG_GEN_004"
    http_status = 504


class EmptyGenerationError(GenerationError):
    """Provider returned no text.

    Common causes:
    - Content filtered by safety settings
    - Token limit reached before any output
    """

    error_code = "RAG_GEN_005"
