"""Validation exceptions."""

from .base import RagEngineError


class InvalidArgumentError(RagEngineError):
    """Input validation failed before any external call was made."""

    error_code = "RAG_VAL_001"
    http_status = 400


class EmptyQueryError(InvalidArgumentError):
    """Query cannot be empty or whitespace only."""

    error_code = "RAG_VAL_002"


class InvalidTopKError(InvalidArgumentError):
    """Top-k must be a positive integer."""

    error_code = "RAG_VAL_003"
