"""Knowledge-base loading exceptions."""

from .base import RagEngineError


class LoadError(RagEngineError):
    """Knowledge-base directory is missing or unreadable.

    Tolerated at startup: the engine continues with an empty index.
    """

    error_code = "RAG_LOAD_001"
