"""Configuration-related exceptions."""

from .base import RagEngineError


class ConfigurationError(RagEngineError):
    """Configuration or environment variable errors.

    Raised when required configuration is missing or invalid.
    """

    error_code = "RAG_CFG_001"


class MissingAPIKeyError(ConfigurationError):
    """Required API key is not configured."""

    error_code = "RAG_CFG_002"
