"""Exception hierarchy for the knowledge-base RAG engine.

Every exception carries an error code, the location it was raised from,
an optional cause and a JSON-friendly ``to_dict``. Import from this
package directly:

    from kbrag.core.domain.exceptions import EmbeddingError, InvalidArgumentError
"""

# Base classes
from .base import ExceptionContext, RagEngineError

# Configuration exceptions
from .configuration import ConfigurationError, MissingAPIKeyError

# Embedding exceptions
from .embedding import (
    EmbeddingAPIError,
    EmbeddingDimensionError,
    EmbeddingError,
    EmbeddingRateLimitError,
    EmbeddingTimeoutError,
    IndexBuildError,
    NonFiniteEmbeddingError,
)

# Generation exceptions
from .generation import (
    EmptyGenerationError,
    GenerationAPIError,
    GenerationError,
    GenerationRateLimitError,
    GenerationTimeoutError,
)

# Loading exceptions
from .loading import LoadError

# Validation exceptions
from .validation import EmptyQueryError, InvalidArgumentError, InvalidTopKError

__all__ = [
    # Base
    "ExceptionContext",
    "RagEngineError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    # Loading
    "LoadError",
    # Embedding
    "EmbeddingError",
    "EmbeddingAPIError",
    "EmbeddingRateLimitError",
    "EmbeddingTimeoutError",
    "EmbeddingDimensionError",
    "IndexBuildError",
    "NonFiniteEmbeddingError",
    # Generation
    "GenerationError",
    "GenerationAPIError",
    "GenerationRateLimitError",
    "GenerationTimeoutError",
    "EmptyGenerationError",
    # Validation
    "InvalidArgumentError",
    "EmptyQueryError",
    "InvalidTopKError",
]
