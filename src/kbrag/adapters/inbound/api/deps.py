"""FastAPI dependencies."""

from ....composition.container import get_engine
from ....core.services.rag_engine import RagEngine


def engine_dependency() -> RagEngine:
    """Shared, read-only engine for request handlers."""
    return get_engine()
