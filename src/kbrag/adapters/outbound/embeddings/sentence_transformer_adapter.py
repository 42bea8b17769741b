"""Local embedding adapter backed by sentence-transformers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console

from ....core.domain.exceptions import EmbeddingError
from ....core.ports import EmbeddingPort

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)
console = Console(stderr=True)


class SentenceTransformerEmbeddingAdapter(EmbeddingPort):
    """Embed text locally with a sentence-transformers model.

    The model is loaded on first use; queries and documents share one encoder.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2") -> None:
        """Initialize the adapter.

        Args:
            model_name: sentence-transformers model to use. The default,
                all-MiniLM-L6-v2, is fast and produces 384-dimensional vectors.
        """
        self.model_name = model_name
        self._model: SentenceTransformer | None = None

    def _load_model(self) -> SentenceTransformer:
        """Lazy load the model on first use."""
        if self._model is None:
            console.print(f"[blue]Loading embedding model: {self.model_name}...[/]")
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError as e:
                raise EmbeddingError(
                    "sentence-transformers is not installed. "
                    "Install with: pip install 'kb-rag-engine[local]'",
                    cause=e,
                ) from e
            try:
                self._model = SentenceTransformer(self.model_name)
            except Exception as e:
                raise EmbeddingError(
                    f"Failed to load embedding model {self.model_name}: {e}",
                    cause=e,
                    context={"model": self.model_name},
                ) from e
            console.print("[green]Embedding model loaded[/]")
        return self._model

    def embed_query(self, text: str) -> list[float]:
        return self._encode(text)

    def embed_document(self, text: str) -> list[float]:
        return self._encode(text)

    def _encode(self, text: str) -> list[float]:
        model = self._load_model()
        try:
            embedding = model.encode(text, convert_to_numpy=True)
        except Exception as e:
            raise EmbeddingError(
                f"Local embedding failed: {e}", cause=e, context={"model": self.model_name}
            ) from e
        return [float(v) for v in embedding.tolist()]
