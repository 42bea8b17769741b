"""Document, ranking and answer models for the RAG engine."""

from dataclasses import dataclass

Embedding = tuple[float, ...]


@dataclass(frozen=True)
class Document:
    """A knowledge-base document loaded at startup.

    Attributes:
        id: Source filename including its extension. Unique within a store.
        text: Full file content.
    """

    id: str
    text: str


@dataclass(frozen=True)
class ScoredDocument:
    """A document paired with its cosine similarity to a query.

    Attributes:
        document: The ranked Document (shared, not copied).
        score: Cosine similarity in [-1.0, 1.0].
    """

    document: Document
    score: float


@dataclass(frozen=True)
class RagResult:
    """Answer returned by the engine for a single question.

    ``confidence`` is the arithmetic mean of the similarity scores of the
    documents placed in the prompt context. It is a retrieval heuristic, not a
    calibrated probability: verbose but irrelevant documents can still score
    high. Callers and tests should treat it as a relative signal only.

    Attributes:
        reply: Generated answer text.
        confidence: Mean similarity of the included documents, 0.0 if none.
        sources: Ranked documents that made up the context, best first.
    """

    reply: str
    confidence: float
    sources: tuple[ScoredDocument, ...] = ()

    @property
    def source_ids(self) -> list[str]:
        """Ids of the documents used as context, in ranking order."""
        return [scored.document.id for scored in self.sources]
