"""Confidence heuristic for generated answers."""

from collections.abc import Sequence

from ..domain import ScoredDocument


def score(scored_docs: Sequence[ScoredDocument]) -> float:
    """Mean similarity of the documents that were placed in the context.

    Returns exactly 0.0 when no document was selected. This is not a
    calibrated probability; it inherits the range of cosine similarity
    ([-1, 1], in practice [0, 1] for text embeddings).
    """
    if not scored_docs:
        return 0.0
    return sum(scored.score for scored in scored_docs) / len(scored_docs)
