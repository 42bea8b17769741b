"""Pure vector similarity functions."""

import math
from collections.abc import Sequence


def is_finite_vector(vector: Sequence[float]) -> bool:
    return all(math.isfinite(x) for x in vector)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    A zero-norm or non-finite vector has similarity 0.0 to anything. The
    result is clamped to [-1.0, 1.0] to absorb floating-point drift.
    """
    if len(a) != len(b):
        raise ValueError(f"Vector dimensions differ: {len(a)} != {len(b)}")

    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if not (math.isfinite(norm_a) and math.isfinite(norm_b)):
        return 0.0
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    dot = sum(x * y for x, y in zip(a, b))
    similarity = dot / (norm_a * norm_b)
    if not math.isfinite(similarity):
        return 0.0
    return max(-1.0, min(1.0, similarity))
