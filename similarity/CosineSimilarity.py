# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: CosineSimilarity
# -----------------------------------------------------------------------------
import math
from typing import Sequence, Union

import numpy as np

Vector = Union[np.ndarray, Sequence[float]]


class DimensionMismatch(ValueError):
    """Two embeddings of different length were compared."""

    def __init__(self, len_a: int, len_b: int):
        self.len_a = len_a
        self.len_b = len_b
        super().__init__(f"Cannot compare embeddings of dimension {len_a} and {len_b}")


def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    dot(a, b) / (|a| * |b|), clipped to [-1, 1].

    Raises DimensionMismatch if the lengths differ. A zero-norm vector on
    either side scores 0.0 rather than dividing by zero.
    """
    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatch(va.shape[0], vb.shape[0])

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    sim = float(np.dot(va, vb) / (norm_a * norm_b))
    if math.isnan(sim):
        return sim
    return max(-1.0, min(1.0, sim))


def relevance_percent(similarity: float) -> int:
    """Similarity -> integer percentage in [0, 100]; NaN maps to 0. Halves round up."""
    if similarity is None or math.isnan(similarity):
        return 0
    pct = math.floor(similarity * 100 + 0.5)
    return max(0, min(100, int(pct)))


__all__ = ["DimensionMismatch", "cosine_similarity", "relevance_percent", "Vector"]
