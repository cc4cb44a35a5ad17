"""
Similarity scoring and ranking for stored chunks.

Scores candidates by cosine similarity against a query vector, drops
those under a minimum score and returns the best matches first.

Dependencies: numpy, zoning_search.core.exceptions
System role: Retrieval business logic (storage agnostic)
"""

from collections.abc import Sequence
from typing import TypeVar

import numpy as np

from zoning_search.core.exceptions import ValidationError

T = TypeVar("T")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 for empty vectors, length mismatches and zero-magnitude
    vectors rather than raising or producing NaN.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.size == 0 or va.shape != vb.shape:
        return 0.0

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    score = float(np.dot(va, vb) / (norm_a * norm_b))
    return score if np.isfinite(score) else 0.0


class Retriever:
    """Rank candidate chunks against a query embedding."""

    def rank(
        self,
        query_vector: Sequence[float],
        candidates: Sequence[tuple[T, Sequence[float]]],
        limit: int = 10,
        min_score: float = 0.7,
    ) -> list[tuple[T, float]]:
        """
        Score, filter and order candidates.

        Candidates with equal scores keep their input order.

        Args:
            query_vector: Query embedding
            candidates: (item, stored vector) pairs
            limit: Maximum number of results
            min_score: Inclusive score threshold

        Returns:
            list[tuple[T, float]]: (item, score) pairs, highest score first

        Raises:
            ValidationError: When limit is below 1
        """
        if limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")

        scored = [
            (item, cosine_similarity(query_vector, vector)) for item, vector in candidates
        ]
        kept = [pair for pair in scored if pair[1] >= min_score]
        kept.sort(key=lambda pair: pair[1], reverse=True)
        return kept[:limit]
