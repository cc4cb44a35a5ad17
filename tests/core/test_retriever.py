"""Tests for cosine similarity scoring and ranking."""

import math

import pytest

from zoning_search.core.exceptions import ValidationError
from zoning_search.core.retriever import Retriever, cosine_similarity


def unit_vector_with_score(score: float) -> list[float]:
    """2-D unit vector whose cosine against [1, 0] equals score."""
    return [score, math.sqrt(1 - score**2)]


# ============================================================================
# cosine_similarity
# ============================================================================


class TestCosineSimilarity:
    """Test cosine similarity edge cases."""

    def test_identical_vectors(self) -> None:
        """Should return 1.0 for identical vectors."""
        assert cosine_similarity([0.2, 0.4, 0.4], [0.2, 0.4, 0.4]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self) -> None:
        """Should return 0.0 for orthogonal vectors."""
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self) -> None:
        """Should return -1.0 for opposite vectors."""
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_works_on_quantized_integers(self) -> None:
        """Should score int8 stored values against a float query."""
        assert cosine_similarity([-1.0, 1.0], [-128, 127]) == pytest.approx(1.0, abs=1e-4)

    @pytest.mark.parametrize(
        "a,b",
        [
            ([], []),
            ([1.0, 2.0], []),
            ([1.0, 2.0], [1.0, 2.0, 3.0]),
            ([0.0, 0.0], [1.0, 1.0]),
            ([1.0, 1.0], [0, 0]),
        ],
    )
    def test_degenerate_inputs_score_zero(self, a, b) -> None:
        """Should return 0.0 for empty, mismatched or zero-magnitude vectors."""
        assert cosine_similarity(a, b) == 0.0


# ============================================================================
# Retriever.rank
# ============================================================================


class TestRetrieverRank:
    """Test threshold filtering, ordering and limits."""

    def test_threshold_and_descending_order(self) -> None:
        """Should keep scores >= min_score, highest first."""
        candidates = [
            ("a", unit_vector_with_score(0.91)),
            ("b", unit_vector_with_score(0.55)),
            ("c", unit_vector_with_score(0.72)),
        ]

        ranked = Retriever().rank([1.0, 0.0], candidates, limit=10, min_score=0.6)

        assert [item for item, _ in ranked] == ["a", "c"]
        assert [score for _, score in ranked] == [pytest.approx(0.91), pytest.approx(0.72)]

    def test_ties_keep_storage_order(self) -> None:
        """Should break equal scores by input order."""
        vector = unit_vector_with_score(0.8)
        candidates = [("first", vector), ("second", vector), ("third", vector)]

        ranked = Retriever().rank([1.0, 0.0], candidates, limit=10, min_score=0.5)

        assert [item for item, _ in ranked] == ["first", "second", "third"]

    def test_limit_truncates(self) -> None:
        """Should return at most limit results."""
        candidates = [(i, unit_vector_with_score(0.9 - i * 0.01)) for i in range(5)]

        ranked = Retriever().rank([1.0, 0.0], candidates, limit=2, min_score=0.0)

        assert [item for item, _ in ranked] == [0, 1]

    def test_zero_magnitude_query_yields_nothing(self) -> None:
        """Should return no results for a zero query under a positive threshold."""
        candidates = [("a", [0.3, 0.4]), ("b", [0.9, 0.1])]

        assert Retriever().rank([0.0, 0.0], candidates, limit=10, min_score=0.01) == []

    def test_rejects_non_positive_limit(self) -> None:
        """Should raise ValidationError when limit is below 1."""
        with pytest.raises(ValidationError):
            Retriever().rank([1.0], [("a", [1.0])], limit=0, min_score=0.0)
