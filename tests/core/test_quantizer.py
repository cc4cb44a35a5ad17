"""Tests for int8 embedding quantization."""

import math

import pytest

from zoning_search.core.quantizer import quantize_embedding


class TestQuantizeEmbedding:
    """Test per-vector min/max scalar quantization."""

    def test_constant_vector_does_not_divide_by_zero(self) -> None:
        """Should map an all-identical vector to -128 without NaN."""
        result = quantize_embedding([0.5] * 1024)

        assert len(result) == 1024
        assert all(isinstance(value, int) for value in result)
        assert not any(math.isnan(value) for value in result)
        assert set(result) == {-128}

    def test_extremes_map_to_int8_bounds(self) -> None:
        """Should map the minimum to -128 and the maximum to 127."""
        assert quantize_embedding([-0.3, 0.9]) == [-128, 127]

    def test_midpoint_rounds_half_up(self) -> None:
        """Should round -0.5 up to 0 at the exact midpoint."""
        assert quantize_embedding([0.0, 0.5, 1.0]) == [-128, 0, 127]

    def test_values_stay_in_range(self) -> None:
        """Should keep every value within [-128, 127]."""
        embedding = [0.013, -0.442, 0.298, 0.871, -0.067, 0.154, -0.993, 0.5]

        result = quantize_embedding(embedding)

        assert len(result) == len(embedding)
        assert min(result) == -128
        assert max(result) == 127
        assert all(-128 <= value <= 127 for value in result)

    def test_preserves_ordering(self) -> None:
        """Should keep relative order of components."""
        result = quantize_embedding([0.1, 0.4, 0.2, 0.9])

        assert result[0] < result[2] < result[1] < result[3]

    def test_empty_input(self) -> None:
        """Should return an empty list for an empty vector."""
        assert quantize_embedding([]) == []

    def test_rejects_non_finite_values(self) -> None:
        """Should raise ValueError when the vector contains NaN."""
        with pytest.raises(ValueError):
            quantize_embedding([0.1, float("nan"), 0.3])
