"""
Scalar int8 quantization for embedding storage.

Maps each vector independently onto [-128, 127] using its own min/max
range, cutting storage roughly 4x. Similarity is computed directly on
the quantized values; no dequantization step exists.

Dependencies: numpy
System role: Embedding compression before persistence
"""

from collections.abc import Sequence

import numpy as np

INT8_MIN = -128
INT8_LEVELS = 255


def quantize_embedding(embedding: Sequence[float]) -> list[int]:
    """
    Quantize a float vector to int8 values.

    A constant vector (zero range) is treated as range 1 so every element
    maps to -128 instead of dividing by zero. Rounding is half-up, so
    0.5 steps round toward positive infinity.

    Args:
        embedding: Float embedding of any length

    Returns:
        list[int]: Quantized values of the same length (empty for empty input)

    Raises:
        ValueError: When the vector contains NaN or infinite values
    """
    values = np.asarray(embedding, dtype=np.float64)
    if values.size == 0:
        return []
    if not np.all(np.isfinite(values)):
        raise ValueError("Cannot quantize an embedding containing non-finite values")

    low = values.min()
    span = values.max() - low
    if span == 0:
        span = 1.0

    normalized = (values - low) / span
    quantized = np.floor(normalized * INT8_LEVELS + INT8_MIN + 0.5)
    return np.clip(quantized, INT8_MIN, INT8_MIN + INT8_LEVELS).astype(np.int64).tolist()
