"""
Vector Helpers
Conversion between embeddings and the pgvector text literal format.
"""

from typing import Sequence, Union

import numpy as np

from .models import EMBEDDING_DIMENSION

EmbeddingLike = Union[Sequence[float], np.ndarray]


def as_embedding(values: EmbeddingLike, dimension: int = EMBEDDING_DIMENSION) -> np.ndarray:
    """
    Coerce a sequence of numbers into a 1-D float32 embedding.

    Args:
        values: Embedding components
        dimension: Required number of components

    Returns:
        Embedding as numpy array

    Raises:
        ValueError: If the shape is wrong or a component is not finite
    """
    try:
        array = np.asarray(values, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Embedding must be a list of numbers: {e}")

    if array.ndim != 1:
        raise ValueError(f"Embedding must be one-dimensional, got shape {array.shape}")
    if array.shape[0] != dimension:
        raise ValueError(
            f"Embedding must have {dimension} dimensions, got {array.shape[0]}"
        )
    if not np.all(np.isfinite(array)):
        raise ValueError("Embedding contains NaN or infinite values")

    return array


def to_vector_literal(values: EmbeddingLike) -> str:
    """
    Format an embedding as a pgvector literal.

    Example:
        to_vector_literal([0.1, 0.2]) -> "[0.1,0.2]"
    """
    return "[" + ",".join(repr(float(v)) for v in values) + "]"
