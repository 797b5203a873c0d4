"""
Tests for embedding coercion and pgvector literals.
"""

import math

import numpy as np
import pytest

from metalsearch.db import as_embedding, to_vector_literal


def test_as_embedding_accepts_lists():
    embedding = as_embedding([1, 2, 3], dimension=3)

    assert embedding.dtype == np.float32
    assert embedding.tolist() == [1.0, 2.0, 3.0]


@pytest.mark.parametrize(
    "values",
    [
        [0.1, 0.2],
        [[0.1, 0.2, 0.3]],
        [0.1, math.nan, 0.3],
        [0.1, math.inf, 0.3],
        ["a", "b", "c"],
    ],
)
def test_as_embedding_rejects(values):
    with pytest.raises(ValueError):
        as_embedding(values, dimension=3)


def test_vector_literal():
    assert to_vector_literal([0.5, -1.0, 2.0]) == "[0.5,-1.0,2.0]"
