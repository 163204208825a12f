"""Cosine similarity between embedding vectors."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from src.blogsearch.result import DataError

Vector = Union[Sequence[float], np.ndarray]


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Return dot(a, b) / (|a| * |b|), or 0.0 when either vector has zero magnitude.

    Raises:
        DataError: if the vectors differ in length.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.ndim != 1 or va.shape != vb.shape:
        raise DataError(
            f"Vectors must have the same length, got {va.size} and {vb.size}"
        )

    magnitude = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if magnitude == 0.0:
        return 0.0

    return float(np.clip(np.dot(va, vb) / magnitude, -1.0, 1.0))


def cosine_similarities(query: Vector, matrix: np.ndarray) -> np.ndarray:
    """Score ``query`` against every row of ``matrix`` at once.

    Rows (or a query) with zero magnitude score 0.0, matching
    :func:`cosine_similarity`.
    """
    q = np.asarray(query, dtype=np.float64)
    if matrix.ndim != 2 or q.ndim != 1 or matrix.shape[1] != q.shape[0]:
        raise DataError(
            f"Query vector has {q.size} dimensions, store has "
            f"{matrix.shape[1] if matrix.ndim == 2 else 'malformed'}"
        )

    magnitudes = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
    dots = matrix @ q
    scores = np.divide(
        dots, magnitudes, out=np.zeros_like(dots), where=magnitudes != 0.0
    )
    return np.clip(scores, -1.0, 1.0)
