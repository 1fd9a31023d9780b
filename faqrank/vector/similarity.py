"""
Similarity primitives over fixed-length float vectors.
Pure functions; every input is validated before any arithmetic.
"""

import numbers
from typing import Sequence, Union

import numpy as np

from ..core.errors import DimensionMismatchError, InvalidVectorError, VectorTypeError

Vector = Union[Sequence[float], np.ndarray]


def as_vector(value: Vector, name: str = "vector") -> np.ndarray:
    """
    Convert a sequence or 1-D array of numbers into a float64 array.

    Raises:
        VectorTypeError: value is not a sequence/array of numbers
        InvalidVectorError: value is empty, has non-numeric elements, or non-finite values
    """
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise VectorTypeError(f"{name} must be a 1-D array, got {value.ndim}-D")
        if value.dtype.kind not in "iuf":
            raise InvalidVectorError(f"{name} must contain only numbers")
        array = value.astype(np.float64)
    elif isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise VectorTypeError(f"{name} must be a sequence of numbers, got {type(value).__name__}")
    else:
        for element in value:
            if isinstance(element, bool) or not isinstance(element, numbers.Real):
                raise InvalidVectorError(f"{name} must contain only numbers")
        array = np.asarray(value, dtype=np.float64)

    if array.size == 0:
        raise InvalidVectorError("Vectors cannot be empty")
    if not np.all(np.isfinite(array)):
        raise InvalidVectorError("Vectors cannot contain NaN or infinite values")
    return array


def _validate_pair(a: Vector, b: Vector):
    vec_a = as_vector(a, "a")
    vec_b = as_vector(b, "b")
    if vec_a.shape[0] != vec_b.shape[0]:
        raise DimensionMismatchError(expected=vec_a.shape[0], actual=vec_b.shape[0])
    return vec_a, vec_b


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine similarity in [-1, 1]. A zero vector has similarity 0 to everything."""
    vec_a, vec_b = _validate_pair(a, b)

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
    # Floating-point drift can push |similarity| slightly past 1
    return min(max(similarity, -1.0), 1.0)


def euclidean_distance(a: Vector, b: Vector) -> float:
    """Euclidean (L2) distance between two vectors."""
    vec_a, vec_b = _validate_pair(a, b)
    return float(np.sqrt(np.sum((vec_a - vec_b) ** 2)))
