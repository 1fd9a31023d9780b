"""Semantic FAQ retrieval: vector similarity, top-K selection and relevance ranking."""

from faqrank.vector.similarity import cosine_similarity, euclidean_distance
from faqrank.vector.neighbors import find_most_similar
from faqrank.core.relevance import calculate_relevance_score
from faqrank.core.config import VERSION as __version__
from faqrank.core.errors import (
    InvalidInputError,
    InvalidVectorError,
    DimensionMismatchError,
    VectorTypeError,
)

__all__ = [
    "__version__",
    "cosine_similarity",
    "euclidean_distance",
    "find_most_similar",
    "calculate_relevance_score",
    "InvalidInputError",
    "InvalidVectorError",
    "DimensionMismatchError",
    "VectorTypeError",
]
