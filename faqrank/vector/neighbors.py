"""
Top-K nearest-neighbor selection by cosine similarity.
"""

import heapq
from typing import List, Optional, Sequence

from ..core.errors import InvalidInputError
from .similarity import Vector, as_vector, cosine_similarity
from .types import QueryResult, SimilarityResult, VectorRecord


def check_top_k(top_k: int) -> None:
    if isinstance(top_k, bool) or not isinstance(top_k, int):
        raise InvalidInputError(f"top_k must be an integer, got {type(top_k).__name__}")
    if top_k < 0:
        raise InvalidInputError(f"top_k must be >= 0, got {top_k}")


def find_most_similar(query: Vector, candidates: Sequence[Vector], top_k: int = 5,
                      min_score: Optional[float] = None) -> List[SimilarityResult]:
    """
    Return the top_k candidates most similar to query, best first.

    Args:
        query: Query vector
        candidates: Vectors to rank; each must share the query's dimension
        top_k: Maximum number of results; larger than len(candidates) returns all
        min_score: Optional similarity threshold applied before the top-K cut

    Returns:
        SimilarityResult list sorted by descending score; equal scores keep candidate order
    """
    check_top_k(top_k)
    query_vector = as_vector(query, "query")

    scored = []
    for index, candidate in enumerate(candidates):
        score = cosine_similarity(query_vector, candidate)
        if min_score is not None and score < min_score:
            continue
        scored.append(SimilarityResult(index=index, score=score))

    # nlargest is equivalent to sorted(..., reverse=True)[:n], so ties stay stable
    return heapq.nlargest(top_k, scored, key=lambda result: result.score)


def find_most_similar_records(query: Vector, records: Sequence[VectorRecord], top_k: int = 5,
                              min_score: Optional[float] = None) -> List[QueryResult]:
    """Identifier-bearing variant of find_most_similar. Records without a vector are skipped."""
    embedded = [record for record in records if record.vector is not None]
    ranked = find_most_similar(query, [record.vector for record in embedded], top_k, min_score)
    return [
        QueryResult(id=embedded[result.index].id, score=result.score,
                    metadata=embedded[result.index].metadata)
        for result in ranked
    ]
