"""
Multi-factor relevance score for FAQ ranking.

The base signal is semantic similarity. Three capped additive boosts reward
articles readers rated helpful, articles that are viewed often, and articles an
editor pinned. The total is clamped to [0, 1].
"""

import math
from dataclasses import dataclass
from typing import Optional

HELPFUL_BOOST_MAX = 0.1
VIEW_BOOST_SCALE = 0.05
VIEW_BOOST_MAX = 0.1
PIN_BOOST = 0.15


def helpful_boost(helpful_ratio: Optional[float]) -> float:
    """Boost in [0, 0.1] for a helpful percentage in [0, 100]. None means no rating."""
    if helpful_ratio is None or helpful_ratio <= 0:
        return 0.0
    return (min(helpful_ratio, 100.0) / 100.0) * HELPFUL_BOOST_MAX


def view_boost(view_count: int) -> float:
    """Logarithmic popularity boost, reaching its 0.1 cap at 7 views."""
    if view_count <= 0:
        return 0.0
    return min(math.log(view_count + 1) * VIEW_BOOST_SCALE, VIEW_BOOST_MAX)


def calculate_relevance_score(semantic_score: float, helpful_ratio: Optional[float],
                              view_count: int, is_pinned: bool) -> float:
    """
    Combine semantic similarity with engagement signals.

    Args:
        semantic_score: Semantic similarity, typically in [0, 1]
        helpful_ratio: Percentage of "helpful" votes (0-100), or None if unrated
        view_count: Number of views
        is_pinned: Whether an editor pinned the article

    Returns:
        Relevance score in [0, 1]
    """
    score = semantic_score
    score += helpful_boost(helpful_ratio)
    score += view_boost(view_count)
    if is_pinned:
        score += PIN_BOOST
    return min(max(score, 0.0), 1.0)


@dataclass(frozen=True)
class RelevanceInputs:
    """Per-candidate inputs to calculate_relevance_score."""

    semantic_score: float
    helpful_ratio: Optional[float] = None
    view_count: int = 0
    is_pinned: bool = False

    def score(self) -> float:
        return calculate_relevance_score(self.semantic_score, self.helpful_ratio,
                                         self.view_count, self.is_pinned)
