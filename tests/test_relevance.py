"""
Relevance scoring: semantic base plus capped helpful, popularity and pin boosts.
"""

import math

import pytest

from faqrank import calculate_relevance_score
from faqrank.core.relevance import (
    HELPFUL_BOOST_MAX,
    PIN_BOOST,
    VIEW_BOOST_MAX,
    RelevanceInputs,
    helpful_boost,
    view_boost,
)


def test_all_boosts_clamp_to_one():
    # 0.95 + 0.085 + 0.1 + 0.15 = 1.285
    assert calculate_relevance_score(0.95, 85, 1250, True) == 1.0


def test_no_boosts_returns_base_exactly():
    assert calculate_relevance_score(0.75, None, 0, False) == 0.75


def test_helpful_ratio_boost():
    assert calculate_relevance_score(0.5, 50, 0, False) == pytest.approx(0.55)


def test_zero_helpful_ratio_is_a_rating_without_boost():
    assert calculate_relevance_score(0.5, 0, 0, False) == 0.5
    assert helpful_boost(0) == 0.0
    assert helpful_boost(None) == 0.0


def test_helpful_ratio_above_hundred_is_capped():
    assert helpful_boost(250) == HELPFUL_BOOST_MAX


def test_view_boost_is_logarithmic():
    assert view_boost(1) == pytest.approx(math.log(2) * 0.05)
    assert view_boost(3) == pytest.approx(math.log(4) * 0.05)


def test_view_boost_cap_reached_at_seven_views():
    assert view_boost(6) < VIEW_BOOST_MAX
    assert view_boost(7) == VIEW_BOOST_MAX
    assert view_boost(1_000_000) == VIEW_BOOST_MAX


def test_zero_views_contribute_nothing():
    assert view_boost(0) == 0.0


def test_pin_boost():
    assert calculate_relevance_score(0.3, None, 0, True) == pytest.approx(0.3 + PIN_BOOST)


def test_max_total_boost():
    assert calculate_relevance_score(0.0, 100, 10_000, True) == pytest.approx(0.35)
    assert calculate_relevance_score(0.65, 100, 10_000, True) == 1.0


def test_negative_semantic_score_floors_at_zero():
    assert calculate_relevance_score(-0.8, None, 0, False) == 0.0
    assert calculate_relevance_score(-0.1, 100, 0, False) == 0.0


@pytest.mark.parametrize("semantic", [0.0, 1.0])
def test_boundary_inputs_do_not_raise(semantic):
    assert 0.0 <= calculate_relevance_score(semantic, None, 0, False) <= 1.0


def test_relevance_inputs_value_object():
    inputs = RelevanceInputs(semantic_score=0.75)
    assert inputs.score() == 0.75
    assert RelevanceInputs(0.95, 85, 1250, True).score() == 1.0


class TestMonotonicity:
    """Each input can only raise the score, and the score never exceeds 1."""

    semantic_grid = [-0.5, 0.0, 0.2, 0.5, 0.7, 0.9, 1.0]
    ratio_grid = [None, 0, 10, 50, 85, 100]
    view_grid = [0, 1, 2, 6, 7, 100, 10_000]

    def test_non_decreasing_in_semantic_score(self):
        for ratio in self.ratio_grid:
            for views in self.view_grid:
                scores = [calculate_relevance_score(s, ratio, views, False) for s in self.semantic_grid]
                assert scores == sorted(scores)

    def test_non_decreasing_in_helpful_ratio(self):
        for s in self.semantic_grid:
            scores = [calculate_relevance_score(s, r, 5, False) for r in self.ratio_grid]
            assert scores == sorted(scores)

    def test_non_decreasing_in_views(self):
        for s in self.semantic_grid:
            scores = [calculate_relevance_score(s, 40, v, False) for v in self.view_grid]
            assert scores == sorted(scores)

    def test_pinning_never_lowers_score(self):
        for s in self.semantic_grid:
            for r in self.ratio_grid:
                for v in self.view_grid:
                    assert calculate_relevance_score(s, r, v, True) >= calculate_relevance_score(s, r, v, False)

    def test_bounded(self):
        for s in self.semantic_grid:
            for r in self.ratio_grid:
                for v in self.view_grid:
                    for pinned in (False, True):
                        assert 0.0 <= calculate_relevance_score(s, r, v, pinned) <= 1.0
