"""
Tests for confidence scoring utilities.
"""

import pytest
from pipo_matching.schemas.line_item import MatchTier
from pipo_matching.utils import relative_difference, round_half_up
from pipo_matching.utils.confidence import (
    composite_score,
    confidence_percent,
    match_tier,
)


def test_composite_score_normalizes_by_applicable_weight():
    """Test normalization over the weight that applied."""
    assert composite_score(0.32, 0.4) == pytest.approx(0.8)
    assert composite_score(0.75, 0.75) == 1.0


def test_composite_score_without_comparable_fields():
    """Test that no applicable weight yields zero instead of dividing by zero."""
    assert composite_score(0.0, 0.0) == 0.0


def test_confidence_percent_rounds_half_up():
    """Test percentage conversion."""
    assert confidence_percent(1.0) == 100
    assert confidence_percent(0.8) == 80
    assert confidence_percent(0.125) == 13
    assert confidence_percent(0.0) == 0


def test_confidence_percent_clamps():
    """Test that out-of-range scores are clamped."""
    assert confidence_percent(1.2) == 100
    assert confidence_percent(-0.3) == 0


def test_match_tier_boundaries():
    """Test tier classification at and around each boundary."""
    assert match_tier(1.0) == MatchTier.EXACT
    assert match_tier(0.90) == MatchTier.EXACT
    assert match_tier(0.89) == MatchTier.HIGH
    assert match_tier(0.70) == MatchTier.HIGH
    assert match_tier(0.69) == MatchTier.MEDIUM
    assert match_tier(0.50) == MatchTier.MEDIUM
    assert match_tier(0.49) == MatchTier.LOW
    assert match_tier(0.0) == MatchTier.LOW


def test_match_tier_custom_boundaries():
    """Test that tier boundaries can be recalibrated."""
    assert match_tier(0.85, exact=0.80, high=0.60, medium=0.40) == MatchTier.EXACT
    assert match_tier(0.45, exact=0.80, high=0.60, medium=0.40) == MatchTier.MEDIUM


def test_round_half_up():
    """Test rounding helper used for percentages."""
    assert round_half_up(12.5) == 13
    assert round_half_up(66.66) == 67
    assert round_half_up(0.4) == 0


def test_relative_difference():
    """Test price difference helper."""
    assert relative_difference(90.0, 100.0) == pytest.approx(0.1)
    assert relative_difference(100.0, 90.0) == pytest.approx(0.1)
    assert relative_difference(0.0, 0.0) == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
