"""
Confidence scoring utilities.
Methods to normalize field scores and bucket composite scores into tiers.
"""

from pipo_matching.schemas.line_item import MatchTier
from pipo_matching.utils import round_half_up, safe_divide


def composite_score(weighted_score: float, applicable_weight: float) -> float:
    """
    Normalize a weighted partial score by the weight that applied.

    Args:
        weighted_score: Sum of field similarity * field weight
        applicable_weight: Sum of weights of the fields that were comparable

    Returns:
        Composite score (0-1), 0.0 when no field was comparable
    """
    return max(0.0, min(1.0, safe_divide(weighted_score, applicable_weight)))


def confidence_percent(score: float) -> int:
    """Convert a 0-1 score to a whole percentage."""
    return round_half_up(max(0.0, min(1.0, score)) * 100)


def match_tier(
    score: float,
    exact: float = 0.90,
    high: float = 0.70,
    medium: float = 0.50,
) -> MatchTier:
    """Bucket a composite score into a match tier."""
    if score >= exact:
        return MatchTier.EXACT
    elif score >= high:
        return MatchTier.HIGH
    elif score >= medium:
        return MatchTier.MEDIUM
    else:
        return MatchTier.LOW

