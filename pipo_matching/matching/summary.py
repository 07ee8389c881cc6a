"""
Summary statistics for a reconciliation run.
"""

from typing import List

from pipo_matching.schemas.output import ItemMatches, MatchingSummary
from pipo_matching.utils import round_half_up, safe_divide


def generate_matching_summary(
    matches: List[ItemMatches],
    total_items: int,
    searched_items: int,
    high_confidence_percent: int = 80,
) -> MatchingSummary:
    """
    Count what one run found.

    matches only holds PI items with at least one candidate, so its length
    is the number of searched items that found something.
    """
    matched_items = sum(1 for m in matches if m.matches)
    high_confidence = sum(
        1 for m in matches
        if m.best is not None and m.best.confidence >= high_confidence_percent
    )

    return MatchingSummary(
        total_items=total_items,
        already_matched_items=max(0, total_items - searched_items),
        searched_items=searched_items,
        matched_items=matched_items,
        no_match_items=max(0, searched_items - matched_items),
        high_confidence_matches=high_confidence,
        match_rate=round_half_up(safe_divide(matched_items, searched_items) * 100),
    )
