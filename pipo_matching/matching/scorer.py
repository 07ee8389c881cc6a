"""
Candidate Scorer
Combines field scores into one composite score and match tier.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from pipo_matching.config import MatchingSettings
from pipo_matching.matching.fields import FieldScores, score_fields
from pipo_matching.schemas.line_item import LineItem, MatchTier
from pipo_matching.schemas.po import POLineItem, PurchaseOrder
from pipo_matching.utils.confidence import composite_score, confidence_percent, match_tier


class CandidateScore(BaseModel):
    """Composite score of one (PI item, PO line item) pair."""
    score: float = Field(ge=0.0, le=1.0)
    confidence: int = Field(ge=0, le=100)
    tier: MatchTier
    matched_fields: List[str] = Field(default_factory=list)


def get_matched_fields(field_scores: FieldScores, settings: MatchingSettings) -> List[str]:
    """Fields that agree closely enough to show the operator."""
    similarities = field_scores.similarities
    fields = []

    for hint in ("client_po_number", "client_item_code"):
        if similarities.get(hint) == 1.0:
            fields.append(hint)

    if similarities.get("product_code", 0.0) >= settings.matched_code_similarity:
        fields.append("product_code")

    if similarities.get("product_name", 0.0) >= settings.matched_name_similarity:
        fields.append("product_name")

    if similarities.get("quantity") == 1.0:
        fields.append("quantity")

    # price closeness is 1 - relative difference
    if "unit_price" in similarities and 1.0 - similarities["unit_price"] < settings.matched_price_variance:
        fields.append("unit_price")

    return fields


def score_candidate(
    pi_item: LineItem,
    po_item: POLineItem,
    purchase_order: Optional[PurchaseOrder] = None,
    settings: Optional[MatchingSettings] = None,
) -> CandidateScore:
    """
    Score a candidate pair.

    composite = weighted field score / weight of the comparable fields;
    0 when nothing was comparable. Tiers: >= 0.90 exact, >= 0.70 high,
    >= 0.50 medium, otherwise low (boundaries come from settings).
    """
    if settings is None:
        settings = MatchingSettings()

    field_scores = score_fields(pi_item, po_item, purchase_order, settings)
    score = composite_score(field_scores.score, field_scores.max_weight)

    return CandidateScore(
        score=score,
        confidence=confidence_percent(score),
        tier=match_tier(score, settings.tier_exact, settings.tier_high, settings.tier_medium),
        matched_fields=get_matched_fields(field_scores, settings),
    )
