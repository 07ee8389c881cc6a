"""
Field Scorer
Per-field match contributions for a (PI item, PO line item) pair.
"""

from typing import Dict, Optional
from pydantic import BaseModel, Field

from pipo_matching.config import MatchingSettings
from pipo_matching.schemas.line_item import LineItem
from pipo_matching.schemas.po import POLineItem, PurchaseOrder
from pipo_matching.utils import relative_difference
from pipo_matching.utils.similarity import codes_equal, normalize_text, string_similarity


class FieldScores(BaseModel):
    """
    Weighted partial score of the comparable fields.

    score is the sum of similarity * weight and max_weight the sum of the
    weights that applied, so the composite can be normalized over only the
    fields both sides carry.
    """
    score: float = 0.0
    max_weight: float = 0.0
    similarities: Dict[str, float] = Field(default_factory=dict)

    def add(self, field: str, similarity: float, weight: float) -> None:
        self.score += similarity * weight
        self.max_weight += weight
        self.similarities[field] = similarity


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def score_manual_hints(
    pi_item: LineItem,
    po_item: POLineItem,
    purchase_order: Optional[PurchaseOrder],
) -> Dict[str, float]:
    """
    Check operator-entered client PO number and client item code.

    Returns a 1.0/0.0 result per hint the PI item carries. The PO number
    hint is only checked when the owning PO is known.
    """
    results = {}

    client_po = getattr(pi_item, "client_po_number", None)
    if normalize_text(client_po) and purchase_order is not None:
        results["client_po_number"] = 1.0 if codes_equal(client_po, purchase_order.reference_number) else 0.0

    client_code = getattr(pi_item, "client_item_code", None)
    if normalize_text(client_code):
        results["client_item_code"] = 1.0 if codes_equal(client_code, po_item.product_code) else 0.0

    return results


def score_fields(
    pi_item: LineItem,
    po_item: POLineItem,
    purchase_order: Optional[PurchaseOrder] = None,
    settings: Optional[MatchingSettings] = None,
) -> FieldScores:
    """
    Score each field that both items carry.

    Weights: product code 0.40, product name 0.35, quantity 0.15, unit
    price 0.10. When the PI item carries manual hints they take
    manual_hint_weight of the total and the automatic fields share the rest.
    Items with no product code or name (and no hints) score nothing.
    """
    if settings is None:
        settings = MatchingSettings()

    result = FieldScores()

    hints = score_manual_hints(pi_item, po_item, purchase_order)

    # Quantity and price alone cannot identify a product
    if not po_item.has_identity() or not (pi_item.has_identity() or hints):
        return result

    auto_weight = 1.0
    if hints:
        hint_score = sum(hints.values()) / len(hints)
        result.score += hint_score * settings.manual_hint_weight
        result.max_weight += settings.manual_hint_weight
        result.similarities.update(hints)
        auto_weight = 1.0 - settings.manual_hint_weight

    if normalize_text(pi_item.product_code) and normalize_text(po_item.product_code):
        similarity = string_similarity(
            pi_item.product_code, po_item.product_code, settings.substring_similarity
        )
        result.add("product_code", similarity, auto_weight * settings.code_weight)

    if normalize_text(pi_item.product_name) and normalize_text(po_item.product_name):
        similarity = string_similarity(
            pi_item.product_name, po_item.product_name, settings.substring_similarity
        )
        result.add("product_name", similarity, auto_weight * settings.name_weight)

    if _positive(pi_item.quantity) and _positive(po_item.quantity):
        credit = 1.0 if pi_item.quantity == po_item.quantity else settings.quantity_mismatch_credit
        result.add("quantity", credit, auto_weight * settings.quantity_weight)

    if _positive(pi_item.unit_price) and _positive(po_item.unit_price):
        closeness = max(0.0, 1.0 - relative_difference(pi_item.unit_price, po_item.unit_price))
        result.add("unit_price", closeness, auto_weight * settings.price_weight)

    return result
