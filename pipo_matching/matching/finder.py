"""
Candidate Finder
Ranks the available PO line items for a single PI item.
"""

from typing import List, Optional

from pipo_matching.config import MatchingSettings
from pipo_matching.matching.scorer import score_candidate
from pipo_matching.schemas.line_item import ProformaInvoiceItem
from pipo_matching.schemas.output import MatchCandidate
from pipo_matching.schemas.po import PurchaseOrder
from pipo_matching.utils.logging import setup_logging


logger = setup_logging(__name__)


def find_item_candidates(
    pi_item: ProformaInvoiceItem,
    availability_pool: List[PurchaseOrder],
    settings: Optional[MatchingSettings] = None,
) -> List[MatchCandidate]:
    """
    Score every available PO line item against one PI item.

    Candidates scoring at or below settings.min_score are discarded. The
    rest are sorted by score, highest first; ties keep pool order.
    """
    if settings is None:
        settings = MatchingSettings()

    candidates = []

    for po in availability_pool:
        for po_item in po.line_items:
            result = score_candidate(pi_item, po_item, po, settings)

            logger.debug(
                f"Comparing PI {pi_item.id} '{pi_item.product_code or pi_item.product_name}' "
                f"vs PO {po.reference_number}/{po_item.line_id} "
                f"'{po_item.product_code or po_item.product_name}' -> {result.score:.3f}"
            )

            if result.score <= settings.min_score:
                continue

            candidates.append(MatchCandidate(
                pi_item_id=pi_item.id,
                po_id=po.id,
                po_number=po.reference_number,
                po_line_id=po_item.line_id,
                po_item=po_item,
                client_name=po.client_name,
                project_code=po.project_code,
                score=result.score,
                confidence=result.confidence,
                tier=result.tier,
                matched_fields=result.matched_fields,
            ))

    return sorted(candidates, key=lambda c: c.score, reverse=True)
