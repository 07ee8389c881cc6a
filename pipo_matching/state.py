"""
State object for one reconciliation run.
Each workflow node reads the state and returns the fields it produced.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field

from pipo_matching.config import MatchingSettings
from pipo_matching.schemas.line_item import ProformaInvoiceItem
from pipo_matching.schemas.po import PurchaseOrder
from pipo_matching.schemas.output import ItemMatches, MatchingSummary


class ReconciliationRunState(BaseModel):
    """
    State passed between the nodes of the matching workflow.

    Inputs are set by find_matches; every other field is written by exactly
    one node:
    1. partition_items -> unmatched_items, already_matched_count
    2. build_pool -> availability_pool
    3. find_candidates -> matches
    4. summarize -> summary
    """

    # Inputs
    pi_items: List[ProformaInvoiceItem] = Field(default_factory=list)
    purchase_orders: List[PurchaseOrder] = Field(default_factory=list)
    linked_items: List[ProformaInvoiceItem] = Field(default_factory=list)  # PI items from other invoices
    settings: MatchingSettings = Field(default_factory=MatchingSettings)

    # Partition phase
    unmatched_items: List[ProformaInvoiceItem] = Field(default_factory=list)
    already_matched_count: int = 0

    # Availability phase
    availability_pool: List[PurchaseOrder] = Field(default_factory=list)

    # Candidate phase
    matches: List[ItemMatches] = Field(default_factory=list)

    # Summary phase
    summary: Optional[MatchingSummary] = None

    def get_summary(self) -> Dict[str, Any]:
        """Get a compact view of the run for logging."""
        return {
            "pi_items": len(self.pi_items),
            "unmatched_items": len(self.unmatched_items),
            "already_matched": self.already_matched_count,
            "available_pos": len(self.availability_pool),
            "available_lines": sum(len(po.line_items) for po in self.availability_pool),
            "items_with_candidates": len(self.matches),
        }
