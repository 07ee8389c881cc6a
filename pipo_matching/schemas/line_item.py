"""
Line item schemas shared by Proforma Invoices and Purchase Orders.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class MatchTier(str, Enum):
    """Discrete confidence bucket for a candidate."""
    EXACT = "exact"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LineItem(BaseModel):
    """A single priced product line."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    quantity: Optional[float] = Field(default=None, ge=0.0)
    unit_price: Optional[float] = Field(default=None, ge=0.0)

    def has_identity(self) -> bool:
        """Check if the item carries a code or a name to match on."""
        return bool((self.product_code or "").strip() or (self.product_name or "").strip())


class ProformaInvoiceItem(LineItem):
    """
    A PI line item plus the linkage written by the match applier.

    client_po_number and client_item_code may be typed in by an operator
    before matching; they then act as hints for the scorer.
    """
    linked_po_id: Optional[str] = None
    linked_po_line_id: Optional[str] = None
    client_po_number: Optional[str] = None
    client_item_code: Optional[str] = None
    project_code: Optional[str] = None
    matched: bool = False
    match_confidence: Optional[int] = Field(default=None, ge=0, le=100)
    match_tier: Optional[MatchTier] = None

    @property
    def link_key(self) -> Optional[tuple]:
        """(po_id, po_line_id) this item points at, if any."""
        if self.linked_po_id and self.linked_po_line_id:
            return (self.linked_po_id, self.linked_po_line_id)
        return None

    def is_already_matched(self) -> bool:
        """Matched items are terminal for reconciliation."""
        return self.matched and self.link_key is not None
