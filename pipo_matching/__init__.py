"""
PI-PO Line-Item Reconciliation Engine
"""

__version__ = "1.0.0"
__description__ = "Matches Proforma Invoice line items to Purchase Order line items"

from pipo_matching.matching import find_matches, apply_matches
from pipo_matching.schemas import (
    MatchCandidate,
    MatchingResult,
    ProformaInvoiceItem,
    PurchaseOrder,
)

__all__ = [
    "find_matches",
    "apply_matches",
    "MatchCandidate",
    "MatchingResult",
    "ProformaInvoiceItem",
    "PurchaseOrder",
]
