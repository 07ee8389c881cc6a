"""
Data models for PI items, purchase orders and match results.
"""

from pipo_matching.schemas.line_item import LineItem, MatchTier, ProformaInvoiceItem
from pipo_matching.schemas.po import POLineItem, PurchaseOrder
from pipo_matching.schemas.output import (
    ItemMatches,
    MatchCandidate,
    MatchingResult,
    MatchingSummary,
)

__all__ = [
    "LineItem",
    "MatchTier",
    "ProformaInvoiceItem",
    "POLineItem",
    "PurchaseOrder",
    "ItemMatches",
    "MatchCandidate",
    "MatchingResult",
    "MatchingSummary",
]
