"""
Output schemas for reconciliation runs.
Defines the result shape returned to the surrounding application.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from pipo_matching.schemas.line_item import MatchTier, ProformaInvoiceItem
from pipo_matching.schemas.po import POLineItem


class MatchCandidate(BaseModel):
    """A scored (PI item, PO line item) pair proposed to the operator."""
    pi_item_id: str
    po_id: str
    po_number: str
    po_line_id: str
    po_item: POLineItem
    client_name: str = ""
    project_code: Optional[str] = None
    score: float = Field(ge=0.0, le=1.0)
    confidence: int = Field(ge=0, le=100)
    tier: MatchTier
    matched_fields: List[str] = Field(default_factory=list)

    @property
    def link_key(self) -> tuple:
        return (self.po_id, self.po_line_id)


class ItemMatches(BaseModel):
    """Ranked candidates for one PI item."""
    pi_item: ProformaInvoiceItem
    matches: List[MatchCandidate] = Field(default_factory=list)

    @property
    def best(self) -> Optional[MatchCandidate]:
        return self.matches[0] if self.matches else None


class MatchingSummary(BaseModel):
    """Counts describing one reconciliation run."""
    total_items: int = 0
    already_matched_items: int = 0
    searched_items: int = 0
    matched_items: int = 0
    no_match_items: int = 0
    high_confidence_matches: int = 0
    match_rate: int = 0  # percentage of searched items with >= 1 candidate


class MatchingResult(BaseModel):
    """Result of find_matches. Always well-formed, even on failure."""
    model_config = ConfigDict(json_schema_extra={
        "example": {
            "success": True,
            "matches": [
                {
                    "pi_item": {"id": "pi-1", "product_code": "NJ2214ECP", "quantity": 10, "unit_price": 145.0},
                    "matches": [
                        {
                            "pi_item_id": "pi-1",
                            "po_id": "po-7",
                            "po_number": "PO-2026-014",
                            "po_line_id": "1",
                            "po_item": {"id": "1", "product_code": "NJ2214ECP", "quantity": 10, "unit_price": 145.0},
                            "score": 1.0,
                            "confidence": 100,
                            "tier": "exact",
                            "matched_fields": ["product_code", "quantity", "unit_price"],
                        }
                    ],
                }
            ],
            "summary": {
                "total_items": 1,
                "already_matched_items": 0,
                "searched_items": 1,
                "matched_items": 1,
                "no_match_items": 0,
                "high_confidence_matches": 1,
                "match_rate": 100,
            },
        }
    })

    success: bool = True
    matches: List[ItemMatches] = Field(default_factory=list)
    summary: MatchingSummary = Field(default_factory=MatchingSummary)
    error: Optional[str] = None

    @classmethod
    def empty(cls) -> "MatchingResult":
        return cls()

    @classmethod
    def failure(cls, error: str) -> "MatchingResult":
        return cls(success=False, error=error)
