"""
Purchase Order schema and data models.
Represents client POs supplied by the surrounding application.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, model_validator

from pipo_matching.schemas.line_item import LineItem


class POLineItem(LineItem):
    """A single line item in a Purchase Order, identified by id or line number."""
    id: Optional[str] = None
    line_number: Optional[str] = None

    @model_validator(mode="after")
    def check_identifier(self) -> "POLineItem":
        if not (self.line_number or self.id):
            raise ValueError("PO line item needs an id or a line_number")
        return self

    @property
    def line_id(self) -> str:
        """Identifier used in the link ledger."""
        return self.line_number or self.id


class PurchaseOrder(BaseModel):
    """A Purchase Order record."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    order_number: Optional[str] = None
    client_name: str = ""
    project_code: Optional[str] = None
    client_po_number: Optional[str] = None
    line_items: List[POLineItem] = Field(default_factory=list)

    @property
    def reference_number(self) -> str:
        """PO number as the client knows it, falling back to the record id."""
        return self.client_po_number or self.order_number or self.id
