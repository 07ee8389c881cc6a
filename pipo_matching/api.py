"""
Optional FastAPI REST endpoint for line-item reconciliation.
Can be run with: uvicorn pipo_matching.api:app --reload
"""

from typing import Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from pipo_matching.config import MatchingSettings, get_config
from pipo_matching.main import load_purchase_orders_from_file
from pipo_matching.matching import find_matches, apply_matches
from pipo_matching.schemas.line_item import ProformaInvoiceItem
from pipo_matching.schemas.output import MatchCandidate, MatchingResult
from pipo_matching.schemas.po import PurchaseOrder

app = FastAPI(
    title="PI-PO Matching API",
    description="Line-item reconciliation between Proforma Invoices and Purchase Orders",
    version="1.0.0",
)

config = get_config()


class FindMatchesRequest(BaseModel):
    """Items to reconcile; POs fall back to the configured PO database."""
    pi_items: List[ProformaInvoiceItem] = Field(default_factory=list)
    purchase_orders: Optional[List[PurchaseOrder]] = None
    linked_items: List[ProformaInvoiceItem] = Field(default_factory=list)


class ApplyMatchesRequest(BaseModel):
    """Operator-confirmed candidates keyed by PI item id."""
    pi_items: List[ProformaInvoiceItem] = Field(default_factory=list)
    selections: Dict[str, MatchCandidate] = Field(default_factory=dict)


@app.post("/matches/find", response_model=MatchingResult)
async def find_matches_endpoint(request: FindMatchesRequest):
    """
    Propose PO line-item candidates for the unmatched PI items.

    Returns:
        MatchingResult; failures are reported in the body with success=false
    """
    purchase_orders = request.purchase_orders
    if purchase_orders is None:
        purchase_orders = load_purchase_orders_from_file(config.PO_DATABASE_PATH)

    return find_matches(
        request.pi_items,
        purchase_orders,
        linked_items=request.linked_items,
        settings=MatchingSettings.from_config(config),
    )


@app.post("/matches/apply", response_model=List[ProformaInvoiceItem])
async def apply_matches_endpoint(request: ApplyMatchesRequest):
    """Write confirmed selections onto the PI items."""
    try:
        return apply_matches(request.pi_items, request.selections)
    except Exception as e:
        return JSONResponse(
            content={
                "error": str(e),
                "message": "Failed to apply matches",
            },
            status_code=500,
        )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/config")
async def get_config_endpoint():
    """Get current matching configuration."""
    return MatchingSettings.from_config(config).model_dump()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower(),
    )
