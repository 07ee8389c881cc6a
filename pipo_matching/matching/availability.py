"""
Availability Pool Builder
Derives the PO line items that no PI item has claimed yet.
"""

from typing import Any, Iterable, List, Set, Tuple

from pydantic import BaseModel, ValidationError

from pipo_matching.schemas.line_item import ProformaInvoiceItem
from pipo_matching.schemas.po import PurchaseOrder
from pipo_matching.utils.logging import setup_logging


logger = setup_logging(__name__)


def validate_purchase_orders(records: Iterable[Any]) -> List[PurchaseOrder]:
    """
    Validate PO records one by one, skipping those that cannot be used.

    A malformed PO is a data error: it is logged and left out, and the
    remaining POs are still matched.
    """
    purchase_orders = []
    for record in records:
        if isinstance(record, PurchaseOrder):
            purchase_orders.append(record)
            continue
        if isinstance(record, BaseModel):
            record = record.model_dump()
        try:
            purchase_orders.append(PurchaseOrder.model_validate(record))
        except ValidationError as e:
            po_id = record.get("id") if isinstance(record, dict) else None
            logger.warning(f"Skipping invalid purchase order {po_id!r}: {e}")
    return purchase_orders


def build_link_ledger(pi_items: Iterable[ProformaInvoiceItem]) -> Set[Tuple[str, str]]:
    """
    Collect the (po_id, po_line_id) pairs referenced by any PI item.

    An item counts as soon as both linkage ids are set, whether or not its
    matched flag is true. Derived from scratch on every call.
    """
    ledger = set()
    for item in pi_items:
        key = item.link_key
        if key is not None:
            ledger.add(key)
    return ledger


def build_availability_pool(
    purchase_orders: Iterable[PurchaseOrder],
    ledger_items: Iterable[ProformaInvoiceItem],
) -> List[PurchaseOrder]:
    """
    Filtered copies of the POs holding only unclaimed line items.

    POs left without line items are dropped. The input POs are not modified.
    """
    ledger = build_link_ledger(ledger_items)

    pool = []
    for po in purchase_orders:
        available_items = [
            item for item in po.line_items
            if (po.id, item.line_id) not in ledger
        ]
        if available_items:
            pool.append(po.model_copy(update={"line_items": available_items}))

    logger.debug(f"Ledger holds {len(ledger)} linked PO lines; {len(pool)} POs still have available lines")
    return pool
