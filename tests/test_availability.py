"""
Tests for the link ledger and availability pool.
"""

import pytest
from pipo_matching.matching.availability import build_availability_pool, build_link_ledger
from pipo_matching.schemas.line_item import ProformaInvoiceItem
from pipo_matching.schemas.po import PurchaseOrder, POLineItem


@pytest.fixture
def sample_pos():
    """Create sample POs for testing."""
    return [
        PurchaseOrder(
            id="po-1",
            order_number="PO-2026-001",
            client_name="Acme Mining",
            line_items=[
                POLineItem(id="a1", line_number="1", product_code="NJ2214ECP", quantity=10, unit_price=145.0),
                POLineItem(id="a2", line_number="2", product_code="6205-2RS", quantity=50, unit_price=4.2),
            ]
        ),
        PurchaseOrder(
            id="po-2",
            order_number="PO-2026-002",
            client_name="Borealis Pulp",
            line_items=[
                POLineItem(id="b1", product_code="22220E", quantity=4, unit_price=310.0),
            ]
        ),
    ]


def linked_item(item_id, po_id, line_id, matched=True):
    return ProformaInvoiceItem(
        id=item_id,
        product_code="X",
        linked_po_id=po_id,
        linked_po_line_id=line_id,
        matched=matched,
    )


def test_ledger_collects_linked_pairs():
    """Test that every item with both linkage ids lands in the ledger."""
    items = [
        linked_item("pi-1", "po-1", "1"),
        linked_item("pi-2", "po-2", "b1", matched=False),
        ProformaInvoiceItem(id="pi-3", product_code="Y", linked_po_id="po-1"),
        ProformaInvoiceItem(id="pi-4", product_code="Z"),
    ]
    assert build_link_ledger(items) == {("po-1", "1"), ("po-2", "b1")}


def test_ledger_of_no_items_is_empty():
    """Test empty ledger."""
    assert build_link_ledger([]) == set()


def test_pool_excludes_linked_lines(sample_pos):
    """Test that claimed PO lines are removed from the pool."""
    pool = build_availability_pool(sample_pos, [linked_item("pi-1", "po-1", "1")])

    po_1 = next(po for po in pool if po.id == "po-1")
    assert [item.line_id for item in po_1.line_items] == ["2"]


def test_pool_uses_line_number_before_id(sample_pos):
    """Test that the ledger key prefers the PO line number."""
    # "a1" is the item id, but the line is keyed by its line number "1"
    pool = build_availability_pool(sample_pos, [linked_item("pi-1", "po-1", "a1")])
    po_1 = next(po for po in pool if po.id == "po-1")
    assert len(po_1.line_items) == 2

    # lines without a line number fall back to their id
    pool = build_availability_pool(sample_pos, [linked_item("pi-2", "po-2", "b1")])
    assert [po.id for po in pool] == ["po-1"]


def test_pool_drops_fully_linked_pos(sample_pos):
    """Test that POs without remaining lines disappear from the pool."""
    ledger_items = [
        linked_item("pi-1", "po-1", "1"),
        linked_item("pi-2", "po-1", "2"),
    ]
    pool = build_availability_pool(sample_pos, ledger_items)
    assert [po.id for po in pool] == ["po-2"]


def test_pool_does_not_mutate_input(sample_pos):
    """Test that the source POs keep all their lines."""
    build_availability_pool(sample_pos, [linked_item("pi-1", "po-1", "1")])
    assert len(sample_pos[0].line_items) == 2


def test_pool_is_recomputed_each_call(sample_pos):
    """Test that a new link is honoured on the very next call."""
    items = [ProformaInvoiceItem(id="pi-1", product_code="NJ2214ECP")]
    first = build_availability_pool(sample_pos, items)
    assert sum(len(po.line_items) for po in first) == 3

    items = [linked_item("pi-1", "po-1", "1")]
    second = build_availability_pool(sample_pos, items)
    assert sum(len(po.line_items) for po in second) == 2


def test_same_line_id_on_different_pos_is_independent(sample_pos):
    """Test that the ledger key includes the PO id."""
    sample_pos[1].line_items.append(POLineItem(id="x", line_number="1", product_code="6308"))
    pool = build_availability_pool(sample_pos, [linked_item("pi-1", "po-2", "1")])

    po_1 = next(po for po in pool if po.id == "po-1")
    po_2 = next(po for po in pool if po.id == "po-2")
    assert len(po_1.line_items) == 2
    assert [item.line_id for item in po_2.line_items] == ["b1"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
