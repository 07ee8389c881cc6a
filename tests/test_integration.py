"""
Integration tests for the file-driven run and the HTTP API.
"""

import json
import pytest
from fastapi.testclient import TestClient

from pipo_matching import api
from pipo_matching.main import (
    format_output_json,
    load_pi_items_from_file,
    load_purchase_orders_from_file,
    run_reconciliation,
)
from pipo_matching.schemas.output import MatchingResult


PURCHASE_ORDERS = [
    {
        "id": "po-1",
        "order_number": "PO-2026-001",
        "client_name": "Acme Mining",
        "project_code": "FS-100",
        "line_items": [
            {"id": "1", "product_code": "NJ2214ECP", "product_name": "Cylindrical roller bearing",
             "quantity": 10, "unit_price": 145.0},
            {"id": "2", "product_code": "6205-2RS", "product_name": "Deep groove ball bearing",
             "quantity": 50, "unit_price": 4.2},
        ],
    }
]

PI_ITEMS = [
    {"id": "pi-1", "product_code": "NJ2214ECP", "quantity": 10, "unit_price": 145.0},
    {"id": "pi-2", "product_code": "6205-2RS", "product_name": "Deep groove ball bearing",
     "quantity": 40, "unit_price": 4.5},
]


@pytest.fixture
def po_file(tmp_path):
    path = tmp_path / "purchase_orders.json"
    path.write_text(json.dumps({"purchase_orders": PURCHASE_ORDERS}))
    return str(path)


@pytest.fixture
def pi_file(tmp_path):
    path = tmp_path / "pi_items.json"
    path.write_text(json.dumps(PI_ITEMS))
    return str(path)


@pytest.fixture
def client():
    return TestClient(api.app)


def test_loaders_accept_list_and_wrapped_formats(po_file, pi_file, tmp_path):
    """Test both JSON layouts."""
    assert [po.id for po in load_purchase_orders_from_file(po_file)] == ["po-1"]
    assert [item.id for item in load_pi_items_from_file(pi_file)] == ["pi-1", "pi-2"]

    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"items": PI_ITEMS[:1]}))
    assert len(load_pi_items_from_file(str(wrapped))) == 1


def test_run_reconciliation_from_files(po_file, pi_file):
    """Test a full file-driven run."""
    result = run_reconciliation(pi_file, po_file)

    assert result.success
    assert result.summary.total_items == 2
    assert result.summary.matched_items == 2
    assert result.summary.match_rate == 100

    best_by_item = {m.pi_item.id: m.best for m in result.matches}
    assert best_by_item["pi-1"].po_line_id == "1"
    assert best_by_item["pi-2"].po_line_id == "2"


def test_format_output_json(po_file, pi_file):
    """Test JSON rendering of a result."""
    output = json.loads(format_output_json(run_reconciliation(pi_file, po_file)))

    assert output["success"] is True
    assert output["matches"][0]["matches"][0]["tier"] == "exact"
    assert output["summary"]["total_items"] == 2


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_config_endpoint(client):
    response = client.get("/config")
    assert response.status_code == 200
    assert response.json()["min_score"] == 0.30


def test_result_schema_carries_example():
    """Test that the MatchingResult example is published in its JSON schema."""
    example = MatchingResult.model_json_schema()["example"]
    assert example["summary"]["match_rate"] == 100


def test_find_endpoint_with_inline_pos(client):
    """Test find with purchase orders in the request."""
    response = client.post("/matches/find", json={
        "pi_items": PI_ITEMS,
        "purchase_orders": PURCHASE_ORDERS,
    })
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["summary"]["matched_items"] == 2


def test_find_endpoint_loads_po_database(client, po_file, monkeypatch):
    """Test fallback to the configured PO database file."""
    monkeypatch.setattr(api.config, "PO_DATABASE_PATH", po_file)

    response = client.post("/matches/find", json={"pi_items": PI_ITEMS[:1]})
    body = response.json()

    assert body["success"] is True
    assert body["matches"][0]["matches"][0]["po_id"] == "po-1"


def test_find_endpoint_with_no_items(client):
    response = client.post("/matches/find", json={"pi_items": [], "purchase_orders": []})
    body = response.json()

    assert body["success"] is True
    assert body["summary"]["total_items"] == 0


def test_find_then_apply_over_http(client):
    """Test the review cycle through the API."""
    found = client.post("/matches/find", json={
        "pi_items": PI_ITEMS,
        "purchase_orders": PURCHASE_ORDERS,
    }).json()
    selections = {m["pi_item"]["id"]: m["matches"][0] for m in found["matches"]}

    applied = client.post("/matches/apply", json={"pi_items": PI_ITEMS, "selections": selections})
    items = applied.json()

    assert applied.status_code == 200
    assert all(item["matched"] for item in items)
    assert {(item["linked_po_id"], item["linked_po_line_id"]) for item in items} == {("po-1", "1"), ("po-1", "2")}

    rerun = client.post("/matches/find", json={
        "pi_items": items,
        "purchase_orders": PURCHASE_ORDERS,
    }).json()
    assert rerun["summary"]["already_matched_items"] == 2
    assert rerun["matches"] == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
