import pytest


def _data(resp):
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.fixture
def customer(client, worker_headers):
    return _data(client.post("/api/customers/", json={
        "name": "Acme Sports", "company_name": "Acme Sports LLC", "email": "orders@acme.test",
    }, headers=worker_headers))


def _po(client, headers, customer_id, **kw):
    payload = {
        "customer_id": customer_id,
        "description": "Spring league jerseys",
        "items": [
            {"description": "Jersey", "quantity": 12, "unit_price": 18.5},
            {"description": "Setup fee", "quantity": 1, "unit_price": 40},
        ],
    }
    payload.update(kw)
    return _data(client.post("/api/customer-pos/", json=payload, headers=headers))


def _advance(client, headers, po_id, *statuses):
    for status in statuses:
        _data(client.patch(f"/api/customer-pos/{po_id}/status", json={"status": status}, headers=headers))


def test_create_po_numbers_and_totals(client, worker_headers, customer):
    first = _po(client, worker_headers, customer["id"])
    second = _po(client, worker_headers, customer["id"])

    assert first["po_number"] == "PO-000001"
    assert second["po_number"] == "PO-000002"
    assert first["production_status"] == "draft"
    assert first["total_amount"] == 262
    assert [i["line_number"] for i in first["items"]] == [1, 2]
    assert first["customer_name"] == "Acme Sports"

    listed = _data(client.get("/api/customer-pos/", headers=worker_headers))
    assert {p["po_number"] for p in listed} == {"PO-000001", "PO-000002"}


def test_duplicate_po_number(client, worker_headers, customer):
    _po(client, worker_headers, customer["id"], po_number="ACME-77")
    resp = client.post("/api/customer-pos/", json={"po_number": "ACME-77"}, headers=worker_headers)
    assert resp.status_code == 400


def test_invalid_transition_lists_valid_targets(client, worker_headers, customer):
    po = _po(client, worker_headers, customer["id"])

    resp = client.patch(f"/api/customer-pos/{po['id']}/status",
                        json={"status": "invoiced"}, headers=worker_headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid status transition from draft to invoiced"
    assert body["data"]["valid_transitions"] == ["pending_approval", "cancelled"]


def test_status_history_and_hold_reason(client, worker_headers, customer):
    po = _po(client, worker_headers, customer["id"])
    _advance(client, worker_headers, po["id"], "pending_approval", "approved", "sent_to_production")

    held = _data(client.patch(f"/api/customer-pos/{po['id']}/status", json={
        "status": "on_hold", "reason": "Waiting on artwork",
    }, headers=worker_headers))
    assert held["production_status"] == "on_hold"
    assert held["hold_reason"] == "Waiting on artwork"

    resumed = _data(client.patch(f"/api/customer-pos/{po['id']}/status",
                                 json={"status": "in_production"}, headers=worker_headers))
    assert resumed["hold_reason"] == ""
    moves = {(h["from_status"], h["to_status"]) for h in resumed["status_history"]}
    assert ("sent_to_production", "on_hold") in moves
    assert ("on_hold", "in_production") in moves
    assert len(resumed["status_history"]) == 5


def test_delete_rules(client, worker_headers, manager_headers, customer):
    po = _po(client, worker_headers, customer["id"])

    assert client.delete(f"/api/customer-pos/{po['id']}", headers=worker_headers).status_code == 403

    _advance(client, worker_headers, po["id"],
             "pending_approval", "approved", "sent_to_production", "in_production")
    locked = client.delete(f"/api/customer-pos/{po['id']}", headers=manager_headers)
    assert locked.status_code == 400

    draft = _po(client, worker_headers, customer["id"])
    assert client.delete(f"/api/customer-pos/{draft['id']}", headers=manager_headers).status_code == 200
    assert client.get(f"/api/customer-pos/{draft['id']}", headers=manager_headers).status_code == 404


def test_edit_replaces_line_items(client, worker_headers, customer):
    po = _po(client, worker_headers, customer["id"])

    updated = _data(client.patch(f"/api/customer-pos/{po['id']}", json={
        "items": [{"description": "Hoodie", "quantity": 4, "unit_price": 30}],
    }, headers=worker_headers))
    assert updated["total_amount"] == 120
    assert len(updated["items"]) == 1
    assert updated["description"] == "Spring league jerseys"


def test_invoice_from_po_and_payments(client, worker_headers, manager_headers, customer):
    po = _po(client, worker_headers, customer["id"])

    early = client.post(f"/api/invoices/from-po/{po['id']}", json={}, headers=worker_headers)
    assert early.status_code == 400

    _advance(client, worker_headers, po["id"], "pending_approval", "approved", "sent_to_production",
             "in_production", "quality_check", "ready_for_invoice")

    invoice = _data(client.post(f"/api/invoices/from-po/{po['id']}", json={"tax_amount": 20},
                                headers=worker_headers))
    assert invoice["invoice_number"] == "INV-000001"
    assert invoice["subtotal"] == 262
    assert invoice["total_amount"] == 282
    assert invoice["balance_due"] == 282
    assert invoice["status"] == "draft"
    assert len(invoice["lines"]) == 2

    po = _data(client.get(f"/api/customer-pos/{po['id']}", headers=worker_headers))
    assert po["production_status"] == "invoiced"

    over = client.post(f"/api/invoices/{invoice['id']}/payments", json={"amount": 300}, headers=worker_headers)
    assert over.status_code == 400
    assert over.json()["message"] == "Payment exceeds the balance due of 282.00"

    partial = _data(client.post(f"/api/invoices/{invoice['id']}/payments", json={"amount": 100},
                                headers=worker_headers))
    assert partial["balance_due"] == 182
    assert partial["status"] == "draft"

    paid = _data(client.post(f"/api/invoices/{invoice['id']}/payments", json={"amount": 182},
                             headers=worker_headers))
    assert paid["balance_due"] == 0
    assert paid["status"] == "paid"


def test_void_invoice_is_frozen(client, worker_headers, manager_headers, customer):
    po = _po(client, worker_headers, customer["id"])
    _advance(client, worker_headers, po["id"], "pending_approval", "approved", "sent_to_production",
             "in_production", "quality_check", "ready_for_invoice")
    invoice = _data(client.post(f"/api/invoices/from-po/{po['id']}", json={}, headers=worker_headers))

    assert client.patch(f"/api/invoices/{invoice['id']}/status", json={"status": "void"},
                        headers=worker_headers).status_code == 403
    _data(client.patch(f"/api/invoices/{invoice['id']}/status", json={"status": "void"},
                       headers=manager_headers))

    resp = client.post(f"/api/invoices/{invoice['id']}/payments", json={"amount": 10}, headers=worker_headers)
    assert resp.status_code == 400


def test_po_numbers_survive_deletes(client, worker_headers, manager_headers, customer):
    first = _po(client, worker_headers, customer["id"])
    second = _po(client, worker_headers, customer["id"])

    _data(client.delete(f"/api/customer-pos/{first['id']}", headers=manager_headers))

    third = _po(client, worker_headers, customer["id"])
    fourth = _po(client, worker_headers, customer["id"])
    assert second["po_number"] == "PO-000002"
    assert [third["po_number"], fourth["po_number"]] == ["PO-000003", "PO-000004"]


def test_customer_delete_blocked_by_orders(client, worker_headers, manager_headers, customer):
    po = _po(client, worker_headers, customer["id"])

    resp = client.delete(f"/api/customers/{customer['id']}", headers=manager_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Cannot delete customer with purchase orders"

    _data(client.delete(f"/api/customer-pos/{po['id']}", headers=manager_headers))
    _data(client.delete(f"/api/customers/{customer['id']}", headers=manager_headers))
    lookup = _data(client.get("/api/customers/lookup", headers=worker_headers))
    assert lookup == []
