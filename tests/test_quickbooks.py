from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest

from racktrack_service.app.crud.quickbooks import quickbooks_crud
from racktrack_service.app.models.inventory.products import Product
from racktrack_service.app.models.quickbooks.qb_connections import QBConnection
from racktrack_service.app.models.sales.customer_pos import CustomerPO
from racktrack_service.app.models.sales.customers import Customer
from racktrack_service.util import quickbooks_client
from racktrack_service.util.quickbooks_client import QuickBooksApi, QuickBooksApiError, TokenSet


def _response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload or {}
    response.content = b"{}"
    response.text = str(payload or "")
    return response


def _connection(db, expires_in=timedelta(hours=1), **kw):
    connection = QBConnection(
        company_id=kw.pop("company_id", "9130"),
        company_name=kw.pop("company_name", "Sandbox Co"),
        realm_id=kw.pop("realm_id", "9130"),
        access_token="access-1",
        refresh_token=kw.pop("refresh_token", "refresh-1"),
        token_expires_at=datetime.now(timezone.utc) + expires_in,
        **kw,
    )
    db.add(connection)
    db.commit()
    db.refresh(connection)
    return connection


def _tokens(access="access-2", refresh="refresh-2"):
    return TokenSet(access_token=access, refresh_token=refresh,
                    expires_at=datetime.now(timezone.utc) + timedelta(hours=1))


# ----------------------------------------------------------------------
# client
# ----------------------------------------------------------------------

def test_token_expiry_buffer():
    now = datetime.now(timezone.utc)
    assert quickbooks_client.is_token_expired(None)
    assert quickbooks_client.is_token_expired(now + timedelta(minutes=4))
    assert not quickbooks_client.is_token_expired(now + timedelta(minutes=10))


def test_request_retries_once_after_401():
    connection = SimpleNamespace(
        realm_id="9130", access_token="stale", refresh_token="refresh-1",
        token_expires_at=datetime.now(timezone.utc) + timedelta(hours=1))
    saved = []

    with patch("racktrack_service.util.quickbooks_client.requests") as mock_requests:
        mock_requests.request.side_effect = [
            _response(401, {"fault": "expired"}),
            _response(200, {"QueryResponse": {"Customer": [{"Id": "1"}]}}),
        ]
        mock_requests.post.return_value = _response(200, {
            "access_token": "fresh", "refresh_token": "refresh-2", "expires_in": 3600,
        })

        api = QuickBooksApi(connection, on_tokens_refreshed=lambda conn, tokens: saved.append(tokens))
        result = api.query("select * from Customer")

    assert result == {"Customer": [{"Id": "1"}]}
    assert mock_requests.request.call_count == 2
    second_headers = mock_requests.request.call_args_list[1].kwargs["headers"]
    assert second_headers["Authorization"] == "Bearer fresh"
    assert connection.refresh_token == "refresh-2"
    assert saved[0].access_token == "fresh"

    token_call = mock_requests.post.call_args
    assert token_call.args[0] == quickbooks_client.TOKEN_URL
    assert token_call.kwargs["data"] == {"grant_type": "refresh_token", "refresh_token": "refresh-1"}
    assert token_call.kwargs["headers"]["Authorization"].startswith("Basic ")


def test_request_gives_up_after_second_401():
    connection = SimpleNamespace(
        realm_id="9130", access_token="stale", refresh_token="refresh-1",
        token_expires_at=datetime.now(timezone.utc) + timedelta(hours=1))

    with patch("racktrack_service.util.quickbooks_client.requests") as mock_requests:
        mock_requests.request.return_value = _response(401)
        mock_requests.post.return_value = _response(200, {
            "access_token": "fresh", "refresh_token": "refresh-2", "expires_in": 3600,
        })

        with pytest.raises(QuickBooksApiError) as exc:
            QuickBooksApi(connection).get("/customer/1")

    assert exc.value.status_code == 401
    assert mock_requests.request.call_count == 2


def test_expired_token_refreshed_before_call():
    connection = SimpleNamespace(
        realm_id="9130", access_token="old", refresh_token="refresh-1",
        token_expires_at=datetime.now(timezone.utc) + timedelta(minutes=1))

    with patch.object(quickbooks_client, "refresh_access_token", return_value=_tokens("new")) as refresh, \
            patch("racktrack_service.util.quickbooks_client.requests") as mock_requests:
        mock_requests.request.return_value = _response(200, {"Item": {"Id": "5"}})
        QuickBooksApi(connection).get("/item/5")

    refresh.assert_called_once_with("refresh-1")
    assert mock_requests.request.call_args.kwargs["headers"]["Authorization"] == "Bearer new"


# ----------------------------------------------------------------------
# OAuth
# ----------------------------------------------------------------------

def test_connect_sets_state_cookie(client, admin_headers, manager_headers):
    assert client.get("/api/quickbooks/connect", headers=manager_headers,
                      follow_redirects=False).status_code == 403

    resp = client.get("/api/quickbooks/connect", headers=admin_headers, follow_redirects=False)
    assert resp.status_code == 307

    location = urlparse(resp.headers["location"])
    query = parse_qs(location.query)
    assert location.netloc == "appcenter.intuit.com"
    assert query["client_id"] == ["qb-client"]
    assert query["scope"] == [quickbooks_client.SCOPE]
    assert query["state"] == [resp.cookies.get(quickbooks_crud.STATE_COOKIE)]


def test_callback_rejects_state_mismatch(client):
    client.cookies.set(quickbooks_crud.STATE_COOKIE, "expected")
    resp = client.get("/api/quickbooks/callback",
                      params={"code": "abc", "state": "forged", "realmId": "9130"},
                      follow_redirects=False)

    assert resp.status_code == 307
    assert resp.headers["location"].endswith("/admin/quickbooks?error=invalid_state")


def test_callback_reports_missing_params_and_oauth_error(client):
    resp = client.get("/api/quickbooks/callback", params={"code": "abc"}, follow_redirects=False)
    assert resp.headers["location"].endswith("error=missing_params")

    resp = client.get("/api/quickbooks/callback", params={"error": "access_denied"}, follow_redirects=False)
    assert resp.headers["location"].endswith("error=oauth_error")


def test_callback_stores_connection(client, db):
    company = quickbooks_client.CompanyInfo(company_id="9130", company_name="Sandbox Co")
    client.cookies.set(quickbooks_crud.STATE_COOKIE, "state-1")

    with patch.object(quickbooks_client, "exchange_code_for_tokens", return_value=_tokens()) as exchange, \
            patch.object(quickbooks_client, "get_company_info", return_value=company):
        resp = client.get("/api/quickbooks/callback",
                          params={"code": "auth-code", "state": "state-1", "realmId": "9130"},
                          follow_redirects=False)

    exchange.assert_called_once_with("auth-code")
    assert resp.headers["location"].endswith("/admin/quickbooks?success=connected")

    connection = db.query(QBConnection).one()
    assert connection.company_name == "Sandbox Co"
    assert connection.access_token == "access-2"
    assert connection.base_url == quickbooks_client.SANDBOX_BASE_URL


def test_status_and_disconnect(client, db, admin_headers, worker_headers):
    connection = _connection(db)

    status = client.get("/api/quickbooks/status", headers=worker_headers).json()["data"]
    assert status[0]["company_name"] == "Sandbox Co"
    assert status[0]["is_token_expired"] is False

    assert client.post("/api/quickbooks/disconnect", json={"connection_id": str(connection.id)},
                       headers=worker_headers).status_code == 403
    assert client.post("/api/quickbooks/disconnect", json={},
                       headers=admin_headers).status_code == 400
    assert client.post("/api/quickbooks/disconnect", json={"connection_id": str(connection.id)},
                       headers=admin_headers).status_code == 200

    db.expire_all()
    assert db.query(QBConnection).count() == 0


# ----------------------------------------------------------------------
# cron token refresh
# ----------------------------------------------------------------------

def test_refresh_token_requires_cron_secret(client):
    assert client.post("/api/quickbooks/refresh-token").status_code == 401
    assert client.post("/api/quickbooks/refresh-token",
                       headers={"Authorization": "Bearer wrong"}).status_code == 401


def test_refresh_token_results(client, db):
    _connection(db, company_id="1", realm_id="1", company_name="Fresh", expires_in=timedelta(hours=2))
    _connection(db, company_id="2", realm_id="2", company_name="Stale", expires_in=timedelta(minutes=10))
    _connection(db, company_id="3", realm_id="3", company_name="Broken", expires_in=timedelta(minutes=-5),
                refresh_token="revoked")

    def fake_refresh(refresh_token):
        if refresh_token == "revoked":
            raise QuickBooksApiError("invalid_grant", status_code=400)
        return _tokens()

    with patch.object(quickbooks_client, "refresh_access_token", side_effect=fake_refresh):
        resp = client.post("/api/quickbooks/refresh-token",
                           headers={"Authorization": "Bearer cron-test-secret"})

    assert resp.status_code == 200
    results = {r["company_name"]: r for r in resp.json()["data"]["results"]}
    assert results["Fresh"]["status"] == "skipped"
    assert results["Stale"]["status"] == "success"
    assert results["Broken"]["status"] == "error"
    assert results["Broken"]["message"] == "invalid_grant"

    db.expire_all()
    broken = db.query(QBConnection).filter(QBConnection.company_name == "Broken").one()
    assert broken.error_count == 1
    assert broken.last_error == "invalid_grant"


# ----------------------------------------------------------------------
# customer / item sync
# ----------------------------------------------------------------------

QB_CUSTOMER = {
    "Id": "58",
    "DisplayName": "Acme Sports",
    "CompanyName": "Acme Sports LLC",
    "PrimaryEmailAddr": {"Address": "orders@acme.test"},
    "PrimaryPhone": {"FreeFormNumber": "(555) 555-0101"},
    "BillAddr": {"Line1": "1 Main St", "City": "Austin", "CountrySubDivisionCode": "TX",
                 "PostalCode": "78701"},
    "Active": True,
    "SyncToken": "3",
    "MetaData": {"CreateTime": "2024-01-05T10:00:00-08:00",
                 "LastUpdatedTime": "2024-02-01T09:30:00-08:00"},
}


def test_map_customer():
    data = quickbooks_crud.map_customer(QB_CUSTOMER)

    assert data["name"] == "Acme Sports"
    assert data["email"] == "orders@acme.test"
    assert data["billing_address"]["state"] == "TX"
    assert data["shipping_address"] is None
    assert data["qb_sync_token"] == "3"
    assert data["qb_created_time"].utcoffset() == timedelta(hours=-8)


def test_map_customer_falls_back_to_person_name():
    data = quickbooks_crud.map_customer({"Id": "7", "GivenName": "Jo", "FamilyName": "Ruiz"})
    assert data["name"] == "Jo Ruiz"
    assert data["is_active"] is True


def test_sync_customers_upserts(client, db, manager_headers, worker_headers):
    _connection(db)
    renamed = {**QB_CUSTOMER, "DisplayName": "Acme Athletics"}

    with patch.object(QuickBooksApi, "query", return_value={"Customer": [QB_CUSTOMER]}) as query:
        assert client.post("/api/quickbooks/sync/customers", headers=worker_headers).status_code == 403
        first = client.post("/api/quickbooks/sync/customers", params={"max_results": 5},
                            headers=manager_headers).json()["data"]
    query.assert_called_once_with("select * from Customer maxresults 5")

    with patch.object(QuickBooksApi, "query", return_value={"Customer": [renamed]}):
        client.post("/api/quickbooks/sync/customers", headers=manager_headers)

    assert first == {"synced": 1, "total": 1, "errors": []}
    db.expire_all()
    customers = db.query(Customer).all()
    assert len(customers) == 1
    assert customers[0].name == "Acme Athletics"
    assert customers[0].qb_customer_id == "58"
    assert customers[0].last_synced_at is not None


def test_sync_items_filters_types(client, db, manager_headers):
    _connection(db)
    db.add(Product(sku="INK-CYAN", name="Cyan ink", product_type="raw_material"))
    db.commit()
    items = [
        {"Id": "10", "Name": "Cyan ink", "Sku": "INK-CYAN", "Type": "Inventory", "PurchaseCost": 12.5},
        {"Id": "11", "Name": "Screen print", "Type": "NonInventory", "UnitPrice": 4},
        {"Id": "12", "Name": "Design fee", "Type": "Service"},
    ]

    with patch.object(QuickBooksApi, "query", return_value={"Item": items}):
        result = client.post("/api/quickbooks/sync/items", headers=manager_headers).json()["data"]

    assert result == {"created": 1, "updated": 1, "skipped": 1, "total": 3, "errors": []}
    db.expire_all()
    ink = db.query(Product).filter(Product.sku == "INK-CYAN").one()
    assert ink.qb_item_id == "10"
    assert ink.cost_per_unit == 12.5
    screen = db.query(Product).filter(Product.qb_item_id == "11").one()
    assert screen.sku == "QB-11"
    assert screen.product_type == "finished_good"


def test_sync_items_does_not_count_failed_records(client, db, manager_headers):
    _connection(db)
    items = [
        {"Id": "21", "Name": "Black ink", "Type": "Inventory"},
        {"Id": "20", "Sku": "NONAME", "Type": "Inventory"},
    ]

    with patch.object(QuickBooksApi, "query", return_value={"Item": items}):
        result = client.post("/api/quickbooks/sync/items", headers=manager_headers).json()["data"]

    assert result["created"] == 1
    assert result["updated"] == 0
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("Item 20:")
    db.expire_all()
    assert db.query(Product).filter(Product.sku == "QB-21").count() == 1
    assert db.query(Product).filter(Product.sku == "NONAME").count() == 0


def test_sync_without_connection(client, manager_headers):
    resp = client.post("/api/quickbooks/sync/customers", headers=manager_headers)
    assert resp.status_code == 404
    assert resp.json()["status_code"] == "402"


def test_sync_propagates_api_status(client, db, manager_headers):
    _connection(db)
    with patch.object(QuickBooksApi, "query", side_effect=QuickBooksApiError("throttled", status_code=429)):
        resp = client.post("/api/quickbooks/sync/items", headers=manager_headers)
    assert resp.status_code == 429


# ----------------------------------------------------------------------
# estimates
# ----------------------------------------------------------------------

@pytest.fixture
def synced_po(client, db, worker_headers):
    customer = Customer(name="Acme Sports", qb_customer_id="58")
    db.add(customer)
    db.commit()
    return client.post("/api/customer-pos/", json={
        "customer_id": str(customer.id),
        "description": "League jerseys",
        "production_notes": "Rush",
        "due_date": "2030-03-01",
        "items": [{"description": "Jersey", "quantity": 10, "unit_price": 20}],
    }, headers=worker_headers).json()["data"]


def test_build_estimate_payload(db, synced_po):
    po = db.query(CustomerPO).one()

    payload = quickbooks_crud.build_estimate_payload(po, "58")

    assert payload["CustomerRef"] == {"value": "58"}
    assert payload["DocNumber"] == "PO-000001"
    assert payload["ExpirationDate"] == "2030-03-01"
    assert payload["PrivateNote"] == "League jerseys\nProduction Notes: Rush"
    line = payload["Line"][0]
    assert line["Amount"] == 200
    assert line["SalesItemLineDetail"]["ItemRef"] == {"value": "1"}
    fields = {f["Name"]: f["StringValue"] for f in payload["CustomField"]}
    assert fields == {"PO Number": "PO-000001", "Production Status": "DRAFT",
                      "Production Due": "2030-03-01"}


def test_sync_estimate_creates_then_updates(client, db, worker_headers, synced_po):
    _connection(db)
    saved = {"Estimate": {"Id": "130", "DocNumber": "1001", "SyncToken": "0"}}

    with patch.object(QuickBooksApi, "post", return_value=saved) as post:
        result = client.post(f"/api/customer-pos/{synced_po['id']}/sync-estimate",
                             headers=worker_headers).json()["data"]
    assert result == {"success": True, "estimate_id": "130", "estimate_number": "1001"}
    assert "Id" not in post.call_args.args[1]

    with patch.object(QuickBooksApi, "get", return_value={"Estimate": {"SyncToken": "4"}}) as get, \
            patch.object(QuickBooksApi, "post", return_value=saved) as post:
        client.post(f"/api/customer-pos/{synced_po['id']}/sync-estimate", headers=worker_headers)

    get.assert_called_once_with("/estimate/130")
    endpoint, payload = post.call_args.args
    assert endpoint == "/estimate"
    assert payload["Id"] == "130"
    assert payload["SyncToken"] == "4"

    po = client.get(f"/api/customer-pos/{synced_po['id']}", headers=worker_headers).json()["data"]
    assert po["qb_estimate_id"] == "130"
    assert po["qb_estimate_number"] == "1001"


def test_sync_estimate_requires_synced_customer(client, db, worker_headers):
    _connection(db)
    po = client.post("/api/customer-pos/", json={"description": "No customer"},
                     headers=worker_headers).json()["data"]

    resp = client.post(f"/api/customer-pos/{po['id']}/sync-estimate", headers=worker_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Customer must be synced to QuickBooks first"


def test_sync_estimate_without_connection(client, worker_headers, synced_po):
    resp = client.post(f"/api/customer-pos/{synced_po['id']}/sync-estimate", headers=worker_headers)
    assert resp.status_code == 404


# ----------------------------------------------------------------------
# invoices
# ----------------------------------------------------------------------

def test_sync_invoice_pushes_lines(client, db, worker_headers, synced_po):
    for status in ("pending_approval", "approved", "sent_to_production", "in_production",
                   "quality_check", "ready_for_invoice"):
        client.patch(f"/api/customer-pos/{synced_po['id']}/status", json={"status": status},
                     headers=worker_headers)
    invoice = client.post(f"/api/invoices/from-po/{synced_po['id']}", json={"notes": "Net 30"},
                          headers=worker_headers).json()["data"]
    _connection(db)
    saved = {"Invoice": {"Id": "310", "DocNumber": invoice["invoice_number"], "SyncToken": "0"}}

    with patch.object(QuickBooksApi, "post", return_value=saved) as post:
        result = client.post(f"/api/invoices/{invoice['id']}/sync", headers=worker_headers).json()["data"]

    assert result == {"success": True, "invoice_id": "310", "doc_number": "INV-000001"}
    endpoint, payload = post.call_args.args
    assert endpoint == "/invoice"
    assert payload["CustomerRef"] == {"value": "58"}
    assert payload["DocNumber"] == "INV-000001"
    assert payload["PrivateNote"] == "Net 30"
    assert [line["Amount"] for line in payload["Line"]] == [200]

    stored = client.get(f"/api/invoices/{invoice['id']}", headers=worker_headers).json()["data"]
    assert stored["qb_invoice_id"] == "310"


def test_sync_invoice_requires_synced_customer(client, db, worker_headers):
    customer = Customer(name="Walk-in")
    db.add(customer)
    db.commit()
    po = client.post("/api/customer-pos/", json={
        "customer_id": str(customer.id), "items": [{"description": "Cap", "quantity": 1, "unit_price": 9}],
    }, headers=worker_headers).json()["data"]
    for status in ("pending_approval", "approved", "sent_to_production", "in_production",
                   "quality_check", "ready_for_invoice"):
        client.patch(f"/api/customer-pos/{po['id']}/status", json={"status": status}, headers=worker_headers)
    invoice = client.post(f"/api/invoices/from-po/{po['id']}", json={}, headers=worker_headers).json()["data"]
    _connection(db)

    resp = client.post(f"/api/invoices/{invoice['id']}/sync", headers=worker_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Customer must be synced to QuickBooks first"
