def _data(resp):
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def _product(client, headers, **kw):
    payload = {"sku": "TEE-WHT-M", "name": "White tee M", "category": "Apparel"}
    payload.update(kw)
    return _data(client.post("/api/products/", json=payload, headers=headers))


def test_sku_is_unique_ignoring_case(client, worker_headers):
    _product(client, worker_headers)

    resp = client.post("/api/products/", json={"sku": "tee-wht-m", "name": "Copy"}, headers=worker_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Product with SKU 'tee-wht-m' already exists"


def test_list_filters_and_categories(client, worker_headers):
    _product(client, worker_headers)
    _product(client, worker_headers, sku="INK-MAG", name="Magenta ink", category="Ink",
             product_type="raw_material")

    raw = _data(client.get("/api/products/all", params={"product_type": "raw_material"},
                           headers=worker_headers))
    assert raw["total"] == 1
    assert raw["products"][0]["sku"] == "INK-MAG"

    found = _data(client.get("/api/products/all", params={"search": "white"}, headers=worker_headers))
    assert [p["sku"] for p in found["products"]] == ["TEE-WHT-M"]

    assert _data(client.get("/api/products/categories", headers=worker_headers)) == ["Apparel", "Ink"]

    lookup = _data(client.get("/api/products/lookup", params={"product_type": "raw_material"},
                              headers=worker_headers))
    assert [p["name"] for p in lookup] == ["Magenta ink"]


def test_low_stock_and_on_hand(client, worker_headers):
    ink = _product(client, worker_headers, sku="INK-YEL", name="Yellow ink",
                   product_type="raw_material", min_stock_level=10)
    _product(client, worker_headers, sku="INK-BLK", name="Black ink", product_type="raw_material")

    low = _data(client.get("/api/products/low-stock", headers=worker_headers))
    assert [p["sku"] for p in low] == ["INK-YEL"]

    _data(client.post("/api/inventory/receive", json={"product_id": ink["id"], "quantity": 12},
                      headers=worker_headers))

    assert _data(client.get("/api/products/low-stock", headers=worker_headers)) == []
    detail = _data(client.get(f"/api/products/{ink['id']}", headers=worker_headers))
    assert detail["quantity_on_hand"] == 12
    assert detail["active_bom_id"] == ""


def test_delete_blocked_by_stock(client, worker_headers, manager_headers):
    ink = _product(client, worker_headers, sku="INK-RED", name="Red ink", product_type="raw_material")
    _data(client.post("/api/inventory/receive", json={"product_id": ink["id"], "quantity": 1},
                      headers=worker_headers))

    assert client.delete(f"/api/products/{ink['id']}", headers=worker_headers).status_code == 403
    resp = client.delete(f"/api/products/{ink['id']}", headers=manager_headers)
    assert resp.status_code == 400

    empty = _product(client, worker_headers, sku="INK-NONE", name="Unused ink")
    assert client.delete(f"/api/products/{empty['id']}", headers=manager_headers).status_code == 200
    detail = _data(client.get(f"/api/products/{empty['id']}", headers=manager_headers))
    assert detail["is_active"] is False


def test_unknown_product(client, worker_headers):
    resp = client.get("/api/products/7f1b4c1e-0000-4000-8000-000000000000", headers=worker_headers)
    assert resp.status_code == 404
    assert resp.json()["status"] == "Failed"
