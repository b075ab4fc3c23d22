import pytest


@pytest.fixture
def slots(client, manager_headers):
    warehouse_id = client.post("/api/warehouses/", json={"name": "Main", "code": "WH1"},
                               headers=manager_headers).json()["data"]["id"]
    client.post("/api/locations/bulk-create", json={
        "warehouse_id": warehouse_id, "aisle_end": 1, "shelves_per_aisle": 1, "slots_per_shelf": 3,
    }, headers=manager_headers)
    return client.get("/api/locations/slots", headers=manager_headers).json()["data"]


@pytest.fixture
def product(client, worker_headers):
    resp = client.post("/api/products/", json={
        "sku": "INK-BLK", "name": "Black ink", "product_type": "raw_material",
        "cost_per_unit": 2.5, "min_stock_level": 100,
    }, headers=worker_headers)
    return resp.json()["data"]


def _receive(client, headers, product_id, quantity, **extra):
    resp = client.post("/api/inventory/receive",
                       json={"product_id": product_id, "quantity": quantity, **extra}, headers=headers)
    assert resp.status_code == 200
    return resp.json()["data"]


def test_receive_creates_pallet_and_movement(client, worker_headers, slots, product):
    received = _receive(client, worker_headers, product["id"], 40,
                        location_id=slots[0]["id"], unit_cost=2.5, lot_number="L-1")

    assert received["pallet_number"].startswith("PLT-")

    pallet = client.get(f"/api/pallets/{received['pallet_id']}", headers=worker_headers).json()["data"]
    assert pallet["status"] == "stored"
    assert pallet["location_code"] == "WH1-A01-S01-01"
    assert pallet["contents"][0]["quantity"] == 40

    movements = client.get("/api/inventory/movements", params={"pallet_id": received["pallet_id"]},
                           headers=worker_headers).json()["data"]["movements"]
    assert [m["movement_type"] for m in movements] == ["receive"]
    assert movements[0]["reason"] == "Initial receipt"

    detail = client.get(f"/api/products/{product['id']}", headers=worker_headers).json()["data"]
    assert detail["quantity_on_hand"] == 40


def test_receive_without_location_leaves_pallet_receiving(client, worker_headers, product):
    received = _receive(client, worker_headers, product["id"], 5)

    pallet = client.get(f"/api/pallets/{received['pallet_id']}", headers=worker_headers).json()["data"]
    assert pallet["status"] == "receiving"
    assert pallet["current_location_id"] == ""


def test_move_pallet_frees_old_slot(client, worker_headers, slots, product):
    received = _receive(client, worker_headers, product["id"], 10, location_id=slots[0]["id"])

    resp = client.post(f"/api/pallets/{received['pallet_id']}/move",
                       json={"to_location_id": slots[1]["id"], "notes": "rebalance"},
                       headers=worker_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["previous_location_id"] == slots[0]["id"]
    current = {s["id"]: s for s in client.get("/api/locations/slots", headers=worker_headers).json()["data"]}
    assert current[slots[0]["id"]]["is_occupied"] is False
    assert current[slots[1]["id"]]["is_occupied"] is True

    history = client.get(f"/api/pallets/{received['pallet_id']}/history", headers=worker_headers).json()["data"]
    move = next(m for m in history if m["movement_type"] == "move")
    assert move["quantity_change"] == 0
    assert move["reason"] == "Manual pallet movement"


def test_move_to_occupied_slot_is_rejected(client, worker_headers, slots, product):
    first = _receive(client, worker_headers, product["id"], 1, location_id=slots[0]["id"])
    _receive(client, worker_headers, product["id"], 1, location_id=slots[1]["id"])

    resp = client.post(f"/api/pallets/{first['pallet_id']}/move",
                       json={"to_location_id": slots[1]["id"]}, headers=worker_headers)

    assert resp.status_code == 400


def test_adjust_and_pick(client, worker_headers, product):
    received = _receive(client, worker_headers, product["id"], 20)
    inventory_id = received["inventory_id"]

    too_much = client.post(f"/api/inventory/{inventory_id}/adjust",
                           json={"quantity_change": -25, "reason": "count"}, headers=worker_headers)
    assert too_much.status_code == 400

    adjusted = client.post(f"/api/inventory/{inventory_id}/adjust",
                           json={"quantity_change": -5, "reason": "damaged"}, headers=worker_headers)
    assert adjusted.json()["data"]["quantity"] == 15

    picked = client.post("/api/inventory/pick", json={
        "inventory_id": inventory_id, "quantity": 10, "reference_type": "order", "reference_id": "SO-1",
    }, headers=worker_headers)
    assert picked.json()["data"]["available_quantity"] == 5

    over_pick = client.post("/api/inventory/pick", json={"inventory_id": inventory_id, "quantity": 6},
                            headers=worker_headers)
    assert over_pick.status_code == 400


def test_ship_pallet_empties_contents(client, worker_headers, slots, product):
    received = _receive(client, worker_headers, product["id"], 8, location_id=slots[2]["id"])

    resp = client.post(f"/api/pallets/{received['pallet_id']}/ship", json={}, headers=worker_headers)

    assert resp.status_code == 200
    pallet = resp.json()["data"]
    assert pallet["status"] == "shipped"
    assert pallet["contents"] == []
    slot = next(s for s in client.get("/api/locations/slots", headers=worker_headers).json()["data"]
                if s["id"] == slots[2]["id"])
    assert slot["is_occupied"] is False

    again = client.post(f"/api/pallets/{received['pallet_id']}/move",
                        json={"to_location_id": slots[0]["id"]}, headers=worker_headers)
    assert again.status_code == 400


def test_inventory_overview_counts_low_stock(client, worker_headers, product):
    _receive(client, worker_headers, product["id"], 30, unit_cost=2)

    overview = client.get("/api/inventory/overview", headers=worker_headers).json()["data"]

    assert overview["total_skus"] == 1
    assert overview["total_units"] == 30
    assert overview["total_value"] == 60
    assert overview["low_stock_count"] == 1
    assert overview["pallets_by_status"] == {"receiving": 1}
