def _warehouse(client, headers, code="WH1"):
    resp = client.post("/api/warehouses/", json={"name": f"Warehouse {code}", "code": code}, headers=headers)
    assert resp.status_code == 200
    return resp.json()["data"]["id"]


def _bulk(client, headers, warehouse_id, **overrides):
    payload = {
        "warehouse_id": warehouse_id,
        "aisle_prefix": "A",
        "aisle_start": 1,
        "aisle_end": 2,
        "shelves_per_aisle": 2,
        "slots_per_shelf": 3,
        "shelf_weight_capacity_kg": 1000,
        **overrides,
    }
    return client.post("/api/locations/bulk-create", json=payload, headers=headers)


def test_bulk_create_builds_full_hierarchy(client, manager_headers):
    warehouse_id = _warehouse(client, manager_headers)

    resp = _bulk(client, manager_headers, warehouse_id)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["aisles"] == 2
    assert data["shelves"] == 4
    assert data["slots"] == 12
    assert data["created"] is True
    assert data["preview"][0]["label"] == "WH1-A01-S01-01"

    slots = client.get("/api/locations/slots", headers=manager_headers).json()["data"]
    assert len(slots) == 12
    # shelf capacity is split evenly across its slots
    assert slots[0]["weight_capacity_kg"] == 333


def test_bulk_create_preview_writes_nothing(client, manager_headers):
    warehouse_id = _warehouse(client, manager_headers)

    resp = _bulk(client, manager_headers, warehouse_id, preview_only=True)

    assert resp.status_code == 200
    assert resp.json()["data"]["created"] is False
    assert len(resp.json()["data"]["preview"]) == 12
    assert client.get("/api/locations/aisles", headers=manager_headers).json()["data"] == []


def test_bulk_create_skips_existing_aisles(client, manager_headers):
    warehouse_id = _warehouse(client, manager_headers)
    _bulk(client, manager_headers, warehouse_id, aisle_end=1)

    resp = _bulk(client, manager_headers, warehouse_id, aisle_end=3)

    data = resp.json()["data"]
    assert data["skipped"] == ["A01"]
    assert data["aisles"] == 2


def test_bulk_create_rejects_reversed_range(client, manager_headers):
    warehouse_id = _warehouse(client, manager_headers)

    resp = _bulk(client, manager_headers, warehouse_id, aisle_start=5, aisle_end=2)

    assert resp.status_code == 400
    assert resp.json()["message"] == "aisle_end must be greater than or equal to aisle_start"


def test_bulk_create_caps_slot_count(client, manager_headers):
    warehouse_id = _warehouse(client, manager_headers)

    resp = _bulk(client, manager_headers, warehouse_id, aisle_end=60, shelves_per_aisle=10, slots_per_shelf=20)

    assert resp.status_code == 400
    assert client.get("/api/locations/aisles", headers=manager_headers).json()["data"] == []


def test_bulk_create_requires_manager(client, manager_headers, worker_headers):
    warehouse_id = _warehouse(client, manager_headers)
    assert _bulk(client, worker_headers, warehouse_id).status_code == 403


def test_duplicate_aisle_code_is_rejected(client, manager_headers):
    warehouse_id = _warehouse(client, manager_headers)
    aisle = {"warehouse_id": warehouse_id, "code": "b1"}

    first = client.post("/api/locations/aisles", json=aisle, headers=manager_headers)
    assert first.status_code == 200
    assert first.json()["data"]["code"] == "B1"
    assert first.json()["data"]["name"] == "Aisle B1"

    second = client.post("/api/locations/aisles", json=aisle, headers=manager_headers)
    assert second.status_code == 400


def test_warehouse_stats_and_search(client, manager_headers, worker_headers):
    warehouse_id = _warehouse(client, manager_headers)
    _bulk(client, manager_headers, warehouse_id, aisle_end=1, zone="bulk", hazmat_approved=True)

    slot = client.get("/api/locations/search", params={"code": "WH1-A01-S02-03"},
                      headers=worker_headers).json()["data"][0]
    assert slot["label"] == "WH1-A01-S02-03"
    assert slot["is_occupied"] is False

    client.post("/api/pallets/", json={"location_id": slot["id"]}, headers=worker_headers)

    stats = client.get(f"/api/warehouses/{warehouse_id}/stats", headers=worker_headers).json()["data"]
    assert stats["total_aisles"] == 1
    assert stats["total_shelves"] == 2
    assert stats["total_slots"] == 6
    assert stats["occupied_slots"] == 1
    assert stats["available_slots"] == 5
    assert stats["occupancy_rate"] == 17
    assert stats["hazmat_approved"] == 6
    assert stats["zones"] == [{"zone": "bulk", "total": 6, "occupied": 1}]
    assert stats["aisles"][0]["occupied_slots"] == 1


def test_occupied_locations_block_delete(client, manager_headers, worker_headers):
    warehouse_id = _warehouse(client, manager_headers)
    _bulk(client, manager_headers, warehouse_id, aisle_end=1)
    aisle = client.get("/api/locations/aisles", headers=worker_headers).json()["data"][0]
    slot = client.get("/api/locations/slots", headers=worker_headers).json()["data"][0]
    client.post("/api/pallets/", json={"location_id": slot["id"]}, headers=worker_headers)

    assert client.delete(f"/api/locations/aisles/{aisle['id']}", headers=manager_headers).status_code == 400
    assert client.delete(f"/api/warehouses/{warehouse_id}", headers=manager_headers).status_code == 400


def test_search_matches_labels_in_the_database(client, manager_headers, worker_headers):
    warehouse_id = _warehouse(client, manager_headers)
    _bulk(client, manager_headers, warehouse_id, aisle_end=3)

    found = client.get("/api/locations/search", params={"code": "s02-03"},
                       headers=worker_headers).json()["data"]
    assert [s["label"] for s in found] == ["WH1-A01-S02-03", "WH1-A02-S02-03", "WH1-A03-S02-03"]

    limited = client.get("/api/locations/search", params={"code": "S02-03", "limit": 2},
                         headers=worker_headers).json()["data"]
    assert [s["label"] for s in limited] == ["WH1-A01-S02-03", "WH1-A02-S02-03"]

    by_code = client.get("/api/locations/search", params={"code": "A03S0101"},
                         headers=worker_headers).json()["data"]
    assert [s["code"] for s in by_code] == ["A03S0101"]


def test_locations_overview_counts(client, manager_headers, worker_headers):
    empty = client.get("/api/locations/overview", headers=worker_headers).json()["data"]
    assert empty["slots"] == 0
    assert empty["occupancy_rate"] == 0

    first = _warehouse(client, manager_headers)
    _warehouse(client, manager_headers, code="WH2")
    _bulk(client, manager_headers, first)
    slot = client.get("/api/locations/slots", headers=worker_headers).json()["data"][0]
    client.post("/api/pallets/", json={"location_id": slot["id"]}, headers=worker_headers)

    overview = client.get("/api/locations/overview", headers=worker_headers).json()["data"]
    assert overview["warehouses"] == 2
    assert overview["aisles"] == 2
    assert overview["shelves"] == 4
    assert overview["slots"] == 12
    assert overview["occupied_slots"] == 1
    assert overview["available_slots"] == 11
    assert overview["occupancy_rate"] == 8
