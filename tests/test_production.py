import pytest


def _data(resp):
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.fixture
def setup_line(client, manager_headers):
    """A finished good with an active BOM using one raw material and two activities."""
    shirt = _data(client.post("/api/products/", json={"sku": "TEE-1", "name": "Printed tee"},
                              headers=manager_headers))
    blank = _data(client.post("/api/products/", json={
        "sku": "BLANK-1", "name": "Blank tee", "product_type": "raw_material", "cost_per_unit": 3,
    }, headers=manager_headers))
    press = _data(client.post("/api/work-centers/", json={
        "code": "DTG1", "name": "DTG printer", "type": "printing", "capacity_per_hour": 20,
    }, headers=manager_headers))
    print_act = _data(client.post("/api/activities/", json={
        "code": "PRINT", "name": "Print", "activity_type": "production",
    }, headers=manager_headers))
    pack_act = _data(client.post("/api/activities/", json={
        "code": "PACK", "name": "Pack", "activity_type": "packaging",
    }, headers=manager_headers))

    bom = _data(client.post("/api/boms/", json={
        "product_id": shirt["id"],
        "materials": [{"material_product_id": blank["id"], "quantity_required": 1, "waste_percentage": 10}],
        "activities": [
            {"activity_id": print_act["id"], "work_center_id": press["id"], "sequence_number": 1,
             "setup_time_minutes": 15, "run_time_per_unit": 1.5},
            {"activity_id": pack_act["id"], "work_center_id": press["id"], "sequence_number": 2,
             "setup_time_minutes": 0, "run_time_per_unit": 0.5},
        ],
    }, headers=manager_headers))
    _data(client.post(f"/api/boms/{bom['id']}/submit", json={}, headers=manager_headers))
    _data(client.post(f"/api/boms/{bom['id']}/approve", json={"comments": "ok"}, headers=manager_headers))

    return {"shirt": shirt, "blank": blank, "press": press, "bom": bom,
            "print": print_act, "pack": pack_act}


def test_bom_versions_and_superseding(client, manager_headers, worker_headers, setup_line):
    shirt = setup_line["shirt"]
    first = _data(client.get(f"/api/boms/{setup_line['bom']['id']}", headers=worker_headers))
    assert first["status"] == "active"
    assert first["version_number"] == 1
    # 1 unit with 10% waste at 3.00
    assert first["material_cost"] == 3.3
    assert [h["action"] for h in first["history"]] == ["submitted", "approved"]

    second = _data(client.post("/api/boms/", json={"product_id": shirt["id"]}, headers=worker_headers))
    assert second["version_number"] == 2
    assert second["status"] == "draft"

    _data(client.post(f"/api/boms/{second['id']}/submit", json={}, headers=worker_headers))
    # workers cannot approve
    assert client.post(f"/api/boms/{second['id']}/approve", json={},
                       headers=worker_headers).status_code == 403
    _data(client.post(f"/api/boms/{second['id']}/approve", json={}, headers=manager_headers))

    versions = _data(client.get(f"/api/products/{shirt['id']}/boms", headers=worker_headers))
    assert [(b["version_number"], b["status"]) for b in versions] == [(2, "active"), (1, "obsolete")]
    assert versions[1]["obsolete_date"]


def test_bom_rejects_self_reference_and_locked_edits(client, manager_headers, setup_line):
    shirt = setup_line["shirt"]
    resp = client.post("/api/boms/", json={
        "product_id": shirt["id"],
        "materials": [{"material_product_id": shirt["id"], "quantity_required": 1}],
    }, headers=manager_headers)
    assert resp.status_code == 400

    active_id = setup_line["bom"]["id"]
    resp = client.post(f"/api/boms/{active_id}/materials", json={
        "material_product_id": setup_line["blank"]["id"], "quantity_required": 2,
    }, headers=manager_headers)
    assert resp.status_code == 400


def test_generate_routes_and_complete(client, manager_headers, worker_headers, setup_line):
    received = _data(client.post("/api/inventory/receive", json={
        "product_id": setup_line["blank"]["id"], "quantity": 50, "lot_number": "LOT-9",
    }, headers=worker_headers))

    job = _data(client.post("/api/jobs/", json={
        "job_name": "Team shirts", "product_id": setup_line["shirt"]["id"], "quantity": 20,
    }, headers=worker_headers))
    assert job["job_number"].startswith("JOB-")
    assert job["status"] == "created"

    job = _data(client.post(f"/api/jobs/{job['id']}/generate-routes", headers=worker_headers))
    assert job["status"] == "planned"
    routes = job["routes"]
    assert [r["sequence_number"] for r in routes] == [1, 2]
    assert routes[0]["estimated_complete"] == routes[1]["estimated_start"]

    again = client.post(f"/api/jobs/{job['id']}/generate-routes", headers=worker_headers)
    assert again.status_code == 400

    planned = _data(client.get(f"/api/jobs/{job['id']}/materials", headers=worker_headers))
    assert planned[0]["quantity_planned"] == 22

    started = _data(client.patch(f"/api/job-routes/{routes[0]['id']}/status",
                                 json={"status": "in_progress"}, headers=worker_headers))
    assert started["actual_start"]

    done = _data(client.post(f"/api/job-routes/{routes[0]['id']}/complete", json={
        "quantity_completed": 20,
        "quantity_scrapped": 1,
        "material_consumption": [{
            "material_product_id": setup_line["blank"]["id"],
            "quantity_consumed": 21,
            "inventory_id": received["inventory_id"],
        }],
    }, headers=worker_headers))
    assert done["status"] == "completed"

    job = _data(client.get(f"/api/jobs/{job['id']}", headers=worker_headers))
    assert job["status"] == "in_progress"
    assert job["progress_percentage"] == 50

    consumption = _data(client.get(f"/api/jobs/{job['id']}/materials", headers=worker_headers))
    assert consumption[0]["quantity_consumed"] == 21
    assert consumption[0]["lot_number"] == "LOT-9"

    movements = _data(client.get("/api/inventory/movements", params={"movement_type": "pick"},
                                 headers=worker_headers))["movements"]
    assert movements[0]["reference_type"] == "job"
    assert movements[0]["reference_id"] == job["job_number"]

    repeat = client.post(f"/api/job-routes/{routes[0]['id']}/complete",
                         json={"quantity_completed": 1}, headers=worker_headers)
    assert repeat.status_code == 400

    _data(client.post(f"/api/job-routes/{routes[1]['id']}/complete",
                      json={"quantity_completed": 20}, headers=worker_headers))
    job = _data(client.get(f"/api/jobs/{job['id']}", headers=worker_headers))
    assert job["status"] == "completed"
    assert job["progress_percentage"] == 100


def test_scan_resolves_job_number(client, worker_headers, setup_line):
    job = _data(client.post("/api/jobs/", json={
        "job_name": "Scan me", "product_id": setup_line["shirt"]["id"], "quantity": 5,
    }, headers=worker_headers))
    _data(client.post(f"/api/jobs/{job['id']}/generate-routes", headers=worker_headers))

    scanned = _data(client.get(f"/api/production/scan/{job['job_number'].lower()}", headers=worker_headers))
    assert scanned["job"]["id"] == job["id"]
    assert scanned["route"]["sequence_number"] == 1

    assert client.get("/api/production/scan/NOPE-1", headers=worker_headers).status_code == 404


def test_reschedule_keeps_duration(client, worker_headers, setup_line):
    job = _data(client.post("/api/jobs/", json={
        "job_name": "Reschedule", "product_id": setup_line["shirt"]["id"], "quantity": 10,
    }, headers=worker_headers))
    route = _data(client.post(f"/api/jobs/{job['id']}/generate-routes", headers=worker_headers))["routes"][0]

    moved = _data(client.post(f"/api/job-routes/{route['id']}/reschedule",
                              json={"estimated_start": "2030-01-07T08:00:00+00:00"}, headers=worker_headers))

    # 15 min setup + 1.5 min x 10 units
    assert moved["estimated_start"].startswith("2030-01-07T08:00:00")
    assert moved["estimated_complete"].startswith("2030-01-07T08:30:00")


def test_work_center_delete_rules(client, manager_headers, worker_headers, setup_line):
    press = setup_line["press"]
    job = _data(client.post("/api/jobs/", json={
        "job_name": "Busy", "product_id": setup_line["shirt"]["id"], "quantity": 1,
    }, headers=worker_headers))
    routes = _data(client.post(f"/api/jobs/{job['id']}/generate-routes", headers=worker_headers))["routes"]

    blocked = client.delete(f"/api/work-centers/{press['id']}", headers=manager_headers)
    assert blocked.status_code == 400
    assert blocked.json()["message"] == "Cannot delete work center with active jobs"

    for route in routes:
        _data(client.post(f"/api/job-routes/{route['id']}/complete",
                          json={"quantity_completed": 1}, headers=worker_headers))

    assert client.delete(f"/api/work-centers/{press['id']}", headers=manager_headers).status_code == 200
    # route history keeps the row, deactivated
    detail = _data(client.get(f"/api/work-centers/{press['id']}", headers=worker_headers))
    assert detail["work_center"]["is_active"] is False


def test_unused_work_center_is_removed(client, manager_headers):
    center = _data(client.post("/api/work-centers/", json={
        "code": "CUT1", "name": "Cutter", "type": "cutting",
    }, headers=manager_headers))

    assert client.delete(f"/api/work-centers/{center['id']}", headers=manager_headers).status_code == 200
    assert client.get(f"/api/work-centers/{center['id']}", headers=manager_headers).status_code == 404


def test_duplicate_work_center_code(client, manager_headers):
    payload = {"code": "EMB1", "name": "Embroidery", "type": "embroidery"}
    _data(client.post("/api/work-centers/", json=payload, headers=manager_headers))

    resp = client.post("/api/work-centers/", json=payload, headers=manager_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "A work center with this code already exists"


def test_issue_lifecycle(client, worker_headers, setup_line):
    bad = client.post("/api/production-issues/", json={
        "issue_type": "material_defect", "title": "Wrong product",
        "material_product_id": setup_line["shirt"]["id"],
    }, headers=worker_headers)
    assert bad.status_code == 400

    issue = _data(client.post("/api/production-issues/", json={
        "issue_type": "material_defect", "severity": "critical", "title": "Stained blanks",
        "material_product_id": setup_line["blank"]["id"],
    }, headers=worker_headers))
    assert issue["issue_number"] == "ISS-00001"
    assert issue["status"] == "open"

    resolved = _data(client.put("/api/production-issues/", json={
        "id": issue["id"], "status": "resolved", "resolution": "Replaced batch",
    }, headers=worker_headers))
    assert resolved["resolved_at"]

    overview = _data(client.get("/api/production-issues/overview", headers=worker_headers))
    assert overview["resolved"] == 1
    assert overview["critical_open"] == 0


def test_bom_steps_keep_work_center_and_activity(client, manager_headers, worker_headers, setup_line):
    press = setup_line["press"]
    print_act = setup_line["print"]

    assert client.delete(f"/api/work-centers/{press['id']}", headers=manager_headers).status_code == 200
    assert client.delete(f"/api/activities/{print_act['id']}", headers=manager_headers).status_code == 200

    # the approved BOM still points at both rows, so they are deactivated
    center = _data(client.get(f"/api/work-centers/{press['id']}", headers=worker_headers))
    assert center["work_center"]["is_active"] is False
    activity = _data(client.get(f"/api/activities/{print_act['id']}", headers=worker_headers))
    assert activity["is_active"] is False

    bom = _data(client.get(f"/api/boms/{setup_line['bom']['id']}", headers=worker_headers))
    assert len(bom["activities"]) == 2


def test_job_numbers_survive_deletes(client, manager_headers, worker_headers, setup_line):
    def _job(name):
        return _data(client.post("/api/jobs/", json={
            "job_name": name, "product_id": setup_line["shirt"]["id"], "quantity": 1,
        }, headers=worker_headers))

    first, second = _job("First"), _job("Second")
    prefix = first["job_number"][:-5]
    assert [first["job_number"], second["job_number"]] == [f"{prefix}00001", f"{prefix}00002"]

    _data(client.delete(f"/api/jobs/{first['id']}", headers=manager_headers))

    third = _job("Third")
    assert third["job_number"] == f"{prefix}00003"
