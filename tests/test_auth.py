def test_login_returns_token_pair(auth_client, create_user):
    create_user("manager", email="jo@racktrack.com", password="secret-pass")

    resp = auth_client.post("/api/auth/login",
                            json={"email": "JO@racktrack.com", "password": "secret-pass"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "Success"
    data = body["data"]
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["user"]["role"] == "manager"


def test_login_rejects_wrong_password(auth_client, create_user):
    create_user("worker", email="w@racktrack.com", password="right-password")

    resp = auth_client.post("/api/auth/login",
                            json={"email": "w@racktrack.com", "password": "wrong-password"})

    assert resp.status_code == 401
    assert resp.json()["status_code"] == "300"


def test_login_rejects_inactive_user(auth_client, create_user):
    create_user("worker", email="off@racktrack.com", password="password123", status="inactive")

    resp = auth_client.post("/api/auth/login",
                            json={"email": "off@racktrack.com", "password": "password123"})

    assert resp.status_code == 403
    assert resp.json()["status_code"] == "302"


def test_refresh_rotates_token(auth_client, create_user):
    create_user("worker", email="r@racktrack.com", password="password123")
    login = auth_client.post("/api/auth/login",
                             json={"email": "r@racktrack.com", "password": "password123"}).json()["data"]

    first = auth_client.post("/api/auth/refresh", params={"refresh_token": login["refresh_token"]})
    assert first.status_code == 200
    assert first.json()["data"]["refresh_token"] != login["refresh_token"]

    # the old token was revoked by the rotation
    again = auth_client.post("/api/auth/refresh", params={"refresh_token": login["refresh_token"]})
    assert again.status_code == 401


def test_me_requires_token(auth_client):
    resp = auth_client.get("/api/auth/me")
    assert resp.status_code in (401, 403)


def test_logged_out_session_is_rejected(auth_client, client, create_user):
    create_user("worker", email="lo@racktrack.com", password="password123")
    login = auth_client.post("/api/auth/login",
                             json={"email": "lo@racktrack.com", "password": "password123"}).json()["data"]
    headers = {"Authorization": f"Bearer {login['access_token']}"}

    assert client.get("/api/warehouses/all", headers=headers).status_code == 200

    resp = auth_client.post("/api/auth/logout",
                            params={"refresh_token_str": login["refresh_token"]}, headers=headers)
    assert resp.status_code == 200

    assert client.get("/api/warehouses/all", headers=headers).status_code == 401


def test_user_admin_is_admin_only(auth_client, admin_headers, worker_headers):
    assert auth_client.get("/api/users/all", headers=worker_headers).status_code == 403

    resp = auth_client.get("/api/users/all", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["total"] >= 1


def test_role_guards_on_writes(client, worker_headers, viewer_headers, manager_headers):
    warehouse = {"name": "Main", "code": "WH1"}
    assert client.post("/api/warehouses/", json=warehouse, headers=worker_headers).status_code == 403
    assert client.post("/api/warehouses/", json=warehouse, headers=manager_headers).status_code == 200

    product = {"sku": "TS-1", "name": "T-shirt"}
    assert client.post("/api/products/", json=product, headers=viewer_headers).status_code == 403
    assert client.post("/api/products/", json=product, headers=worker_headers).status_code == 200

    # viewers can still read
    assert client.get("/api/products/all", headers=viewer_headers).status_code == 200
