"""
Auth and user management API tests — login, /me, admin-only user CRUD.
"""


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_login_returns_token_and_user(client, auth_headers):
    resp = client.post("/api/auth/login", json={"username": "seller", "password": "sellerpass123"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["username"] == "seller"
    assert data["user"]["is_admin"] is False
    assert "password_hash" not in data["user"]


def test_login_with_wrong_password(client, auth_headers):
    resp = client.post("/api/auth/login", json={"username": "seller", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user(client):
    resp = client.post("/api/auth/login", json={"username": "ghost", "password": "whatever"})
    assert resp.status_code == 401


def test_me(client, auth_headers):
    resp = client.get("/api/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["username"] == "seller"


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401


def test_me_rejects_garbage_token(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


# ============================================================
# User management (admin only)
# ============================================================

def test_admin_lists_users(client, admin_headers, auth_headers):
    resp = client.get("/api/users/", headers=admin_headers)
    assert resp.status_code == 200
    assert [u["username"] for u in resp.json()] == ["admin", "seller"]


def test_regular_user_cannot_manage_users(client, auth_headers):
    assert client.get("/api/users/", headers=auth_headers).status_code == 403
    resp = client.post("/api/users/", json={"username": "x", "password": "y"}, headers=auth_headers)
    assert resp.status_code == 403


def test_admin_creates_user_who_can_log_in(client, admin_headers):
    resp = client.post("/api/users/", json={"username": "newbie", "password": "newbiepass1"},
                       headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["is_admin"] is False

    login = client.post("/api/auth/login", json={"username": "newbie", "password": "newbiepass1"})
    assert login.status_code == 200


def test_duplicate_username_is_rejected(client, admin_headers, auth_headers):
    resp = client.post("/api/users/", json={"username": "seller", "password": "abc12345"},
                       headers=admin_headers)
    assert resp.status_code == 409


def test_admin_updates_password_and_role(client, admin_headers, auth_headers):
    me = client.get("/api/auth/me", headers=auth_headers).json()
    resp = client.put(f"/api/users/{me['id']}", json={"password": "changed123", "is_admin": True},
                      headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["is_admin"] is True

    old = client.post("/api/auth/login", json={"username": "seller", "password": "sellerpass123"})
    assert old.status_code == 401
    new = client.post("/api/auth/login", json={"username": "seller", "password": "changed123"})
    assert new.status_code == 200


def test_update_missing_user(client, admin_headers):
    resp = client.put("/api/users/9999", json={"username": "x"}, headers=admin_headers)
    assert resp.status_code == 404


def test_admin_deletes_user(client, admin_headers, auth_headers):
    me = client.get("/api/auth/me", headers=auth_headers).json()
    resp = client.delete(f"/api/users/{me['id']}", headers=admin_headers)
    assert resp.status_code == 200
    # Token of a deleted user no longer resolves
    assert client.get("/api/auth/me", headers=auth_headers).status_code == 401


def test_admin_cannot_delete_self(client, admin_headers):
    me = client.get("/api/auth/me", headers=admin_headers).json()
    resp = client.delete(f"/api/users/{me['id']}", headers=admin_headers)
    assert resp.status_code == 400
