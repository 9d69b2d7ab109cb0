"""HTTP surface tests."""

from tests.conftest import ADMIN_EMAIL, PASSWORD, USER_EMAIL


def sign_in(client, email=USER_EMAIL, password=PASSWORD):
    response = client.post("/auth/sign-in", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["data"]["session"]["access_token"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "sessions": 0}


def test_health_counts_sessions(client):
    sign_in(client)
    assert client.get("/health").json()["sessions"] == 1


def test_sign_in_returns_envelope(client):
    response = client.post("/auth/sign-in", json={"email": ADMIN_EMAIL, "password": PASSWORD})
    body = response.json()
    assert body["error"] is None
    assert body["data"]["user"]["role"] == "admin"
    assert "status_code" not in body


def test_sign_in_bad_password(client):
    response = client.post("/auth/sign-in", json={"email": USER_EMAIL, "password": "wrong"})
    assert response.status_code == 400
    assert response.json()["error"] == {"message": "Invalid login credentials", "code": "InvalidCredentials"}


def test_sign_up_then_select(client):
    response = client.post("/auth/sign-up", json={"email": "nueva@example.com", "password": "secreto"})
    assert response.status_code == 200
    token = response.json()["data"]["session"]["access_token"]

    response = client.post("/rpc", json={"operation": "select", "table": "denuncias"}, headers=auth(token))
    assert len(response.json()["data"]) == 2


def test_sign_up_existing_email(client):
    response = client.post("/auth/sign-up", json={"email": USER_EMAIL, "password": "x"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "AlreadyRegistered"


def test_rpc_requires_bearer_token(client):
    response = client.post("/rpc", json={"operation": "select", "table": "denuncias"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NotAuthenticated"


def test_rpc_select(client):
    token = sign_in(client)
    response = client.post(
        "/rpc",
        json={
            "operation": "select",
            "table": "comentarios",
            "columns": "*, users(name)",
            "filters": [{"type": "eq", "column": "denuncia_id", "value": "denuncia-2"}],
        },
        headers=auth(token),
    )
    assert response.status_code == 200
    [comentario] = response.json()["data"]
    assert comentario["users"] == {"name": "Usuario Uno"}


def test_rpc_forbidden(client):
    token = sign_in(client)
    response = client.post(
        "/rpc",
        json={"operation": "delete", "table": "denuncias", "filters": [{"type": "eq", "column": "id", "value": "denuncia-2"}]},
        headers=auth(token),
    )
    assert response.status_code == 403
    assert response.json()["data"] is None


def test_rpc_single_not_found_is_reported_in_body(client):
    token = sign_in(client)
    response = client.post(
        "/rpc",
        json={
            "operation": "select",
            "table": "denuncias",
            "filters": [{"type": "eq", "column": "id", "value": "missing"}],
            "single": True,
        },
        headers=auth(token),
    )
    assert response.status_code == 200
    assert response.json()["error"]["code"] == "NotFound"


def test_rpc_bad_requests(client):
    token = sign_in(client)
    unknown = client.post("/rpc", json={"operation": "truncate", "table": "likes"}, headers=auth(token))
    assert unknown.status_code == 400
    assert unknown.json()["error"]["code"] == "UnknownOperation"

    invalid = client.post(
        "/rpc",
        json={"operation": "select", "table": "likes", "filters": [{"type": "like", "column": "id", "value": "%"}]},
        headers=auth(token),
    )
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "InvalidRequest"


def test_sign_out_invalidates_token(client):
    token = sign_in(client)
    response = client.post("/auth/sign-out", headers=auth(token))
    assert response.status_code == 200
    response = client.post("/rpc", json={"operation": "select", "table": "likes"}, headers=auth(token))
    assert response.status_code == 401


def test_sign_out_without_session(client):
    response = client.post("/auth/sign-out")
    assert response.status_code == 200
    assert response.json()["error"] is None


def test_reset_restores_seed(client):
    token = sign_in(client)
    client.post(
        "/rpc",
        json={"operation": "delete", "table": "denuncias", "filters": [{"type": "eq", "column": "id", "value": "denuncia-1"}]},
        headers=auth(token),
    )
    response = client.post("/testing/reset")
    assert response.json()["data"] == {"ok": True}

    token = sign_in(client)
    response = client.post("/rpc", json={"operation": "select", "table": "denuncias"}, headers=auth(token))
    assert [d["id"] for d in response.json()["data"]] == ["denuncia-1", "denuncia-2"]
