"""HTTP tests for /api/ToDoItems."""

import jwt
import pytest

from conftest import register_and_login


@pytest.fixture
def headers(client):
    auth_headers, _ = register_and_login(client)
    return auth_headers


def _create(client, headers, title="Buy milk", description="2%"):
    return client.post("/api/ToDoItems", json={"title": title, "description": description}, headers=headers)


def test_end_to_end_item_lifecycle(client):
    headers, _ = register_and_login(client)

    created = _create(client, headers)
    assert created.status_code == 201
    item = created.get_json()
    assert created.headers["Location"].endswith(f"/api/ToDoItems/{item['id']}")

    listed = client.get("/api/ToDoItems?page=1&limit=10", headers=headers)
    assert listed.status_code == 200
    body = listed.get_json()
    assert body["total"] == 1
    assert body["page"] == 1
    assert body["limit"] == 10
    assert [i["title"] for i in body["data"]] == ["Buy milk"]

    updated = client.put(
        f"/api/ToDoItems/{item['id']}",
        json={"title": "Buy oat milk", "description": "2%"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.get_json()["title"] == "Buy oat milk"

    fetched = client.get(f"/api/ToDoItems/{item['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.get_json()["title"] == "Buy oat milk"

    deleted = client.delete(f"/api/ToDoItems/{item['id']}", headers=headers)
    assert deleted.status_code == 204

    assert client.get(f"/api/ToDoItems/{item['id']}", headers=headers).status_code == 404


def test_list_defaults_and_query_params(client, headers):
    for title in ["cherry", "apple", "banana"]:
        _create(client, headers, title=title, description="fruit")

    body = client.get("/api/ToDoItems", headers=headers).get_json()
    assert (body["page"], body["limit"], body["total"]) == (1, 10, 3)

    body = client.get("/api/ToDoItems?sortBy=Title&limit=2", headers=headers).get_json()
    assert [i["title"] for i in body["data"]] == ["apple", "banana"]
    assert body["total"] == 3

    body = client.get("/api/ToDoItems?filter=ERR", headers=headers).get_json()
    assert [i["title"] for i in body["data"]] == ["cherry"]


def test_list_with_oversized_numeric_filter(client, headers):
    _create(client, headers, title="Invoice 99999999999999999999999", description="paid")
    _create(client, headers, title="Buy milk", description="2%")

    resp = client.get("/api/ToDoItems?filter=99999999999999999999999", headers=headers)

    assert resp.status_code == 200
    assert [i["title"] for i in resp.get_json()["data"]] == ["Invoice 99999999999999999999999"]


@pytest.mark.parametrize("query", ["page=0", "limit=0", "page=abc", "sortBy=bogus"])
def test_list_bad_query(client, headers, query):
    resp = client.get(f"/api/ToDoItems?{query}", headers=headers)
    assert resp.status_code == 400


def test_create_validation(client, headers):
    resp = _create(client, headers, title="x" * 101, description="")
    assert resp.status_code == 400
    assert {"title", "description"} <= set(resp.get_json()["details"])

    resp = client.post("/api/ToDoItems", json={}, headers=headers)
    assert resp.status_code == 400


def test_update_validation_and_missing(client, headers):
    item = _create(client, headers).get_json()

    bad = client.put(f"/api/ToDoItems/{item['id']}", json={"title": "   ", "description": "ok"}, headers=headers)
    assert bad.status_code == 400

    missing = client.put("/api/ToDoItems/404", json={"title": "t", "description": "d"}, headers=headers)
    assert missing.status_code == 404


def test_delete_missing(client, headers):
    assert client.delete("/api/ToDoItems/404", headers=headers).status_code == 404


def test_items_of_other_users_are_hidden(client, headers):
    item = _create(client, headers).get_json()
    other_headers, _ = register_and_login(client, email="bo@example.com", name="Bo")

    assert client.get(f"/api/ToDoItems/{item['id']}", headers=other_headers).status_code == 404
    assert client.put(
        f"/api/ToDoItems/{item['id']}", json={"title": "mine", "description": "now"}, headers=other_headers
    ).status_code == 404
    assert client.delete(f"/api/ToDoItems/{item['id']}", headers=other_headers).status_code == 404
    assert client.get("/api/ToDoItems", headers=other_headers).get_json()["total"] == 0

    # still intact for the owner
    assert client.get(f"/api/ToDoItems/{item['id']}", headers=headers).get_json()["title"] == "Buy milk"


def test_requires_bearer_token(client):
    assert client.get("/api/ToDoItems").status_code == 401
    resp = client.get("/api/ToDoItems", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid token"


def test_token_without_identity_claim_is_rejected(app, client):
    token = jwt.encode(
        {"name": "Ana", "iss": app.config["JWT_ISSUER"], "aud": app.config["JWT_AUDIENCE"], "exp": 4102444800},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    resp = client.get("/api/ToDoItems", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_refreshed_access_token_works(client):
    _, refresh_token = register_and_login(client)
    access_token = client.post("/refresh-token", json={"refreshToken": refresh_token}).get_json()["accessToken"]

    resp = client.get("/api/ToDoItems", headers={"Authorization": f"Bearer {access_token}"})
    assert resp.status_code == 200
