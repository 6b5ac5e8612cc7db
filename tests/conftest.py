"""Shared pytest fixtures for the To-Do List API tests."""

from datetime import datetime, timedelta

import pytest

from api import create_app
from models import storage
from services.auth_service import AuthService
from services.todo_service import ToDoItemService


class FakeClock:
    """Deterministic stand-in for the UTC clock used by AuthService."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def app():
    """Fresh application with an empty in-memory database per test."""
    app = create_app("test")
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 10, 14, 12, 0, 0))


@pytest.fixture
def token_issuer(app):
    return app.extensions["token_issuer"]


@pytest.fixture
def auth_service(app, token_issuer, clock):
    return AuthService(storage, token_issuer, refresh_token_lifetime=timedelta(days=30), clock=clock)


@pytest.fixture
def item_service(app):
    return ToDoItemService(storage)


@pytest.fixture
def user(auth_service):
    """A registered user: returns its id."""
    from models.user import User

    auth_service.register("Ana", "ana@example.com", "s3cret-pass")
    return storage.get_session().query(User).filter(User.email == "ana@example.com").one().id


def register_and_login(client, email="ana@example.com", password="s3cret-pass", name="Ana"):
    """Register through the API and return (auth headers, refresh token)."""
    resp = client.post("/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201
    resp = client.post("/login", json={"email": email, "passwordHash": password})
    assert resp.status_code == 200
    body = resp.get_json()
    return {"Authorization": f"Bearer {body['accessToken']}"}, body["refreshToken"]
