"""Test environment: in-memory SQLite, fresh schema per test, TestClient factory."""

import os
import tempfile

# Must be set before anything from app is imported (settings are read once).
os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "15"
os.environ["REFRESH_TOKEN_EXPIRE_DAYS"] = "7"
os.environ["CORS_ORIGINS"] = ""
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="receitario-uploads-")

import pytest
from fastapi.testclient import TestClient

from app.core.database import SessionLocal, engine
from app.main import app
from app.models import Base, Role
from app.services import users


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_client():
    """Factory for independent clients (each has its own cookie jar)."""
    clients: list[TestClient] = []

    def _make() -> TestClient:
        c = TestClient(app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def create_admin(db):
    """Insert an admin straight into the credential store; return its email and password."""

    def _create(email: str = "admin@example.com", password: str = "admin-pass") -> tuple[str, str]:
        users.create_user(db, name="Admin", email=email, password=password, role=Role.ADMIN)
        return email, password

    return _create


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user():
    def _register(client: TestClient, name: str, email: str, password: str = "secret1"):
        return client.post(
            "/api/usuarios/register",
            json={"name": name, "email": email, "password": password},
        )

    return _register


@pytest.fixture
def login_user():
    def _login(client: TestClient, email: str, password: str):
        return client.post("/api/usuarios/login", json={"email": email, "password": password})

    return _login


@pytest.fixture
def headers_for(make_client, register_user):
    """Register a fresh standard user on its own client; return its Authorization headers."""

    def _headers(email: str, name: str = "Cook") -> dict[str, str]:
        resp = register_user(make_client(), name, email)
        assert resp.status_code == 201, resp.text
        return auth_headers(resp.json()["access_token"])

    return _headers


@pytest.fixture
def admin_headers(make_client, create_admin, login_user):
    email, password = create_admin()
    resp = login_user(make_client(), email, password)
    assert resp.status_code == 200, resp.text
    return auth_headers(resp.json()["access_token"])
