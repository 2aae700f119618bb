import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.main import app
from app.modules.session.registry import SessionRegistry, get_session_registry
from tests.fakes import FakeBackend

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch):
    monkeypatch.setattr(settings, "role_retry_base_delay_seconds", 0)
    monkeypatch.setattr(settings, "author_retry_base_delay_seconds", 0)
    monkeypatch.setattr(settings, "onboarding_completion_rule", "exact")
    monkeypatch.setattr(settings, "aws_access_key_id", None)
    monkeypatch.setattr(settings, "s3_bucket_name", None)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def registry(backend):
    return SessionRegistry(client_factory=backend.client)


@pytest.fixture
def client(registry):
    app.dependency_overrides[get_session_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def sign_in(client, email, password=PASSWORD):
    resp = client.post("/api/v1/auth/signin", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def reader(backend, client):
    user = backend.create_user("reader@example.com", PASSWORD, metadata={"first_name": "Rita", "last_name": "Reads"}, role="reader")
    body = sign_in(client, user.email)
    return user, auth_headers(body["session_token"])


@pytest.fixture
def publisher(backend, client):
    user = backend.create_user("pub@example.com", PASSWORD, metadata={"first_name": "Pat", "last_name": "Lisher"}, role="publisher")
    body = sign_in(client, user.email)
    return user, auth_headers(body["session_token"])


@pytest.fixture
def author(backend):
    return backend.insert("authors", name="Ada Writer", avatar_url=None)
