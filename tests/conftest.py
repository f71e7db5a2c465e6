import pytest
from fastapi.testclient import TestClient

from uniforms.backend import BackendClient
from uniforms.config import Settings
from uniforms.identity import InMemoryAuthProvider
from uniforms.main import create_api
from uniforms.store import InMemoryDocumentStore

OWNER_EMAIL = "owner@example.com"
OWNER_PASSWORD = "secret123"
SHARE_LINK_BASE = "https://forms.example.com/view-responses"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        use_in_memory_backend=True,
        share_link_base=SHARE_LINK_BASE,
        subscription_poll_seconds=0.01,
    )


@pytest.fixture
def backend(settings):
    """In-memory backend shared by services and the API under test."""
    return BackendClient(
        store=InMemoryDocumentStore(poll_seconds=0.01),
        auth=InMemoryAuthProvider(),
        settings=settings,
        kind="memory",
    )


@pytest.fixture
def owner(backend):
    return backend.auth.sign_up(OWNER_EMAIL, OWNER_PASSWORD)


@pytest.fixture
def auth_headers(owner):
    return {"Authorization": f"Bearer {owner.id_token}"}


@pytest.fixture
def api_client(backend):
    """FastAPI TestClient for router tests."""
    return TestClient(create_api(backend))
