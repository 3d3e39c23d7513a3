import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from config import Settings
from database import build_engine
from main import create_app

TEST_DATABASE_URL = "sqlite:///:memory:"

# In-memory SQLite with a single shared connection (StaticPool, see
# build_engine) so every request session sees the same data.
test_engine = build_engine(TEST_DATABASE_URL)

test_settings = Settings(
    jwt_secret="test-secret",
    database_url=TEST_DATABASE_URL,
    bcrypt_rounds=4,
)


@pytest.fixture(name="settings")
def settings_fixture():
    return test_settings


@pytest.fixture(name="client")
def client_fixture():
    """Provide a test client backed by a fresh in-memory database

    Tables are created by the app's startup hook and dropped after each test.
    """
    app = create_app(test_settings, engine=test_engine)

    with TestClient(app) as client:
        yield client

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="signup")
def signup_fixture(client: TestClient):
    """Register a user and return the signup response body"""

    def _signup(name="Ann", email="ann@x.com", password="secret1"):
        response = client.post(
            "/auth/signup",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _signup


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(signup):
    """Return Authorization headers for a freshly registered user"""

    def _headers(email="ann@x.com", name="Ann"):
        token = signup(name=name, email=email)["token"]
        return {"Authorization": f"Bearer {token}"}

    return _headers
