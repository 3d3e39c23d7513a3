from fastapi.testclient import TestClient

from utils.jwt import verify_jwt


def test_signup_returns_token_and_user(client: TestClient, settings):
    """Test that signup returns a token bound to the new user's id and email"""
    response = client.post(
        "/auth/signup",
        json={"name": "  Ann ", "email": " Ann@X.com ", "password": "secret1"},
    )

    assert response.status_code == 201
    data = response.json()
    assert set(data["user"]) == {"id", "name", "email"}
    assert data["user"]["name"] == "Ann"
    assert data["user"]["email"] == "ann@x.com"

    payload = verify_jwt(data["token"], settings)
    assert payload["sub"] == data["user"]["id"]
    assert payload["email"] == "ann@x.com"


def test_signup_requires_all_fields(client: TestClient):
    for body in (
        {"email": "ann@x.com", "password": "secret1"},
        {"name": "Ann", "password": "secret1"},
        {"name": "Ann", "email": "ann@x.com"},
        {"name": "   ", "email": "ann@x.com", "password": "secret1"},
    ):
        response = client.post("/auth/signup", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "All fields are required"}


def test_signup_rejects_short_password(client: TestClient):
    response = client.post(
        "/auth/signup",
        json={"name": "Ann", "email": "ann@x.com", "password": "12345"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Password must be at least 6 characters"}


def test_signup_duplicate_email_is_case_insensitive(client: TestClient, signup):
    """Test that a second signup with the same email in another case fails"""
    signup(email="ann@x.com")

    response = client.post(
        "/auth/signup",
        json={"name": "Other Ann", "email": "  ANN@x.COM", "password": "secret2"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Email already in use"}


def test_signup_conflict_caught_by_unique_index(client: TestClient, signup, monkeypatch):
    """Test that a duplicate slipping past the lookup is still a conflict"""
    from services.accounts import AccountService

    monkeypatch.setattr(AccountService, "_find_by_email", lambda self, email: None)
    first = signup(email="ann@x.com")

    response = client.post(
        "/auth/signup",
        json={"name": "Ann Again", "email": "Ann@x.com", "password": "secret2"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Email already in use"}
    monkeypatch.undo()
    login = client.post("/auth/login", json={"email": "ann@x.com", "password": "secret1"})
    assert login.json()["user"] == first["user"]

def test_signup_rejects_malformed_body(client: TestClient):
    response = client.post(
        "/auth/signup",
        content="not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


def test_login_success(client: TestClient, signup):
    user = signup()["user"]

    response = client.post("/auth/login", json={"email": "ANN@x.com", "password": "secret1"})

    assert response.status_code == 200
    data = response.json()
    assert data["user"] == user
    assert data["token"]


def test_login_requires_email_and_password(client: TestClient):
    response = client.post("/auth/login", json={"email": "ann@x.com"})

    assert response.status_code == 400
    assert response.json() == {"error": "Email and password are required"}


def test_login_failures_are_indistinguishable(client: TestClient, signup):
    """Test that wrong password and unknown email produce the same response"""
    signup()

    wrong_password = client.post("/auth/login", json={"email": "ann@x.com", "password": "wrong"})
    unknown_email = client.post("/auth/login", json={"email": "bob@x.com", "password": "secret1"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid credentials"}


def test_profile_returns_user_without_password(client: TestClient, signup):
    data = signup()

    response = client.get("/auth/profile", headers={"Authorization": f"Bearer {data['token']}"})

    assert response.status_code == 200
    profile = response.json()
    assert profile["id"] == data["user"]["id"]
    assert profile["email"] == "ann@x.com"
    assert "createdAt" in profile
    assert not any("password" in key.lower() for key in profile)


def test_profile_accepts_bare_token(client: TestClient, signup):
    token = signup()["token"]

    response = client.get("/auth/profile", headers={"Authorization": token})

    assert response.status_code == 200


def test_profile_requires_token(client: TestClient):
    response = client.get("/auth/profile")

    assert response.status_code == 401
    assert response.json() == {"error": "Access denied"}


def test_profile_rejects_invalid_token(client: TestClient):
    response = client.get("/auth/profile", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token"}


def test_profile_of_deleted_user_is_not_found(client: TestClient, settings):
    from utils.jwt import create_access_token

    token = create_access_token("missing-user-id", "gone@x.com", settings)

    response = client.get("/auth/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_uses_error_body(client: TestClient):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_wrong_method_uses_error_body(client: TestClient):
    response = client.delete("/health")

    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}
    assert "GET" in response.headers["allow"]
