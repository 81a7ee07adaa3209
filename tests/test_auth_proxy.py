import pytest

from careerclarified.services.auth_client import SupabaseAuthError


class FakeAuth:
    def __init__(self, configured=True, session=None, signup=None, error=None):
        self.configured = configured
        self.session = session
        self.signup = signup
        self.error = error
        self.calls = []

    def is_configured(self):
        return self.configured

    async def sign_in_with_password(self, email, password):
        self.calls.append(("login", email))
        if self.error:
            raise self.error
        return self.session

    async def sign_up(self, email, password, full_name=None):
        self.calls.append(("signup", email, full_name))
        if self.error:
            raise self.error
        return self.signup

    async def send_password_reset(self, email, redirect_to=None):
        self.calls.append(("reset", email, redirect_to))
        if self.error:
            raise self.error


SESSION = {"access_token": "at", "refresh_token": "rt", "user": {"id": "u1", "email": "jane@example.com"}}


class TestLogin:
    def test_success(self, client, set_auth_client):
        fake = set_auth_client(FakeAuth(session=SESSION))
        response = client.post("/api/auth-proxy", json={"email": " jane@example.com ", "password": "pw"})
        assert response.status_code == 200
        assert response.json() == {"session": SESSION, "user": SESSION["user"]}
        assert fake.calls == [("login", "jane@example.com")]

    def test_missing_password(self, client, set_auth_client):
        fake = set_auth_client(FakeAuth(session=SESSION))
        response = client.post("/api/auth-proxy", json={"email": "jane@example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "email and password are required", "code": "VALIDATION_ERROR"}
        assert fake.calls == []

    def test_missing_body(self, client, set_auth_client):
        set_auth_client(FakeAuth(session=SESSION))
        response = client.post("/api/auth-proxy")
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_not_configured(self, client, set_auth_client):
        set_auth_client(FakeAuth(configured=False))
        response = client.post("/api/auth-proxy", json={"email": "a@b.c", "password": "pw"})
        assert response.status_code == 500
        assert response.json()["code"] == "CONFIG_MISSING"

    def test_invalid_credentials_is_401(self, client, set_auth_client):
        set_auth_client(FakeAuth(error=SupabaseAuthError("Invalid login credentials", 400)))
        response = client.post("/api/auth-proxy", json={"email": "a@b.c", "password": "bad"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid login credentials", "code": "400"}

    def test_other_provider_error_is_400(self, client, set_auth_client):
        set_auth_client(FakeAuth(error=SupabaseAuthError("Email not confirmed", 400)))
        response = client.post("/api/auth-proxy", json={"email": "a@b.c", "password": "pw"})
        assert response.status_code == 400
        assert response.json()["error"] == "Email not confirmed"

    def test_provider_unreachable(self, client, set_auth_client):
        set_auth_client(FakeAuth(error=SupabaseAuthError("Auth provider unreachable: timeout")))
        response = client.post("/api/auth-proxy", json={"email": "a@b.c", "password": "pw"})
        assert response.status_code == 500
        assert response.json()["code"] == "SERVER_ERROR"

    def test_no_session(self, client, set_auth_client):
        set_auth_client(FakeAuth(session={}))
        response = client.post("/api/auth-proxy", json={"email": "a@b.c", "password": "pw"})
        assert response.status_code == 500
        assert response.json() == {"error": "No session returned", "code": "NO_SESSION"}

    def test_wrong_method(self, client, set_auth_client):
        set_auth_client(FakeAuth())
        response = client.put("/api/auth-proxy", json={})
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


class TestSignup:
    def test_needs_email_confirmation(self, client, set_auth_client):
        user = {"id": "u1", "email": "jane@example.com"}
        fake = set_auth_client(FakeAuth(signup=(user, None)))
        response = client.post(
            "/api/signup-proxy",
            json={"name": "Jane", "email": "jane@example.com", "password": "pw"},
        )
        assert response.status_code == 200
        assert response.json() == {"user": user, "session": None, "needsEmailConfirmation": True}
        assert fake.calls == [("signup", "jane@example.com", "Jane")]

    def test_immediate_session(self, client, set_auth_client):
        set_auth_client(FakeAuth(signup=(SESSION["user"], SESSION)))
        response = client.post("/api/signup-proxy", json={"email": "jane@example.com", "password": "pw"})
        assert response.status_code == 200
        assert response.json()["needsEmailConfirmation"] is False

    def test_no_data(self, client, set_auth_client):
        set_auth_client(FakeAuth(signup=(None, None)))
        response = client.post("/api/signup-proxy", json={"email": "jane@example.com", "password": "pw"})
        assert response.status_code == 500
        assert response.json()["code"] == "NO_DATA"

    def test_already_registered(self, client, set_auth_client):
        set_auth_client(FakeAuth(error=SupabaseAuthError("User already registered", 422)))
        response = client.post("/api/signup-proxy", json={"email": "jane@example.com", "password": "pw"})
        assert response.status_code == 400
        assert response.json() == {"error": "User already registered", "code": "422"}


@pytest.mark.parametrize("body", [{}, {"email": ""}])
def test_password_reset_requires_email(client, set_auth_client, body):
    set_auth_client(FakeAuth())
    response = client.post("/api/password-reset", json=body)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_password_reset(client, set_auth_client):
    fake = set_auth_client(FakeAuth())
    response = client.post(
        "/api/password-reset",
        json={"email": "jane@example.com", "redirectTo": "https://app.example.com/reset"},
    )
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert fake.calls == [("reset", "jane@example.com", "https://app.example.com/reset")]
