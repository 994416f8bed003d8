"""HTTP-level tests for session cookies and authentication errors."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from finpilot.config import Config
from finpilot.core.modules.session.models import AuthenticatedUser
from finpilot.core.modules.user.models import UserView
from finpilot.errors import AuthenticationError, ConflictError, NotFoundError
from finpilot.web.cookies import SESSION_COOKIE_NAME
from finpilot.web.server import create_fastapi_app


class FakeApp:
    """Stands in for App: real authenticator over in-memory stores, no database."""

    session_max_age = 3600

    def __init__(self, authenticator, session_store, credential_store, clock) -> None:
        self._authenticator = authenticator
        self._sessions = session_store
        self._users = credential_store
        self._clock = clock
        self._passwords: dict[str, tuple[UserView, str]] = {}

    async def authenticate_required(self, token):
        return await self._authenticator.authenticate_required(token)

    async def authenticate_optional(self, token):
        return await self._authenticator.authenticate_optional(token)

    async def register(self, email, name, password):
        if email in self._passwords:
            raise ConflictError("Email already registered")
        user = self._users.add(email, name or email.split("@")[0])
        self._passwords[email] = (user, password)
        return self._open_session(user)

    async def login(self, email, password):
        user, stored = self._passwords.get(email, (None, None))
        if user is None or stored != password:
            raise AuthenticationError("Invalid credentials")
        return self._open_session(user)

    async def logout(self, current):
        await self._sessions.delete_one(current.session_id)

    async def list_expenses(self, current, start, end):
        return []

    async def delete_expense(self, current, expense_id):
        raise NotFoundError("Expense not found")

    def _open_session(self, user):
        session = self._sessions.add(user.id, self._clock())
        return AuthenticatedUser(user=user, session_id=session.id)


@pytest.fixture
def fake_app(authenticator, session_store, credential_store, clock):
    return FakeApp(authenticator, session_store, credential_store, clock)


@pytest.fixture
def client(fake_app):
    config = Config(database_url="mongodb://localhost:27017/finpilot_test", host="127.0.0.1", port=4000, debug=False)
    return TestClient(create_fastapi_app(fake_app, config))


def register(client, email="minji@example.com", password="secret123", name=None):
    body = {"email": email, "password": password}
    if name is not None:
        body["name"] = name
    return client.post("/api/v1/auth/register", json=body)


class TestRegisterAndLogin:
    def test_register_sets_session_cookie(self, client, session_store):
        response = register(client, name="Minji")
        assert response.status_code == 200, response.text
        assert response.json()["user"]["email"] == "minji@example.com"
        assert response.json()["user"]["name"] == "Minji"

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{SESSION_COOKIE_NAME}=")
        assert "HttpOnly" in set_cookie
        assert "Max-Age=3600" in set_cookie
        assert "samesite=lax" in set_cookie.lower()
        assert client.cookies[SESSION_COOKIE_NAME] in session_store.sessions

    def test_register_duplicate_email_conflicts(self, client):
        register(client)
        response = register(client)
        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered"}

    def test_register_rejects_invalid_body(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "not-an-email", "password": "secret123"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid body"}

    def test_register_rejects_short_password(self, client):
        response = register(client, password="abc")
        assert response.status_code == 400

    def test_login_with_wrong_password(self, client):
        register(client)
        client.cookies.clear()
        response = client.post("/api/v1/auth/login", json={"email": "minji@example.com", "password": "wrong-pass"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}
        assert "set-cookie" not in response.headers

    def test_login_opens_new_session(self, client, session_store):
        register(client)
        first = client.cookies[SESSION_COOKIE_NAME]
        client.cookies.clear()

        response = client.post("/api/v1/auth/login", json={"email": "minji@example.com", "password": "secret123"})
        assert response.status_code == 200
        assert client.cookies[SESSION_COOKIE_NAME] != first
        assert len(session_store.sessions) == 2


class TestCurrentUser:
    def test_me_anonymous_without_cookie(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 200
        assert response.json() == {"user": None}
        assert "set-cookie" not in response.headers

    def test_me_returns_user_and_refreshes_cookie(self, client):
        register(client)
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "minji@example.com"
        assert "Max-Age=3600" in response.headers["set-cookie"]

    def test_me_with_stale_cookie_is_anonymous_and_clears_cookie(self, client):
        client.cookies.set(SESSION_COOKIE_NAME, "deleted-session")
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 200
        assert response.json() == {"user": None}
        assert "Max-Age=0" in response.headers["set-cookie"]


class TestProtectedRoutes:
    def test_no_cookie_is_not_authenticated(self, client):
        response = client.get("/api/v1/expenses")
        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}
        assert "set-cookie" not in response.headers

    def test_unknown_session_is_expired(self, client):
        client.cookies.set(SESSION_COOKIE_NAME, str(uuid4()))
        response = client.get("/api/v1/expenses")
        assert response.status_code == 401
        assert response.json() == {"error": "Session expired"}
        assert "Max-Age=0" in response.headers["set-cookie"]

    def test_idle_session_times_out(self, client, clock, session_store):
        register(client)
        token = client.cookies[SESSION_COOKIE_NAME]
        clock.advance(minutes=61)

        response = client.get("/api/v1/expenses")
        assert response.status_code == 401
        assert response.json() == {"error": "Session idle timeout"}
        assert "Max-Age=0" in response.headers["set-cookie"]
        assert token not in session_store.sessions

    def test_orphaned_session_reports_user_not_found(self, client, credential_store):
        register(client)
        credential_store.users.clear()

        response = client.get("/api/v1/expenses")
        assert response.status_code == 401
        assert response.json() == {"error": "User not found"}

    def test_authenticated_request_refreshes_cookie(self, client, clock, session_store):
        register(client)
        token = client.cookies[SESSION_COOKIE_NAME]
        renewed_at = clock.advance(minutes=50)

        response = client.get("/api/v1/expenses")
        assert response.status_code == 200
        assert response.json() == []
        assert "Max-Age=3600" in response.headers["set-cookie"]
        assert session_store.sessions[token].last_activity == renewed_at

    def test_logout_then_same_cookie_is_expired(self, client, session_store):
        register(client)
        token = client.cookies[SESSION_COOKIE_NAME]

        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert token not in session_store.sessions

        client.cookies.set(SESSION_COOKIE_NAME, token)
        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 401
        assert response.json() == {"error": "Session expired"}

    def test_logout_sends_only_the_clearing_cookie(self, client):
        register(client)

        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 200
        [set_cookie] = response.headers.get_list("set-cookie")
        assert "Max-Age=0" in set_cookie


class TestRenewalOnErrorResponses:
    def test_failed_route_still_refreshes_cookie(self, client, clock, session_store):
        register(client)
        token = client.cookies[SESSION_COOKIE_NAME]
        renewed_at = clock.advance(minutes=50)

        response = client.delete(f"/api/v1/expenses/{uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"error": "Expense not found"}
        assert session_store.sessions[token].last_activity == renewed_at
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{SESSION_COOKIE_NAME}={token}")
        assert "Max-Age=3600" in set_cookie

    def test_invalid_body_after_authentication_refreshes_cookie(self, client):
        register(client)
        token = client.cookies[SESSION_COOKIE_NAME]

        response = client.post("/api/v1/expenses", json={"amount": "lots"})
        assert response.status_code == 400
        assert response.headers["set-cookie"].startswith(f"{SESSION_COOKIE_NAME}={token}")

    def test_authentication_failure_does_not_refresh(self, client, clock):
        register(client)
        clock.advance(minutes=61)

        response = client.delete(f"/api/v1/expenses/{uuid4()}")
        assert response.status_code == 401
        [set_cookie] = response.headers.get_list("set-cookie")
        assert "Max-Age=0" in set_cookie
