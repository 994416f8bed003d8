"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from finpilot.core.modules.session.authenticator import SessionAuthenticator
from finpilot.core.modules.session.models import Session
from finpilot.core.modules.user.models import UserView

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock injected into the authenticator."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value


class InMemorySessionStore:
    """Session store keeping copies, so callers never share objects with the store."""

    def __init__(self) -> None:
        self.sessions: dict[str, Session] = {}
        self.save_count = 0

    def add(self, user_id: UUID, last_activity: datetime) -> Session:
        session = Session(user_id=user_id, last_activity=last_activity, created_at=last_activity)
        self.sessions[session.id] = session
        return session.model_copy()

    async def find_by_id(self, session_id: str) -> Session | None:
        session = self.sessions.get(session_id)
        return session.model_copy() if session else None

    async def delete_one(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    async def save(self, session: Session) -> None:
        self.save_count += 1
        if session.id in self.sessions:
            self.sessions[session.id] = session.model_copy()


class InMemoryCredentialStore:
    def __init__(self) -> None:
        self.users: dict[UUID, UserView] = {}

    def add(self, email: str, name: str) -> UserView:
        user = UserView(id=UUID(int=len(self.users) + 1), email=email, name=name)
        self.users[user.id] = user
        return user

    async def find_by_id(self, user_id: UUID) -> UserView | None:
        return self.users.get(user_id)


class UnavailableSessionStore(InMemorySessionStore):
    """Simulates the database being down."""

    async def find_by_id(self, session_id: str) -> Session | None:
        raise ConnectionError("session store unavailable")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def mock_user(credential_store):
    """A registered user."""
    return credential_store.add("minji@example.com", "Minji")


@pytest.fixture
def authenticator(session_store, credential_store, clock):
    return SessionAuthenticator(session_store, credential_store, idle_timeout=timedelta(hours=1), clock=clock)


@pytest.fixture
def unavailable_authenticator(credential_store, clock):
    """Authenticator whose session store raises on every lookup."""
    return SessionAuthenticator(UnavailableSessionStore(), credential_store, clock=clock)
