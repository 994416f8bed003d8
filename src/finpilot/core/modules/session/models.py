"""Session management models."""

import secrets
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from finpilot.core.db import MongoModel
from finpilot.core.modules.user.models import UserView
from finpilot.utils import now


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


class Session(MongoModel):
    """Server-side session. The document id doubles as the bearer token.

    Indexed on user_id, last_activity (TTL 30 days).
    """

    id: str = Field(alias="_id", serialization_alias="id", default_factory=new_session_token)  # type: ignore[assignment]
    user_id: UUID
    last_activity: datetime = Field(default_factory=now)
    created_at: datetime = Field(default_factory=now)


class AuthFailure(StrEnum):
    """Why a session token failed to authenticate."""

    UNAUTHENTICATED = "unauthenticated"  # no token presented
    SESSION_EXPIRED = "session_expired"  # token does not resolve to a session
    IDLE_TIMEOUT = "idle_timeout"  # session resolved but is stale
    USER_NOT_FOUND = "user_not_found"  # session owner is gone


class CookieAction(StrEnum):
    """What the transport layer must do with the client's session cookie."""

    NONE = "none"
    SET = "set"
    CLEAR = "clear"


class AuthenticatedUser(BaseModel):
    """Identity attached to an authenticated request."""

    user: UserView
    session_id: str

    @property
    def user_id(self) -> UUID:
        return self.user.id


class AuthResult(BaseModel):
    """Outcome of resolving a session token, with the cookie side effect to apply."""

    identity: AuthenticatedUser | None = None
    failure: AuthFailure | None = None
    cookie: CookieAction = CookieAction.NONE

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @classmethod
    def anonymous(cls) -> "AuthResult":
        return cls()

    @classmethod
    def rejected(cls, failure: AuthFailure, cookie: CookieAction = CookieAction.CLEAR) -> "AuthResult":
        return cls(failure=failure, cookie=cookie)

    @classmethod
    def accepted(cls, identity: AuthenticatedUser) -> "AuthResult":
        return cls(identity=identity, cookie=CookieAction.SET)
