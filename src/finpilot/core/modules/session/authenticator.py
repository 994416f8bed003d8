"""Session token authentication with sliding idle expiry.

The authenticator only computes outcomes. Applying the cookie directive of an
`AuthResult` (or of a raised `AuthenticationError`) is left to the web layer.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol
from uuid import UUID

import structlog

from finpilot.core.modules.session.models import (
    AuthenticatedUser,
    AuthFailure,
    AuthResult,
    CookieAction,
    Session,
)
from finpilot.core.modules.user.models import UserView
from finpilot.errors import (
    AuthenticationError,
    IdleTimeoutError,
    NotAuthenticatedError,
    SessionExpiredError,
    SessionUserNotFoundError,
)
from finpilot.utils import now

logger = structlog.get_logger(__name__)

IDLE_TIMEOUT = timedelta(hours=1)

FAILURE_ERRORS: dict[AuthFailure, type[AuthenticationError]] = {
    AuthFailure.UNAUTHENTICATED: NotAuthenticatedError,
    AuthFailure.SESSION_EXPIRED: SessionExpiredError,
    AuthFailure.IDLE_TIMEOUT: IdleTimeoutError,
    AuthFailure.USER_NOT_FOUND: SessionUserNotFoundError,
}


class SessionStore(Protocol):
    async def find_by_id(self, session_id: str) -> Session | None: ...

    async def delete_one(self, session_id: str) -> None: ...

    async def save(self, session: Session) -> None: ...


class CredentialStore(Protocol):
    async def find_by_id(self, user_id: UUID) -> UserView | None: ...


class SessionAuthenticator:
    """Resolves session tokens to identities and renews sessions on use."""

    def __init__(
        self,
        sessions: SessionStore,
        users: CredentialStore,
        idle_timeout: timedelta = IDLE_TIMEOUT,
        clock: Callable[[], datetime] = now,
    ) -> None:
        self._sessions = sessions
        self._users = users
        self._clock = clock
        self.idle_timeout = idle_timeout

    async def authenticate(self, token: str | None) -> AuthResult:
        """Resolve a token, deleting stale or orphaned sessions and renewing valid ones.

        Store errors propagate to the caller.
        """
        if not token:
            return AuthResult.rejected(AuthFailure.UNAUTHENTICATED, CookieAction.NONE)

        session = await self._sessions.find_by_id(token)
        if session is None:
            return AuthResult.rejected(AuthFailure.SESSION_EXPIRED)

        current_time = self._clock()
        if current_time - session.last_activity > self.idle_timeout:
            await self._sessions.delete_one(session.id)
            logger.info("session_idle_timeout", user_id=str(session.user_id))
            return AuthResult.rejected(AuthFailure.IDLE_TIMEOUT)

        user = await self._users.find_by_id(session.user_id)
        if user is None:
            await self._sessions.delete_one(session.id)
            logger.warning("session_user_missing", user_id=str(session.user_id))
            return AuthResult.rejected(AuthFailure.USER_NOT_FOUND)

        # Sliding renewal: the session now lives a full idle_timeout from this moment
        session.last_activity = current_time
        await self._sessions.save(session)

        return AuthResult.accepted(AuthenticatedUser(user=user, session_id=session.id))

    async def authenticate_required(self, token: str | None) -> AuthenticatedUser:
        """Authenticate or raise the AuthenticationError matching the failure."""
        result = await self.authenticate(token)
        if result.identity is None:
            error_class = FAILURE_ERRORS[result.failure or AuthFailure.UNAUTHENTICATED]
            raise error_class(clear_session_cookie=result.cookie is CookieAction.CLEAR)
        return result.identity

    async def authenticate_optional(self, token: str | None) -> AuthResult:
        """Authenticate if possible. Never raises; any failure resolves to anonymous.

        Infrastructure faults are logged rather than surfaced so that guest-facing
        views keep working while the session store is unavailable.
        """
        try:
            return await self.authenticate(token)
        except Exception:  # noqa: BLE001
            logger.warning("optional_authentication_failed", exc_info=True)
            return AuthResult.anonymous()
