from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails.

    `clear_session_cookie` tells the web layer to drop the client's session
    cookie along with the 401 response.
    """

    default_message = "Authentication failed"

    def __init__(self, message: str | None = None, *, clear_session_cookie: bool = False) -> None:
        super().__init__(message or self.default_message)
        self.clear_session_cookie = clear_session_cookie


class NotAuthenticatedError(AuthenticationError):
    """No session token was presented."""

    default_message = "Not authenticated"


class SessionExpiredError(AuthenticationError):
    """The session token does not resolve to a stored session."""

    default_message = "Session expired"


class IdleTimeoutError(AuthenticationError):
    """The session was unused for longer than the idle threshold."""

    default_message = "Session idle timeout"


class SessionUserNotFoundError(AuthenticationError):
    """The session refers to a user that no longer exists."""

    default_message = "User not found"


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ConflictError(UserError):
    """Raised when a write would violate a uniqueness constraint."""


class ExternalServiceError(UserError):
    """Raised when a remote collaborator (LLM provider) fails."""
