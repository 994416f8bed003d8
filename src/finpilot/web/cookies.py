"""Applies session cookie directives at the HTTP boundary."""

from fastapi import Response

from finpilot.core.modules.session.models import AuthResult, CookieAction

SESSION_COOKIE_NAME = "sid"


def set_session_cookie(response: Response, session_id: str, max_age: int, secure: bool = False) -> None:
    """Issue (or re-issue) the session cookie with a full idle-threshold lifetime."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        max_age=max_age,
        httponly=True,
        samesite="lax",
        secure=secure,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, httponly=True, samesite="lax")


def apply_auth_result(response: Response, result: AuthResult, max_age: int, secure: bool = False) -> None:
    if result.cookie is CookieAction.SET and result.identity is not None:
        set_session_cookie(response, result.identity.session_id, max_age, secure)
    elif result.cookie is CookieAction.CLEAR:
        clear_session_cookie(response)
