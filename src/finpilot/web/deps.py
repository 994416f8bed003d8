from typing import Annotated, cast

from fastapi import Depends, Request, Response
from fastapi.security import APIKeyCookie

from finpilot.app import App
from finpilot.config import Config
from finpilot.core.modules.session.models import AuthenticatedUser
from finpilot.web.cookies import SESSION_COOKIE_NAME, apply_auth_result, set_session_cookie

# Security scheme
cookie_scheme = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_session_user(
    app: Annotated[App, Depends(get_app)],
    session_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthenticatedUser:
    """Require a valid session cookie without re-issuing it (used by logout)."""
    return await app.authenticate_required(session_cookie)


async def get_current_user(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    config: Annotated[Config, Depends(get_config)],
    response: Response,
    current: Annotated[AuthenticatedUser, Depends(get_session_user)],
) -> AuthenticatedUser:
    """Require a valid session cookie and refresh it.

    Failures raise AuthenticationError; the error handler clears the cookie when needed.
    The renewed session is kept on request.state so error responses re-issue the cookie too.
    """
    request.state.renewed_session = current
    set_session_cookie(response, current.session_id, app.session_max_age, config.session_cookie_secure)
    return current


async def get_optional_user(
    app: Annotated[App, Depends(get_app)],
    config: Annotated[Config, Depends(get_config)],
    response: Response,
    session_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthenticatedUser | None:
    """Resolve the caller if possible; anonymous callers get None."""
    result = await app.authenticate_optional(session_cookie)
    apply_auth_result(response, result, app.session_max_age, config.session_cookie_secure)
    return result.identity


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
SessionUserDep = Annotated[AuthenticatedUser, Depends(get_session_user)]
CurrentUserDep = Annotated[AuthenticatedUser, Depends(get_current_user)]
OptionalUserDep = Annotated[AuthenticatedUser | None, Depends(get_optional_user)]
