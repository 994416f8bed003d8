import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from finpilot.errors import (
    AccessDeniedError,
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from finpilot.web.cookies import clear_session_cookie, set_session_cookie

logger = structlog.get_logger(__name__)


def create_json_error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def reissue_session_cookie(request: Request, response: Response) -> None:
    """Carry the renewed session cookie onto an error response.

    The session was already renewed in the store by get_current_user, so the
    client's cookie lifetime must follow even when the route itself failed.
    """
    current = getattr(request.state, "renewed_session", None)
    if current is None:
        return
    app = request.app.state.app
    config = request.app.state.config
    set_session_cookie(response, current.session_id, app.session_max_age, config.session_cookie_secure)


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
    elif isinstance(exc, AccessDeniedError):
        status_code = 403
    elif isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ConflictError):
        status_code = 409
    elif isinstance(exc, ExternalServiceError):
        status_code = 502
    elif isinstance(exc, ValidationError):
        status_code = 400
    else:
        # Default for any other UserError subclass
        status_code = 400

    response = create_json_error_response(status_code=status_code, message=str(exc))
    if isinstance(exc, AuthenticationError):
        if exc.clear_session_cookie:
            clear_session_cookie(response)
    else:
        reissue_session_cookie(request, response)
    return response


async def request_validation_handler(request: Request, exc: Exception) -> Response:
    """Malformed request bodies and query parameters."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    logger.debug("invalid_request", path=request.url.path, errors=errors)
    in_body = any(error["loc"] and error["loc"][0] == "body" for error in errors)
    response = create_json_error_response(status_code=400, message="Invalid body" if in_body else "Invalid request")
    reissue_session_cookie(request, response)
    return response


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", error=str(exc))
    response = create_json_error_response(status_code=500, message="An unexpected error occurred.")
    reissue_session_cookie(request, response)
    return response
