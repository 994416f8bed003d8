from fastapi import APIRouter, Response
from pydantic import BaseModel, EmailStr, Field

from finpilot.core.modules.user.models import UserView
from finpilot.web.cookies import clear_session_cookie, set_session_cookie
from finpilot.web.deps import AppDep, ConfigDep, OptionalUserDep, SessionUserDep
from finpilot.web.openapi import ErrorResponse

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    """Registration request."""

    email: EmailStr = Field(..., description="Email address, used as the login")
    name: str | None = Field(None, description="Display name; defaults to the part of the email before '@'")
    password: str = Field(..., min_length=6, description="Password, at least 6 characters")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=6, description="Password")


class UserResponse(BaseModel):
    user: UserView


class CurrentUserResponse(BaseModel):
    user: UserView | None = Field(..., description="Current user, or null for anonymous callers")


class OkResponse(BaseModel):
    ok: bool = True


@router.post(
    "/register",
    summary="Register user",
    description="Create an account and start a session. The session cookie is set on the response.",
    operation_id="register",
    responses={
        200: {"description": "Account created and session started"},
        400: {"model": ErrorResponse, "description": "Invalid body"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(data: RegisterRequest, app: AppDep, config: ConfigDep, response: Response) -> UserResponse:
    current = await app.register(data.email, data.name, data.password)
    set_session_cookie(response, current.session_id, app.session_max_age, config.session_cookie_secure)
    return UserResponse(user=current.user)


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email and password. The session cookie is set on the response.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Invalid body"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(data: LoginRequest, app: AppDep, config: ConfigDep, response: Response) -> UserResponse:
    current = await app.login(data.email, data.password)
    set_session_cookie(response, current.session_id, app.session_max_age, config.session_cookie_secure)
    return UserResponse(user=current.user)


@router.post(
    "/logout",
    summary="End session",
    description="Delete the current session and clear the session cookie.",
    operation_id="logout",
    responses={
        200: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, current: SessionUserDep, response: Response) -> OkResponse:
    await app.logout(current)
    clear_session_cookie(response)
    return OkResponse()


@router.get(
    "/me",
    summary="Who is calling",
    description="Return the current user, or null for anonymous callers. Never fails on a bad session.",
    operation_id="getCurrentUser",
)
async def me(current: OptionalUserDep) -> CurrentUserResponse:
    return CurrentUserResponse(user=current.user if current else None)
