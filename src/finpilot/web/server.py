from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from finpilot.app import App
from finpilot.config import Config
from finpilot.errors import UserError
from finpilot.web.error_handlers import general_exception_handler, request_validation_handler, user_error_handler
from finpilot.web.openapi import set_custom_openapi
from finpilot.web.routers import advice_router, auth_router, expenses_router, plans_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="FinPilot API", lifespan=lifespan)

    # Available to dependencies before the lifespan runs
    app.state.app = app_instance
    app.state.config = config

    # Browser clients send the session cookie cross-origin, so credentials must be allowed
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(expenses_router, prefix="/api/v1")
    app.include_router(plans_router, prefix="/api/v1")
    app.include_router(advice_router, prefix="/api/v1")

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
