from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from finpilot.config import Config
from finpilot.core.modules.session.authenticator import SessionAuthenticator

if TYPE_CHECKING:
    from finpilot.core.modules.advice.service import AdviceService
    from finpilot.core.modules.expense.service import ExpenseService
    from finpilot.core.modules.plan.service import PlanService
    from finpilot.core.modules.session.service import SessionService
    from finpilot.core.modules.user.service import UserService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    user: UserService
    session: SessionService
    expense: ExpenseService
    plan: PlanService
    advice: AdviceService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        service_configs = [
            ("user", "finpilot.core.modules.user.service", "UserService"),
            ("session", "finpilot.core.modules.session.service", "SessionService"),
            ("expense", "finpilot.core.modules.expense.service", "ExpenseService"),
            ("plan", "finpilot.core.modules.plan.service", "PlanService"),
            ("advice", "finpilot.core.modules.advice.service", "AdviceService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services (index creation and similar)."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, database, the session authenticator and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services
    authenticator: SessionAuthenticator

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, and auto-register services."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.services = Services(self.database)
        self.services.set_core(self)
        self.authenticator = SessionAuthenticator(
            sessions=self.services.session,
            users=self.services.user,
            idle_timeout=timedelta(seconds=config.session_idle_timeout_seconds),
        )

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
