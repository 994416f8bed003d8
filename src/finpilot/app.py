from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import date, datetime
from uuid import UUID

from finpilot.config import Config
from finpilot.core.core import Core
from finpilot.core.modules.advice.models import AdviceLog, ChatMessage, FinancialContext
from finpilot.core.modules.expense.models import Expense, ExpenseSummary
from finpilot.core.modules.plan.models import Plan, PlanTarget
from finpilot.core.modules.session.models import AuthenticatedUser, AuthResult
from finpilot.core.modules.user.models import UserView
from finpilot.core.pagination import PaginationResult
from finpilot.errors import AuthenticationError


class App:
    """Facade for all application operations.

    Routes authenticate through `authenticate_required` / `authenticate_optional`
    and pass the resulting `AuthenticatedUser` in; every data operation is scoped
    to that user.
    """

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    @property
    def session_max_age(self) -> int:
        """Session cookie lifetime in seconds, equal to the idle threshold."""
        return int(self._core.authenticator.idle_timeout.total_seconds())

    # === Authentication ===
    async def authenticate_required(self, token: str | None) -> AuthenticatedUser:
        """Resolve the session token or raise an AuthenticationError subclass."""
        return await self._core.authenticator.authenticate_required(token)

    async def authenticate_optional(self, token: str | None) -> AuthResult:
        """Resolve the session token, falling back to anonymous on any failure."""
        return await self._core.authenticator.authenticate_optional(token)

    async def register(self, email: str, name: str | None, password: str) -> AuthenticatedUser:
        """Create user and open a session for them."""
        user = await self._core.services.user.create_user(email, name, password)
        session = await self._core.services.session.create_session(user.id)
        return AuthenticatedUser(user=UserView.from_domain(user), session_id=session.id)

    async def login(self, email: str, password: str) -> AuthenticatedUser:
        """Verify credentials and open a new session."""
        user = await self._core.services.user.verify_credentials(email, password)
        if user is None:
            raise AuthenticationError("Invalid credentials")
        session = await self._core.services.session.create_session(user.id)
        return AuthenticatedUser(user=UserView.from_domain(user), session_id=session.id)

    async def logout(self, current: AuthenticatedUser) -> None:
        """Invalidate the current session."""
        await self._core.services.session.delete_one(current.session_id)

    # === Expenses ===
    async def list_expenses(self, current: AuthenticatedUser, start: date | None, end: date | None) -> list[Expense]:
        return await self._core.services.expense.list_expenses(current.user_id, start, end)

    async def create_expense(
        self, current: AuthenticatedUser, expense_date: datetime, category: str, amount: int, memo: str | None
    ) -> Expense:
        return await self._core.services.expense.create_expense(current.user_id, expense_date, category, amount, memo)

    async def delete_expense(self, current: AuthenticatedUser, expense_id: UUID) -> None:
        await self._core.services.expense.delete_expense(current.user_id, expense_id)

    async def summarize_expenses(
        self, current: AuthenticatedUser, start: date | None, end: date | None
    ) -> ExpenseSummary:
        return await self._core.services.expense.summarize(current.user_id, start, end)

    # === Plans ===
    async def list_plans(self, current: AuthenticatedUser) -> list[Plan]:
        return await self._core.services.plan.list_plans(current.user_id)

    async def get_plan(self, current: AuthenticatedUser, plan_id: UUID) -> Plan:
        return await self._core.services.plan.get_plan(current.user_id, plan_id)

    async def create_plan(self, current: AuthenticatedUser, title: str, targets: list[PlanTarget]) -> Plan:
        return await self._core.services.plan.create_plan(current.user_id, title, targets)

    async def update_plan(
        self,
        current: AuthenticatedUser,
        plan_id: UUID,
        title: str | None = None,
        targets: list[PlanTarget] | None = None,
    ) -> Plan:
        """Update plan (partial update, owner only)."""
        return await self._core.services.plan.update_plan(current.user_id, plan_id, title, targets)

    async def delete_plan(self, current: AuthenticatedUser, plan_id: UUID) -> None:
        await self._core.services.plan.delete_plan(current.user_id, plan_id)

    # === Advice ===
    async def get_budget_advice(
        self, current: AuthenticatedUser, monthly_income: float, fixed_costs: float, savings_goal: float
    ) -> str:
        return await self._core.services.advice.budget_advice(current.user_id, monthly_income, fixed_costs, savings_goal)

    async def chat(
        self, current: AuthenticatedUser, messages: list[ChatMessage], context: FinancialContext | None
    ) -> str:
        return await self._core.services.advice.chat(current.user_id, messages, context)

    async def get_advice_logs(self, current: AuthenticatedUser, limit: int = 50, offset: int = 0) -> PaginationResult[AdviceLog]:
        return await self._core.services.advice.get_logs(current.user_id, limit, offset)
