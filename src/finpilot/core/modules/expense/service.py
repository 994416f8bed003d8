from datetime import date, datetime
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from finpilot.core.core import Service
from finpilot.core.modules.expense.models import (
    CategoryTotal,
    DateRange,
    DayCategoryTotal,
    DayTotal,
    Expense,
    ExpenseSummary,
)
from finpilot.core.modules.expense.pipelines import by_category_pipeline, by_day_category_pipeline, by_day_pipeline
from finpilot.errors import NotFoundError, ValidationError
from finpilot.utils import day_range, last_days_range

logger = structlog.get_logger(__name__)

DEFAULT_RANGE_DAYS = 7


def resolve_range(
    start: date | None, end: date | None, tz: ZoneInfo, current: datetime | None = None
) -> tuple[datetime, datetime]:
    """Inclusive range of whole local days; the last week when either bound is missing."""
    if start is None or end is None:
        return last_days_range(DEFAULT_RANGE_DAYS, tz, current)
    if start > end:
        raise ValidationError("'from' must not be after 'to'")
    return day_range(start, end, tz)


class ExpenseService(Service):
    """Per-user expense records and summaries."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("expenses")

    async def on_start(self) -> None:
        """Create indexes for per-user date range queries."""
        await self._collection.create_index([("user_id", 1), ("date", -1)])

    @property
    def timezone(self) -> ZoneInfo:
        return ZoneInfo(self.core.config.timezone)

    async def list_expenses(self, user_id: UUID, start: date | None, end: date | None) -> list[Expense]:
        """Get the user's expenses in range, newest first."""
        range_start, range_end = resolve_range(start, end, self.timezone)
        cursor = self._collection.find({"user_id": user_id, "date": {"$gte": range_start, "$lte": range_end}}).sort(
            [("date", -1), ("created_at", -1)]
        )
        return await Expense.list_cursor(cursor)

    async def create_expense(
        self, user_id: UUID, expense_date: datetime, category: str, amount: int, memo: str | None
    ) -> Expense:
        expense = Expense(user_id=user_id, date=expense_date, category=category, amount=amount, memo=memo)
        await self._collection.insert_one(expense.to_mongo())
        logger.debug("expense_created", user_id=str(user_id), expense_id=str(expense.id))
        return expense

    async def delete_expense(self, user_id: UUID, expense_id: UUID) -> None:
        """Delete an expense owned by the user."""
        result = await self._collection.delete_one({"_id": expense_id, "user_id": user_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Expense '{expense_id}' not found")

    async def summarize(self, user_id: UUID, start: date | None, end: date | None) -> ExpenseSummary:
        """Totals by category, by local day, and by day and category."""
        range_start, range_end = resolve_range(start, end, self.timezone)
        timezone = self.core.config.timezone

        by_category = await self._aggregate(by_category_pipeline(user_id, range_start, range_end))
        by_day = await self._aggregate(by_day_pipeline(user_id, range_start, range_end, timezone))
        by_day_category = await self._aggregate(by_day_category_pipeline(user_id, range_start, range_end, timezone))

        return ExpenseSummary(
            by_category=[CategoryTotal.model_validate(doc) for doc in by_category],
            by_day=[DayTotal.model_validate(doc) for doc in by_day],
            by_day_category=[DayCategoryTotal.model_validate(doc) for doc in by_day_category],
            range=DateRange(from_=range_start, to=range_end),
        )

    async def _aggregate(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        cursor = await self._collection.aggregate(pipeline)
        return await cursor.to_list()
