from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

from finpilot.core.db import MongoModel
from finpilot.utils import as_utc, now

UTCDatetime = Annotated[datetime, AfterValidator(as_utc)]


class Expense(MongoModel):
    """Single spending record owned by a user.

    Indexed on (user_id, date).
    """

    user_id: UUID
    date: UTCDatetime
    category: str
    amount: int  # KRW, whole won
    memo: str | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class CategoryTotal(BaseModel):
    category: str
    total: int


class DayTotal(BaseModel):
    date: str = Field(..., description="Local day, YYYY-MM-DD")
    total: int


class DayCategoryTotal(BaseModel):
    date: str = Field(..., description="Local day, YYYY-MM-DD")
    category: str
    total: int


class DateRange(BaseModel):
    from_: datetime = Field(..., serialization_alias="from")
    to: datetime


class ExpenseSummary(BaseModel):
    """Expense totals over a date range, grouped for charting."""

    by_category: list[CategoryTotal] = Field(..., description="Totals per category, largest first")
    by_day: list[DayTotal] = Field(..., description="Totals per local day, oldest first")
    by_day_category: list[DayCategoryTotal] = Field(..., description="Totals per day and category, for stacked bars")
    range: DateRange
