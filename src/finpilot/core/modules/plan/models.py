from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

from finpilot.core.db import MongoModel
from finpilot.utils import as_utc, now


class PlanTarget(BaseModel):
    """A savings target within a plan."""

    name: str = Field(..., min_length=1, description="What the money is for")
    amount: float = Field(..., ge=0, description="Amount to save")
    due_date: Annotated[datetime, AfterValidator(as_utc)] = Field(..., description="When the amount is needed")


class Plan(MongoModel):
    """Financial plan grouping savings targets.

    Indexed on (user_id, created_at).
    """

    user_id: UUID
    title: str
    targets: list[PlanTarget] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
