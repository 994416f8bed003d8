from datetime import datetime
from enum import StrEnum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from finpilot.core.db import MongoModel
from finpilot.utils import now


class AdviceOperationType(StrEnum):
    """LLM operation types."""

    BUDGET_ADVICE = "budget_advice"
    CHAT = "chat"


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str = Field(..., min_length=1)


class FinancialContext(BaseModel):
    """Optional figures the user shares so the assistant can ground its answers."""

    monthly_income: float | None = Field(None, ge=0)
    fixed_costs: float | None = Field(None, ge=0)
    savings_goal: float | None = Field(None, ge=0)


class AdviceLog(MongoModel):
    """Log of an LLM API interaction."""

    user_id: UUID
    operation_type: AdviceOperationType
    messages: list[ChatMessage]
    response: str | None = None

    model: str
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None

    error_message: str | None = None
    duration_ms: int
    created_at: datetime = Field(default_factory=now)
