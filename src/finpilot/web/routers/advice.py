from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from finpilot.core.modules.advice.models import AdviceLog, ChatMessage, FinancialContext
from finpilot.core.pagination import PaginationResult
from finpilot.web.deps import AppDep, CurrentUserDep
from finpilot.web.openapi import ErrorResponse

router = APIRouter(prefix="/ai", tags=["ai"])


class BudgetAdviceRequest(BaseModel):
    monthly_income: float = Field(..., description="Monthly income")
    fixed_costs: float = Field(..., description="Fixed monthly costs")
    savings_goal: float = Field(..., description="Target monthly savings")


class BudgetAdviceResponse(BaseModel):
    advice: str


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., description="Conversation so far")
    context: FinancialContext | None = Field(None, description="Figures to ground the answer")


class ChatResponse(BaseModel):
    reply: str


@router.post(
    "/budget-advice",
    summary="Get budgeting advice",
    description="Ask the language model for three short budgeting tips.",
    operation_id="getBudgetAdvice",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid body or AI not configured"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        502: {"model": ErrorResponse, "description": "AI request failed"},
    },
)
async def budget_advice(data: BudgetAdviceRequest, app: AppDep, current: CurrentUserDep) -> BudgetAdviceResponse:
    advice = await app.get_budget_advice(current, data.monthly_income, data.fixed_costs, data.savings_goal)
    return BudgetAdviceResponse(advice=advice)


@router.post(
    "/chat",
    summary="Chat with the financial guide",
    description="Continue a conversation with the Korean-language financial guide. Amounts are in KRW.",
    operation_id="chat",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid body or AI not configured"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        502: {"model": ErrorResponse, "description": "AI chat failed"},
    },
)
async def chat(data: ChatRequest, app: AppDep, current: CurrentUserDep) -> ChatResponse:
    reply = await app.chat(current, data.messages, data.context)
    return ChatResponse(reply=reply)


@router.get(
    "/logs",
    summary="List advice logs",
    description="Get the caller's paginated LLM interaction logs.",
    operation_id="listAdviceLogs",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def list_advice_logs(
    app: AppDep,
    current: CurrentUserDep,
    limit: Annotated[int, Query(ge=1, le=100, description="Number of items per page")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[AdviceLog]:
    return await app.get_advice_logs(current, limit, offset)
