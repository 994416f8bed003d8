from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from finpilot.core.modules.expense.models import Expense, ExpenseSummary
from finpilot.web.deps import AppDep, CurrentUserDep
from finpilot.web.openapi import ErrorResponse
from finpilot.web.routers.auth import OkResponse

router = APIRouter(prefix="/expenses", tags=["expenses"])

FromQuery = Annotated[date | None, Query(alias="from", description="First day, inclusive (YYYY-MM-DD)")]
ToQuery = Annotated[date | None, Query(alias="to", description="Last day, inclusive (YYYY-MM-DD)")]


class CreateExpenseRequest(BaseModel):
    """Request to record an expense."""

    date: datetime = Field(..., description="When the money was spent (date or datetime)")
    category: str = Field(..., min_length=1, description="Spending category")
    amount: int = Field(..., ge=0, description="Amount in KRW")
    memo: str | None = Field(None, description="Free-form note")


@router.get(
    "",
    summary="List expenses",
    description="List the caller's expenses in a date range, newest first. Defaults to the last 7 days.",
    operation_id="listExpenses",
    responses={
        200: {"description": "Expenses in range"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_expenses(
    app: AppDep, current: CurrentUserDep, start: FromQuery = None, end: ToQuery = None
) -> list[Expense]:
    return await app.list_expenses(current, start, end)


@router.post(
    "",
    summary="Create expense",
    operation_id="createExpense",
    responses={
        200: {"description": "Expense created"},
        400: {"model": ErrorResponse, "description": "Invalid body"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_expense(data: CreateExpenseRequest, app: AppDep, current: CurrentUserDep) -> Expense:
    return await app.create_expense(current, data.date, data.category, data.amount, data.memo)


@router.get(
    "/summary",
    summary="Summarize expenses",
    description="Totals by category, by day and by day and category for the given range.",
    operation_id="summarizeExpenses",
    responses={
        200: {"description": "Expense summary"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def summarize_expenses(
    app: AppDep, current: CurrentUserDep, start: FromQuery = None, end: ToQuery = None
) -> ExpenseSummary:
    return await app.summarize_expenses(current, start, end)


@router.delete(
    "/{expense_id}",
    summary="Delete expense",
    operation_id="deleteExpense",
    responses={
        200: {"description": "Expense deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Expense not found"},
    },
)
async def delete_expense(expense_id: UUID, app: AppDep, current: CurrentUserDep) -> OkResponse:
    await app.delete_expense(current, expense_id)
    return OkResponse()
