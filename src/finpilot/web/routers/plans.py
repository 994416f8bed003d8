from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from finpilot.core.modules.plan.models import Plan, PlanTarget
from finpilot.web.deps import AppDep, CurrentUserDep
from finpilot.web.openapi import ErrorResponse
from finpilot.web.routers.auth import OkResponse

router = APIRouter(prefix="/plans", tags=["plans"])


class CreatePlanRequest(BaseModel):
    title: str = Field(..., min_length=1, description="Plan title")
    targets: list[PlanTarget] = Field(default_factory=list, description="Savings targets")


class UpdatePlanRequest(BaseModel):
    """Partial update; omitted fields keep their values."""

    title: str | None = Field(None, min_length=1, description="New title")
    targets: list[PlanTarget] | None = Field(None, description="Replacement list of targets")


@router.get(
    "",
    summary="List plans",
    operation_id="listPlans",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def list_plans(app: AppDep, current: CurrentUserDep) -> list[Plan]:
    return await app.list_plans(current)


@router.post(
    "",
    summary="Create plan",
    operation_id="createPlan",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid body"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_plan(data: CreatePlanRequest, app: AppDep, current: CurrentUserDep) -> Plan:
    return await app.create_plan(current, data.title, data.targets)


@router.get(
    "/{plan_id}",
    summary="Get plan",
    operation_id="getPlan",
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Plan not found"},
    },
)
async def get_plan(plan_id: UUID, app: AppDep, current: CurrentUserDep) -> Plan:
    return await app.get_plan(current, plan_id)


@router.put(
    "/{plan_id}",
    summary="Update plan",
    operation_id="updatePlan",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid body"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Plan not found"},
    },
)
async def update_plan(plan_id: UUID, data: UpdatePlanRequest, app: AppDep, current: CurrentUserDep) -> Plan:
    return await app.update_plan(current, plan_id, data.title, data.targets)


@router.delete(
    "/{plan_id}",
    summary="Delete plan",
    operation_id="deletePlan",
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Plan not found"},
    },
)
async def delete_plan(plan_id: UUID, app: AppDep, current: CurrentUserDep) -> OkResponse:
    await app.delete_plan(current, plan_id)
    return OkResponse()
