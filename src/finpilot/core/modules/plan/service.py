from typing import Any
from uuid import UUID

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from finpilot.core.core import Service
from finpilot.core.modules.plan.models import Plan, PlanTarget
from finpilot.errors import NotFoundError, ValidationError
from finpilot.utils import now


class PlanService(Service):
    """Per-user financial plans."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("plans")

    async def on_start(self) -> None:
        await self._collection.create_index([("user_id", 1), ("created_at", -1)])

    async def list_plans(self, user_id: UUID) -> list[Plan]:
        """Get the user's plans, newest first."""
        cursor = self._collection.find({"user_id": user_id}).sort("created_at", -1)
        return await Plan.list_cursor(cursor)

    async def get_plan(self, user_id: UUID, plan_id: UUID) -> Plan:
        plan = Plan.from_mongo(await self._collection.find_one({"_id": plan_id, "user_id": user_id}))
        if plan is None:
            raise NotFoundError(f"Plan '{plan_id}' not found")
        return plan

    async def create_plan(self, user_id: UUID, title: str, targets: list[PlanTarget]) -> Plan:
        if not title.strip():
            raise ValidationError("Title cannot be empty")
        plan = Plan(user_id=user_id, title=title, targets=targets)
        await self._collection.insert_one(plan.to_mongo())
        return plan

    async def update_plan(
        self, user_id: UUID, plan_id: UUID, title: str | None = None, targets: list[PlanTarget] | None = None
    ) -> Plan:
        """Update title and/or targets (partial update). Omitted values are left as they are."""
        update_doc: dict[str, Any] = {"updated_at": now()}
        if title is not None:
            if not title.strip():
                raise ValidationError("Title cannot be empty")
            update_doc["title"] = title
        if targets is not None:
            update_doc["targets"] = [target.model_dump() for target in targets]

        doc = await self._collection.find_one_and_update(
            {"_id": plan_id, "user_id": user_id},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER,
        )
        plan = Plan.from_mongo(doc)
        if plan is None:
            raise NotFoundError(f"Plan '{plan_id}' not found")
        return plan

    async def delete_plan(self, user_id: UUID, plan_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": plan_id, "user_id": user_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Plan '{plan_id}' not found")
