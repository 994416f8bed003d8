import time
from typing import Any
from uuid import UUID

import litellm
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from finpilot.core.core import Service
from finpilot.core.modules.advice.models import AdviceLog, AdviceOperationType, ChatMessage, FinancialContext
from finpilot.core.modules.advice.prompts import build_budget_advice_prompt, build_chat_system_prompt
from finpilot.core.pagination import PaginationResult, paginate
from finpilot.errors import ExternalServiceError, ValidationError

logger = structlog.get_logger(__name__)

FAILURE_MESSAGES = {
    AdviceOperationType.BUDGET_ADVICE: "AI request failed",
    AdviceOperationType.CHAT: "AI chat failed",
}


class AdviceService(Service):
    """Budgeting advice from a remote LLM, with every call logged to `advice_logs`."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("advice_logs")

    async def on_start(self) -> None:
        """Create indexes for advice logs."""
        await self._collection.create_index([("user_id", 1), ("created_at", -1)])

    async def get_logs(self, user_id: UUID, limit: int = 50, offset: int = 0) -> PaginationResult[AdviceLog]:
        """Get the user's paginated advice logs, newest first."""
        return await paginate(self._collection, AdviceLog, {"user_id": user_id}, limit, offset)

    async def budget_advice(self, user_id: UUID, monthly_income: float, fixed_costs: float, savings_goal: float) -> str:
        prompt = build_budget_advice_prompt(monthly_income, fixed_costs, savings_goal)
        messages = [ChatMessage(role="user", content=prompt)]
        return await self._complete(user_id, AdviceOperationType.BUDGET_ADVICE, messages)

    async def chat(self, user_id: UUID, messages: list[ChatMessage], context: FinancialContext | None) -> str:
        system_message = ChatMessage(role="system", content=build_chat_system_prompt(context))
        return await self._complete(
            user_id,
            AdviceOperationType.CHAT,
            [system_message, *messages],
            temperature=self.core.config.llm_temperature,
        )

    async def _complete(
        self,
        user_id: UUID,
        operation_type: AdviceOperationType,
        messages: list[ChatMessage],
        temperature: float | None = None,
    ) -> str:
        """Send messages to the configured model and return the reply text."""
        config = self.core.config
        if not config.llm_api_key:
            raise ValidationError("LLM API key not configured")

        start_time = time.time()
        log = AdviceLog(user_id=user_id, operation_type=operation_type, messages=messages, model=config.llm_model, duration_ms=0)

        try:
            response = await litellm.acompletion(
                model=config.llm_model,
                messages=[message.model_dump() for message in messages],
                api_key=config.llm_api_key,
                temperature=temperature,
            )
        except Exception as e:
            log.error_message = str(e)
            log.duration_ms = int((time.time() - start_time) * 1000)
            await self._collection.insert_one(log.to_mongo())
            logger.warning("llm_request_failed", operation_type=operation_type, error=str(e))
            raise ExternalServiceError(FAILURE_MESSAGES[operation_type]) from e

        log.duration_ms = int((time.time() - start_time) * 1000)
        usage = getattr(response, "usage", None)
        if usage:
            log.prompt_tokens = usage.prompt_tokens
            log.completion_tokens = usage.completion_tokens
            log.total_tokens = usage.total_tokens

        log.response = response.choices[0].message.content or ""
        await self._collection.insert_one(log.to_mongo())
        logger.debug("llm_request_completed", operation_type=operation_type, duration_ms=log.duration_ms)
        return log.response
