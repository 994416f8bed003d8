from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from finpilot.core.core import Service
from finpilot.core.modules.session.models import Session

logger = structlog.get_logger(__name__)

# Sessions idle this long are collected by MongoDB even if nobody presents them again
ABANDONED_SESSION_TTL_SECONDS = 30 * 24 * 60 * 60


class SessionService(Service):
    """Session store backed by the `sessions` collection."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("user_id", 1)])
        await self._collection.create_index([("last_activity", 1)], expireAfterSeconds=ABANDONED_SESSION_TTL_SECONDS)

    async def create_session(self, user_id: UUID) -> Session:
        session = Session(user_id=user_id)
        await self._collection.insert_one(session.to_mongo())
        logger.debug("session_created", user_id=str(user_id))
        return session

    async def find_by_id(self, session_id: str) -> Session | None:
        return Session.from_mongo(await self._collection.find_one({"_id": session_id}))

    async def delete_one(self, session_id: str) -> None:
        await self._collection.delete_one({"_id": session_id})

    async def save(self, session: Session) -> None:
        """Persist an existing session. A session deleted meanwhile is not resurrected."""
        await self._collection.replace_one({"_id": session.id}, session.to_mongo())
