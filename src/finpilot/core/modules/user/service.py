from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from finpilot.core.core import Service
from finpilot.core.modules.user.models import User, UserView
from finpilot.core.modules.user.validators import default_display_name, normalize_email, validate_password
from finpilot.errors import ConflictError

logger = structlog.get_logger(__name__)

# Projection used for identity lookups, never loads the password hash
VIEW_PROJECTION = {"email": 1, "name": 1}


class UserService(Service):
    """Credential store: user identities keyed by id, unique by email."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)

    async def find_by_id(self, user_id: UUID) -> UserView | None:
        """Lightweight identity lookup used by the session authenticator."""
        doc = await self._collection.find_one({"_id": user_id}, VIEW_PROJECTION)
        if doc is None:
            return None
        return UserView(id=doc["_id"], email=doc["email"], name=doc["name"])

    async def get_user_by_email(self, email: str) -> User | None:
        return User.from_mongo(await self._collection.find_one({"email": normalize_email(email)}))

    async def create_user(self, email: str, name: str | None, password: str) -> User:
        """Create user with hashed password. Email must not be registered yet."""
        email = normalize_email(email)
        if await self._collection.count_documents({"email": email}, limit=1):
            raise ConflictError("Email already registered")

        validate_password(password)
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")
        user = User(email=email, name=default_display_name(email, name), password_hash=password_hash)
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError("Email already registered") from e

        logger.info("user_registered", user_id=str(user.id))
        return user

    async def verify_credentials(self, email: str, password: str) -> User | None:
        """Return the user when the password matches the stored hash."""
        user = await self.get_user_by_email(email)
        if user is None:
            return None
        if not bcrypt.checkpw(password.encode("utf-8"), user.password_hash.encode("utf-8")):
            return None
        return user
