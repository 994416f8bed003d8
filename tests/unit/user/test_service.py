"""Tests for UserService against an in-memory users collection."""

from typing import Any

import pytest
from pymongo.errors import DuplicateKeyError

from finpilot.core.modules.user.service import UserService
from finpilot.errors import ConflictError, ValidationError


class FakeUsersCollection:
    """Just enough of the users collection for the credential store."""

    def __init__(self) -> None:
        self.documents: list[dict[str, Any]] = []

    async def count_documents(self, query: dict[str, Any], limit: int = 0) -> int:
        return sum(1 for doc in self.documents if doc["email"] == query["email"])

    async def insert_one(self, document: dict[str, Any]) -> None:
        self.documents.append(document)

    async def find_one(self, query: dict[str, Any], projection: dict[str, int] | None = None) -> dict[str, Any] | None:
        for doc in self.documents:
            if all(doc.get(key) == value for key, value in query.items()):
                return dict(doc)
        return None


class RacingUsersCollection(FakeUsersCollection):
    """Pre-check passes, but another registration wins the unique index."""

    async def insert_one(self, document: dict[str, Any]) -> None:
        raise DuplicateKeyError("E11000 duplicate key error collection: users index: email_1")


class FakeDatabase:
    def __init__(self, collection: FakeUsersCollection) -> None:
        self.collection = collection

    def get_collection(self, name: str) -> FakeUsersCollection:
        assert name == "users"
        return self.collection


@pytest.fixture
def users():
    return FakeUsersCollection()


@pytest.fixture
def service(users):
    return UserService(FakeDatabase(users))


class TestCreateUser:
    async def test_stores_bcrypt_hash_and_normalized_email(self, service, users):
        user = await service.create_user("  Minji@Example.com ", "Minji", "secret123")

        assert user.email == "minji@example.com"
        assert user.password_hash.startswith("$2b$10$")
        [stored] = users.documents
        assert stored["_id"] == user.id
        assert stored["password_hash"] != "secret123"

    async def test_blank_name_defaults_to_email_local_part(self, service):
        user = await service.create_user("minji@example.com", "   ", "secret123")
        assert user.name == "minji"

    async def test_duplicate_email_rejected_before_insert(self, service, users):
        await service.create_user("minji@example.com", None, "secret123")

        with pytest.raises(ConflictError, match="Email already registered"):
            await service.create_user("MINJI@example.com", "Other", "another1")
        assert len(users.documents) == 1

    async def test_duplicate_key_race_becomes_conflict(self):
        service = UserService(FakeDatabase(RacingUsersCollection()))
        with pytest.raises(ConflictError, match="Email already registered"):
            await service.create_user("minji@example.com", None, "secret123")

    async def test_short_password_rejected(self, service, users):
        with pytest.raises(ValidationError):
            await service.create_user("minji@example.com", None, "abc")
        assert users.documents == []


class TestVerifyCredentials:
    async def test_matching_password(self, service):
        created = await service.create_user("minji@example.com", None, "secret123")

        user = await service.verify_credentials("Minji@example.com", "secret123")
        assert user is not None
        assert user.id == created.id

    async def test_wrong_password(self, service):
        await service.create_user("minji@example.com", None, "secret123")
        assert await service.verify_credentials("minji@example.com", "wrong-pass") is None

    async def test_unknown_email(self, service):
        assert await service.verify_credentials("nobody@example.com", "secret123") is None


class TestFindById:
    async def test_returns_view_without_hash(self, service):
        created = await service.create_user("minji@example.com", "Minji", "secret123")

        view = await service.find_by_id(created.id)
        assert view is not None
        assert view.model_dump() == {"id": created.id, "email": "minji@example.com", "name": "Minji"}
