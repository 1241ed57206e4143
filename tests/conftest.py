"""Shared fixtures.

Repositories run against an in-memory collection that mirrors the slice of
the motor API they use and raises real pymongo DuplicateKeyError with the
structured details a server sends.
"""

import copy
from datetime import date
from types import SimpleNamespace

import pytest
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from tasktrack.config import Settings
from tasktrack.models.task import Task
from tasktrack.models.user import User
from tasktrack.repositories.tasks import TaskRepository
from tasktrack.repositories.users import UserRepository
from tasktrack.services.auth import AuthService
from tasktrack.services.passwords import PasswordHasher
from tasktrack.services.tokens import TokenIssuer

TEST_SECRET = "test-secret-key-that-is-long-enough-1234"
USER_ID = "507f1f77bcf86cd799439011"


def _matches(doc: dict, query: dict) -> bool:
    return all(key in doc and doc[key] == value for key, value in query.items())


class FakeCursor:
    def __init__(self, docs: list[dict]) -> None:
        self._docs = docs

    async def to_list(self, length=None):
        return [copy.deepcopy(d) for d in self._docs]


class FakeCollection:
    """In-memory stand-in for one motor collection."""

    def __init__(self, name: str, unique_fields: tuple[str, ...] = ()) -> None:
        self.name = name
        self.unique_fields = unique_fields
        self.docs: dict = {}
        self.calls: list[str] = []
        self.indexes: list[tuple] = []

    def _check_unique(self, doc: dict, replacing: bool = False) -> None:
        if not replacing and doc["_id"] in self.docs:
            raise DuplicateKeyError(
                "E11000 duplicate key error",
                11000,
                {"keyPattern": {"_id": 1}, "keyValue": {"_id": doc["_id"]}},
            )
        for field in self.unique_fields:
            # partial index: documents without the field are exempt
            if field not in doc:
                continue
            for other in self.docs.values():
                if other["_id"] != doc["_id"] and field in other and other[field] == doc[field]:
                    raise DuplicateKeyError(
                        "E11000 duplicate key error",
                        11000,
                        {"keyPattern": {field: 1}, "keyValue": {field: doc[field]}},
                    )

    async def create_index(self, keys, **kwargs):
        self.calls.append("create_index")
        self.indexes.append((keys, kwargs))
        return kwargs.get("name", "index")

    async def insert_one(self, doc):
        self.calls.append("insert_one")
        self._check_unique(doc)
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query):
        self.calls.append("find_one")
        for doc in self.docs.values():
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query):
        self.calls.append("find")
        return FakeCursor([d for d in self.docs.values() if _matches(d, query)])

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        self.calls.append("find_one_and_update")
        for key, doc in self.docs.items():
            if _matches(doc, query):
                new_doc = {**doc, **copy.deepcopy(update["$set"])}
                self._check_unique(new_doc, replacing=True)
                self.docs[key] = new_doc
                result = new_doc if return_document == ReturnDocument.AFTER else doc
                return copy.deepcopy(result)
        return None

    async def delete_one(self, query):
        self.calls.append("delete_one")
        for key, doc in list(self.docs.items()):
            if _matches(doc, query):
                del self.docs[key]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeResolver:
    def __init__(self) -> None:
        self.collections = {
            "users": FakeCollection("Users", unique_fields=("email",)),
            "tasks": FakeCollection("Tasks"),
        }
        self.closed = False

    def resolve(self, logical_name: str) -> FakeCollection:
        return self.collections[logical_name]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        mongodb_database="tasktrack_test",
        jwt_secret_key=TEST_SECRET,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def user_repository(resolver, hasher) -> UserRepository:
    return UserRepository(resolver, hasher)


@pytest.fixture
def task_repository(resolver) -> TaskRepository:
    return TaskRepository(resolver)


@pytest.fixture
def issuer(settings) -> TokenIssuer:
    return TokenIssuer(settings)


@pytest.fixture
def auth_service(user_repository, hasher, issuer) -> AuthService:
    return AuthService(user_repository, hasher, issuer)


@pytest.fixture
def make_user():
    def _make_user(**overrides) -> User:
        data = {
            "name": "Alice",
            "email": "alice@example.com",
            "password": "secret123",
            "birth_date": date(1990, 1, 1),
        }
        data.update(overrides)
        return User(**data)

    return _make_user


@pytest.fixture
def make_task():
    def _make_task(**overrides) -> Task:
        data = {"title": "Water the plants", "user_id": USER_ID}
        data.update(overrides)
        return Task(**data)

    return _make_task
