"""User persistence."""

import logging

from tasktrack.db.mongo import USERS, CollectionResolver
from tasktrack.errors import NotFoundError
from tasktrack.models.common import new_id, utcnow
from tasktrack.models.user import User, normalize_email
from tasktrack.repositories.base import DocumentRepository, next_updated_at
from tasktrack.services.passwords import PasswordHasher

logger = logging.getLogger(__name__)


class UserRepository(DocumentRepository[User]):
    """CRUD and email lookup over the users collection.

    Email uniqueness is left to the store's unique index: there is no
    read-before-insert check, so concurrent registrations race only at the
    index and exactly one wins.
    """

    entity_name = "User"
    logical_collection = USERS

    def __init__(self, resolver: CollectionResolver, hasher: PasswordHasher) -> None:
        super().__init__(resolver)
        self._hasher = hasher

    def to_entity(self, doc):
        return User.from_document(doc)

    async def _hash_if_plaintext(self, user: User) -> None:
        if not self._hasher.is_hash(user.password):
            user.password = await self._hasher.hash_async(user.password)

    async def get_by_email(self, email: str) -> User:
        """Exact-match lookup. Raises NotFoundError when no user has the email."""
        user = await self._find_one({"email": email}, "email")
        if user is None:
            raise NotFoundError(self.entity_name, email)
        return user

    async def get_by_id(self, id: str) -> User | None:
        """Return the user, or None for a malformed or unknown id."""
        return await self.find_by_id(id)

    async def create(self, user: User) -> str:
        """
        Insert a new user and return its id.

        Assigns the id and timestamps, normalizes the email and hashes the
        password unless it already is a hash.

        Raises:
            ConflictError: If the email (or id) is already taken
        """
        await self._hash_if_plaintext(user)
        user.email = normalize_email(user.email)
        now = utcnow()
        user.created_at = now
        user.updated_at = now
        if user.id is None:
            user.id = new_id()

        await self._insert(user.to_document())
        logger.info("User created with id %s", user.id)
        return user.id

    async def update(self, user: User) -> User:
        """
        Replace the stored user and return the stored result.

        Raises:
            NotFoundError: If no user has the id
            ConflictError: If the new email belongs to another user
        """
        await self._hash_if_plaintext(user)
        user.email = normalize_email(user.email)
        user.updated_at = next_updated_at(user.updated_at, user.created_at)
        updated = await self._replace(user.id, user.to_document())
        logger.info("User %s updated", user.id)
        return updated
