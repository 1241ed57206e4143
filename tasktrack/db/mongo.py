"""MongoDB connection management and collection resolution."""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import ConfigurationError as MongoConfigurationError
from pymongo.server_api import ServerApi

from tasktrack.config import DEFAULT_COLLECTIONS, Settings
from tasktrack.errors import ConfigurationError

logger = logging.getLogger(__name__)

USERS = "users"
TASKS = "tasks"

EMAIL_INDEX_NAME = "email_unique"


class CollectionResolver:
    """
    Resolves logical collection names to collection handles.

    One resolver is built per process by ``connect``, which verifies the
    server is reachable and provisions the unique email index before any
    repository is constructed. The underlying motor client owns the
    connection pool and is shared by every repository.

    Example:
        .. code-block:: python

            resolver = await CollectionResolver.connect(settings)
            users = resolver.resolve(USERS)
    """

    def __init__(
        self,
        client: AsyncIOMotorClient,
        database_name: str,
        collections: dict[str, str] | None = None,
    ) -> None:
        self.client = client
        self.database: AsyncIOMotorDatabase = client[database_name]
        self._collections = dict(collections or {})

    @classmethod
    async def connect(cls, settings: Settings) -> "CollectionResolver":
        """
        Open the client, check liveness and create indexes.

        Raises:
            ConfigurationError: If the connection string is missing or invalid
            PyMongoError: If the server cannot be reached or the index
                cannot be created
        """
        if not settings.MONGODB_URI:
            raise ConfigurationError("MONGODB_URI is required")
        if not settings.MONGODB_DATABASE:
            raise ConfigurationError("MONGODB_DATABASE is required")

        try:
            client = AsyncIOMotorClient(
                settings.MONGODB_URI,
                tz_aware=True,
                server_api=ServerApi("1"),
            )
        except MongoConfigurationError as e:
            logger.error("Invalid MongoDB connection string: %s", e)
            raise ConfigurationError(f"Invalid MongoDB connection string: {e}") from e

        resolver = cls(client, settings.MONGODB_DATABASE, settings.COLLECTIONS)
        try:
            await resolver.ping()
            await resolver.ensure_indexes()
        except Exception:
            logger.exception("Failed to initialize MongoDB connection")
            client.close()
            raise

        logger.info("MongoDB connection established successfully")
        return resolver

    async def ping(self) -> None:
        await self.database.command("ping")

    async def ensure_indexes(self) -> None:
        """Unique index on user email, applied only where the field exists."""
        users = self.resolve(USERS)
        await users.create_index(
            [("email", ASCENDING)],
            name=EMAIL_INDEX_NAME,
            unique=True,
            partialFilterExpression={"email": {"$exists": True}},
        )
        logger.info("MongoDB indexes created successfully")

    def collection_name(self, logical_name: str) -> str:
        """Physical name for a logical collection, honouring overrides."""
        return (
            self._collections.get(logical_name)
            or DEFAULT_COLLECTIONS.get(logical_name)
            or logical_name
        )

    def resolve(self, logical_name: str) -> AsyncIOMotorCollection:
        """Return the collection handle for a logical name. No I/O."""
        return self.database[self.collection_name(logical_name)]

    def close(self) -> None:
        self.client.close()
