"""Composition root: builds every long-lived component exactly once."""

import logging
from dataclasses import dataclass

from tasktrack.config import Settings
from tasktrack.db.mongo import CollectionResolver
from tasktrack.repositories.tasks import TaskRepository
from tasktrack.repositories.users import UserRepository
from tasktrack.services.auth import AuthService
from tasktrack.services.passwords import PasswordHasher
from tasktrack.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Components shared by all requests."""

    resolver: CollectionResolver
    hasher: PasswordHasher
    issuer: TokenIssuer
    users: UserRepository
    tasks: TaskRepository
    auth: AuthService

    def close(self) -> None:
        self.resolver.close()


async def build_services(settings: Settings) -> Services:
    """
    Validate settings, connect to the store and wire the components.

    Any failure here is fatal: the error propagates and startup stops.
    """
    settings.validate()
    # A bad secret fails before the store is touched
    issuer = TokenIssuer(settings)
    resolver = await CollectionResolver.connect(settings)

    hasher = PasswordHasher()
    users = UserRepository(resolver, hasher)
    tasks = TaskRepository(resolver)
    auth = AuthService(users, hasher, issuer)

    logger.info("Services initialized for database %s", settings.MONGODB_DATABASE)
    return Services(
        resolver=resolver,
        hasher=hasher,
        issuer=issuer,
        users=users,
        tasks=tasks,
        auth=auth,
    )
