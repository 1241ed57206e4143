"""Repositories: the only code that writes to the document store."""

from tasktrack.repositories.tasks import TaskRepository
from tasktrack.repositories.users import UserRepository

__all__ = ["TaskRepository", "UserRepository"]
