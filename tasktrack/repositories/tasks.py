"""Task persistence."""

import logging

from tasktrack.db.mongo import TASKS
from tasktrack.models.common import new_id, utcnow
from tasktrack.models.task import Task
from tasktrack.repositories.base import DocumentRepository, next_updated_at

logger = logging.getLogger(__name__)


class TaskRepository(DocumentRepository[Task]):
    """CRUD over the tasks collection.

    Unlike UserRepository.get_by_id, get_by_id here raises NotFoundError
    when the task does not exist; use find_by_id for a nullable lookup.
    """

    entity_name = "Task"
    logical_collection = TASKS

    def to_entity(self, doc):
        return Task.from_document(doc)

    async def get_by_id(self, id: str) -> Task:
        """Return the task or raise NotFoundError (malformed ids included)."""
        return await self.require_by_id(id)

    async def create(self, task: Task) -> str:
        """Insert a new task and return its id."""
        now = utcnow()
        task.created_at = now
        task.updated_at = now
        if task.id is None:
            task.id = new_id()

        await self._insert(task.to_document())
        logger.info("Task created with id %s", task.id)
        return task.id

    async def update(self, task: Task) -> Task:
        """
        Replace the stored task and return the stored result.

        Raises:
            NotFoundError: If no task has the id
        """
        task.updated_at = next_updated_at(task.updated_at, task.created_at)
        updated = await self._replace(task.id, task.to_document())
        logger.info("Task %s updated", task.id)
        return updated
