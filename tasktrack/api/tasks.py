"""Task API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from tasktrack.api.deps import CurrentUser, Tasks
from tasktrack.models.task import TaskCreate, TaskListResponse, TaskResponse
from tasktrack.validation import validate_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    tasks: Tasks,
    current_user: CurrentUser,
    task_data: TaskCreate,
) -> TaskResponse:
    """Create a new task."""
    task = task_data.to_task()
    validate_task(task).raise_for_errors()
    await tasks.create(task)
    return TaskResponse.model_validate(task)


@router.get("", response_model=TaskListResponse)
async def list_tasks_endpoint(tasks: Tasks, current_user: CurrentUser) -> TaskListResponse:
    """List all tasks."""
    items = await tasks.list_all()
    return TaskListResponse(
        tasks=[TaskResponse.model_validate(t) for t in items],
        total=len(items),
    )


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task_endpoint(tasks: Tasks, current_user: CurrentUser, task_id: str) -> TaskResponse:
    """Get a specific task by ID."""
    return TaskResponse.model_validate(await tasks.get_by_id(task_id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task_endpoint(
    tasks: Tasks,
    current_user: CurrentUser,
    task_id: str,
    task_data: TaskCreate,
) -> TaskResponse:
    """Replace a task with the provided data."""
    existing = await tasks.get_by_id(task_id)

    task = task_data.to_task(task_id)
    task.created_at = existing.created_at
    task.updated_at = existing.updated_at
    validate_task(task).raise_for_errors()

    updated = await tasks.update(task)
    return TaskResponse.model_validate(updated)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_endpoint(tasks: Tasks, current_user: CurrentUser, task_id: str) -> Response:
    """Delete a task."""
    if not await tasks.delete(task_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    logger.info("Task %s deleted", task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
