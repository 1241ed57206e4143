"""Entities and request/response schemas for the TaskTrack API."""

from tasktrack.models.task import (
    DayOfWeek,
    RecurrencePattern,
    RecurrenceType,
    Task,
    TaskCreate,
    TaskResponse,
)
from tasktrack.models.user import User, UserCreate, UserResponse, UserUpdate

__all__ = [
    "User",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "Task",
    "TaskCreate",
    "TaskResponse",
    "RecurrencePattern",
    "RecurrenceType",
    "DayOfWeek",
]
