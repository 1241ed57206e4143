"""Task entity, its embedded recurrence pattern and request/response schemas."""

from datetime import datetime
from enum import Enum
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from tasktrack.models.common import as_utc, is_object_id

DEFAULT_CATEGORY = "Personal Care"
DEFAULT_PRIORITY = 3
DEFAULT_DURATION_MINUTES = 15


class RecurrenceType(str, Enum):
    """How often a recurring task repeats."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    CUSTOM = "Custom"


class DayOfWeek(str, Enum):
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


class RecurrencePattern(BaseModel):
    """Recurrence value object embedded in a task. Has no identity of its own."""

    type: RecurrenceType = RecurrenceType.DAILY
    interval: int = 1
    days_of_week: list[DayOfWeek] = Field(default_factory=list)
    end_date: datetime | None = None
    max_occurrences: int | None = None
    exception_dates: list[datetime] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "interval": self.interval,
            # stored as a set: duplicates dropped, first occurrence kept
            "daysOfWeek": [day.value for day in dict.fromkeys(self.days_of_week)],
            "endDate": self.end_date,
            "maxOccurrences": self.max_occurrences,
            "exceptionDates": list(self.exception_dates),
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "RecurrencePattern":
        return cls(
            type=RecurrenceType(doc.get("type", RecurrenceType.DAILY.value)),
            interval=doc.get("interval", 1),
            days_of_week=[DayOfWeek(day) for day in doc.get("daysOfWeek") or []],
            end_date=as_utc(doc.get("endDate")),
            max_occurrences=doc.get("maxOccurrences"),
            exception_dates=[as_utc(d) for d in doc.get("exceptionDates") or []],
        )


class Task(BaseModel):
    """Task as persisted in the tasks collection.

    ``user_id`` references the owning user but is not checked against the
    users collection.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str | None = None
    title: str
    description: str = ""
    category: str = DEFAULT_CATEGORY
    due_date: datetime | None = None
    priority: int = DEFAULT_PRIORITY
    is_completed: bool = False
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    created_at: datetime | None = None
    updated_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    recurrence: RecurrencePattern | None = None
    user_id: str

    def to_document(self) -> dict[str, Any]:
        """Convert to the persisted document shape."""
        doc: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "dueDate": self.due_date,
            "priority": self.priority,
            "isCompleted": self.is_completed,
            "durationMinutes": self.duration_minutes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "tags": list(self.tags),
            "recurrence": self.recurrence.to_document() if self.recurrence else None,
            "userId": ObjectId(self.user_id) if is_object_id(self.user_id) else self.user_id,
        }
        if self.id is not None:
            doc["_id"] = ObjectId(self.id)
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Task":
        """Build a task from a stored document."""
        recurrence = doc.get("recurrence")
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title", ""),
            description=doc.get("description") or "",
            category=DEFAULT_CATEGORY if doc.get("category") is None else doc["category"],
            due_date=as_utc(doc.get("dueDate")),
            priority=doc.get("priority", DEFAULT_PRIORITY),
            is_completed=bool(doc.get("isCompleted", False)),
            duration_minutes=doc.get("durationMinutes", DEFAULT_DURATION_MINUTES),
            created_at=as_utc(doc.get("createdAt")),
            updated_at=as_utc(doc.get("updatedAt")),
            tags=list(doc.get("tags") or []),
            recurrence=RecurrencePattern.from_document(recurrence) if recurrence else None,
            user_id=str(doc.get("userId", "")),
        )


class RecurrencePatternCreate(BaseModel):
    """Schema for the recurrence part of a task request."""

    type: RecurrenceType = RecurrenceType.DAILY
    interval: int = 1
    days_of_week: list[DayOfWeek] = Field(default_factory=list)
    end_date: datetime | None = None
    max_occurrences: int | None = None
    exception_dates: list[datetime] = Field(default_factory=list)


class TaskCreate(BaseModel):
    """Schema for task creation and full replacement."""

    title: str
    description: str = ""
    category: str | None = None
    due_date: datetime | None = None
    priority: int = DEFAULT_PRIORITY
    is_completed: bool = False
    duration_minutes: int | None = None
    tags: list[str] = Field(default_factory=list)
    recurrence: RecurrencePatternCreate | None = None
    user_id: str

    def to_task(self, task_id: str | None = None) -> Task:
        """Map the request onto a task entity."""
        return Task(
            id=task_id,
            title=self.title,
            description=self.description,
            category=DEFAULT_CATEGORY if self.category is None else self.category,
            due_date=self.due_date,
            priority=self.priority,
            is_completed=self.is_completed,
            duration_minutes=(
                DEFAULT_DURATION_MINUTES if self.duration_minutes is None else self.duration_minutes
            ),
            tags=list(self.tags),
            recurrence=(
                RecurrencePattern(**self.recurrence.model_dump()) if self.recurrence else None
            ),
            user_id=self.user_id,
        )


class TaskResponse(BaseModel):
    """Schema for task response."""

    id: str
    title: str
    description: str
    category: str
    due_date: datetime | None
    priority: int
    is_completed: bool
    duration_minutes: int
    created_at: datetime
    updated_at: datetime
    tags: list[str]
    recurrence: RecurrencePattern | None
    user_id: str

    model_config = {"from_attributes": True}


class TaskListResponse(BaseModel):
    """Schema for task list response."""

    tasks: list[TaskResponse]
    total: int
