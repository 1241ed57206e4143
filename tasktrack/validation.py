"""Explicit input validators.

The HTTP layer runs these before handing data to the repositories. Each
validator returns a ValidationResult listing every problem found rather
than stopping at the first one.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from tasktrack.errors import ValidationError
from tasktrack.models.common import is_object_id
from tasktrack.models.task import RecurrencePattern, Task
from tasktrack.models.user import UserCreate, UserUpdate
from tasktrack.services.passwords import PasswordHasher

# Email validation (RFC 5322 simplified)
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100
# bcrypt only reads the first 72 bytes of its input
PASSWORD_MAX_BYTES = 72
MIN_BIRTH_DATE = date(1900, 1, 1)

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
PRIORITY_RANGE = (1, 5)
DURATION_RANGE = (1, 1440)
INTERVAL_RANGE = (1, 365)
MAX_OCCURRENCES_RANGE = (1, 999)


@dataclass
class ValidationResult:
    """Outcome of a validator: valid when no errors were collected."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, message: str) -> None:
        self.errors.append(message)

    def extend(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)

    def raise_for_errors(self) -> None:
        """Raise ValidationError if any rule failed."""
        if self.errors:
            raise ValidationError(self.errors)


def validate_email(email: str) -> bool:
    """Validate email format (RFC 5322 simplified)."""
    return bool(EMAIL_PATTERN.match(email.strip()))


def validate_password_policy(password: str) -> tuple[bool, str]:
    """
    Validate password meets policy requirements.
    Returns (is_valid, error_message).
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        return False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
    if len(password) > PASSWORD_MAX_LENGTH:
        return False, f"Password cannot exceed {PASSWORD_MAX_LENGTH} characters"
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return False, f"Password cannot exceed {PASSWORD_MAX_BYTES} bytes"
    # the repository stores hash-shaped values as they are
    if PasswordHasher.is_hash(password):
        return False, "Password cannot be a bcrypt hash"
    return True, ""


def _check_name(name: str, result: ValidationResult) -> None:
    stripped = name.strip()
    if not stripped:
        result.add("Name is required")
    elif not NAME_MIN_LENGTH <= len(stripped) <= NAME_MAX_LENGTH:
        result.add(
            f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
        )


def _check_birth_date(birth_date: date, result: ValidationResult, today: date) -> None:
    if birth_date > today:
        result.add("Birth date cannot be in the future")
    elif birth_date < MIN_BIRTH_DATE:
        result.add(f"Birth date cannot be before {MIN_BIRTH_DATE.isoformat()}")


def validate_user_create(data: UserCreate, today: date | None = None) -> ValidationResult:
    """Validate a registration request."""
    today = today or date.today()
    result = ValidationResult()

    _check_name(data.name, result)
    if not validate_email(data.email):
        result.add("Invalid email format")
    is_valid, error_msg = validate_password_policy(data.password)
    if not is_valid:
        result.add(error_msg)
    _check_birth_date(data.birth_date, result, today)

    return result


def validate_user_update(data: UserUpdate, today: date | None = None) -> ValidationResult:
    """Validate the fields present in a partial user update."""
    today = today or date.today()
    result = ValidationResult()

    if data.name is not None:
        _check_name(data.name, result)
    if data.email is not None and not validate_email(data.email):
        result.add("Invalid email format")
    if data.password is not None:
        is_valid, error_msg = validate_password_policy(data.password)
        if not is_valid:
            result.add(error_msg)
    if data.birth_date is not None:
        _check_birth_date(data.birth_date, result, today)

    return result


def validate_recurrence(
    pattern: RecurrencePattern, now: datetime | None = None
) -> ValidationResult:
    """Validate a task's recurrence pattern."""
    now = now or datetime.now(timezone.utc)
    result = ValidationResult()

    low, high = INTERVAL_RANGE
    if not low <= pattern.interval <= high:
        result.add(f"Interval must be between {low} and {high}")

    if pattern.max_occurrences is not None:
        low, high = MAX_OCCURRENCES_RANGE
        if not low <= pattern.max_occurrences <= high:
            result.add(f"Max occurrences must be between {low} and {high}")

    if pattern.end_date is not None:
        end_date = pattern.end_date
        if end_date.tzinfo is None:
            end_date = end_date.replace(tzinfo=timezone.utc)
        if end_date <= now:
            result.add("End date must be in the future")

    return result


def validate_task(task: Task, now: datetime | None = None) -> ValidationResult:
    """Validate a task before it is created or replaced."""
    result = ValidationResult()

    if not task.title.strip():
        result.add("Title is required")
    elif len(task.title) > TITLE_MAX_LENGTH:
        result.add(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")

    if len(task.description) > DESCRIPTION_MAX_LENGTH:
        result.add(f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")

    low, high = PRIORITY_RANGE
    if not low <= task.priority <= high:
        result.add(f"Priority must be between {low} (highest) and {high} (lowest)")

    low, high = DURATION_RANGE
    if not low <= task.duration_minutes <= high:
        result.add(f"Duration must be between {low} and {high} minutes (24 hours)")

    if not task.user_id:
        result.add("UserId is required")
    elif not is_object_id(task.user_id):
        result.add("UserId must be a 24-character hex identifier")

    if task.recurrence is not None:
        result.extend(validate_recurrence(task.recurrence, now))

    return result
