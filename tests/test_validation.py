"""Tests for the explicit input validators."""

from datetime import date, datetime, timedelta, timezone

import pytest

from tasktrack.errors import ValidationError
from tasktrack.models.task import RecurrencePattern, Task, TaskCreate
from tasktrack.models.user import UserCreate, UserUpdate
from tasktrack.validation import (
    ValidationResult,
    validate_email,
    validate_recurrence,
    validate_task,
    validate_user_create,
    validate_user_update,
)

TODAY = date(2026, 6, 1)
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
USER_ID = "507f1f77bcf86cd799439011"
HASH_SHAPED_PASSWORD = "$2b$04$" + "a" * 53


def _user(**overrides) -> UserCreate:
    data = {
        "name": "Alice",
        "email": "alice@example.com",
        "password": "secret123",
        "birth_date": date(1990, 1, 1),
    }
    data.update(overrides)
    return UserCreate(**data)


class TestValidationResult:
    def test_empty_result_is_valid(self):
        result = ValidationResult()

        assert result.is_valid
        result.raise_for_errors()

    def test_raise_for_errors_carries_all_reasons(self):
        result = ValidationResult(["a", "b"])

        with pytest.raises(ValidationError) as exc_info:
            result.raise_for_errors()

        assert exc_info.value.errors == ["a", "b"]


class TestUserValidators:
    def test_valid_user(self):
        assert validate_user_create(_user(), today=TODAY).is_valid

    def test_birth_date_in_future(self):
        result = validate_user_create(_user(birth_date=TODAY + timedelta(days=1)), today=TODAY)

        assert result.errors == ["Birth date cannot be in the future"]

    def test_birth_date_today_is_allowed(self):
        assert validate_user_create(_user(birth_date=TODAY), today=TODAY).is_valid

    def test_collects_every_problem(self):
        result = validate_user_create(
            _user(name=" ", password="123", birth_date=date(1800, 1, 1)), today=TODAY
        )

        assert len(result.errors) == 3

    @pytest.mark.parametrize("password", ["12345", "x" * 101, "é" * 40])
    def test_password_policy(self, password):
        assert not validate_user_create(_user(password=password), today=TODAY).is_valid

    def test_hash_shaped_password_rejected(self):
        """A value that already looks like a bcrypt hash would be stored unhashed."""
        create = validate_user_create(_user(password=HASH_SHAPED_PASSWORD), today=TODAY)
        update = validate_user_update(UserUpdate(password=HASH_SHAPED_PASSWORD), today=TODAY)

        assert create.errors == ["Password cannot be a bcrypt hash"]
        assert update.errors == ["Password cannot be a bcrypt hash"]

    def test_partial_update_only_checks_present_fields(self):
        assert validate_user_update(UserUpdate(tags=["x"]), today=TODAY).is_valid
        assert not validate_user_update(UserUpdate(name="A"), today=TODAY).is_valid

    @pytest.mark.parametrize(
        "email,expected",
        [("a@b.com", True), ("  a@b.com ", True), ("a@b", False), ("no-at.com", False)],
    )
    def test_validate_email(self, email, expected):
        assert validate_email(email) is expected


class TestTaskValidators:
    def test_valid_task(self):
        assert validate_task(Task(title="Read", user_id=USER_ID), now=NOW).is_valid

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"title": ""}, "Title is required"),
            ({"title": "x" * 101}, "Title cannot exceed 100 characters"),
            ({"description": "x" * 501}, "Description cannot exceed 500 characters"),
            ({"priority": 0}, "Priority must be between 1 (highest) and 5 (lowest)"),
            ({"priority": 6}, "Priority must be between 1 (highest) and 5 (lowest)"),
            ({"duration_minutes": 0}, "Duration must be between 1 and 1440 minutes (24 hours)"),
            ({"duration_minutes": 1441}, "Duration must be between 1 and 1440 minutes (24 hours)"),
            ({"user_id": "u1"}, "UserId must be a 24-character hex identifier"),
            ({"user_id": ""}, "UserId is required"),
        ],
    )
    def test_task_rules(self, overrides, message):
        data = {"title": "Read", "user_id": USER_ID}
        data.update(overrides)

        result = validate_task(Task(**data), now=NOW)

        assert result.errors == [message]

    def test_zero_duration_from_request_is_rejected(self):
        task = TaskCreate(title="Read", user_id=USER_ID, duration_minutes=0).to_task()

        assert task.duration_minutes == 0
        assert validate_task(task, now=NOW).errors == [
            "Duration must be between 1 and 1440 minutes (24 hours)"
        ]

    def test_recurrence_errors_are_included(self):
        task = Task(title="Read", user_id=USER_ID, recurrence=RecurrencePattern(interval=0))

        assert validate_task(task, now=NOW).errors == ["Interval must be between 1 and 365"]


class TestRecurrenceValidator:
    def test_valid_pattern(self):
        pattern = RecurrencePattern(interval=365, max_occurrences=999, end_date=NOW + timedelta(days=1))

        assert validate_recurrence(pattern, now=NOW).is_valid

    def test_end_date_in_past(self):
        pattern = RecurrencePattern(end_date=NOW - timedelta(seconds=1))

        assert validate_recurrence(pattern, now=NOW).errors == ["End date must be in the future"]

    def test_end_date_equal_to_now_rejected(self):
        pattern = RecurrencePattern(end_date=NOW)

        assert validate_recurrence(pattern, now=NOW).errors == ["End date must be in the future"]

    def test_naive_end_date_treated_as_utc(self):
        pattern = RecurrencePattern(end_date=datetime(2027, 1, 1))

        assert validate_recurrence(pattern, now=NOW).is_valid

    @pytest.mark.parametrize("occurrences", [0, 1000])
    def test_max_occurrences_range(self, occurrences):
        pattern = RecurrencePattern(max_occurrences=occurrences)

        assert not validate_recurrence(pattern, now=NOW).is_valid
