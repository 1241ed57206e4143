"""Helpers shared by the persisted entities."""

from datetime import date, datetime, time, timezone

from bson import ObjectId


def is_object_id(value: object) -> bool:
    """Return True for a well-formed 24-hex document identifier."""
    return isinstance(value, str) and ObjectId.is_valid(value) and len(value) == 24


def new_id() -> str:
    """Generate a fresh document identifier."""
    return str(ObjectId())


def utcnow() -> datetime:
    """Current UTC time at the store's millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes read from the store as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def date_to_datetime(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def datetime_to_date(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
