"""User entity and its request/response schemas."""

from datetime import date, datetime
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tasktrack.models.common import as_utc, date_to_datetime, datetime_to_date


class User(BaseModel):
    """User as persisted in the users collection.

    ``password`` holds the bcrypt hash once the user has been created. Before
    that it may carry the plaintext handed over by the HTTP layer; the
    repository hashes it on insert. It is excluded from ``repr()``.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str | None = None
    name: str
    email: str
    password: str = Field(repr=False)
    status: bool = True
    birth_date: date
    created_at: datetime | None = None
    updated_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        """Convert to the persisted document shape."""
        doc: dict[str, Any] = {
            "name": self.name,
            "email": self.email,
            "passwordHash": self.password,
            "status": self.status,
            "birthDate": date_to_datetime(self.birth_date),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "tags": list(self.tags),
        }
        if self.id is not None:
            doc["_id"] = ObjectId(self.id)
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        """Build a user from a stored document."""
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            email=doc.get("email", ""),
            password=doc.get("passwordHash", ""),
            status=doc.get("status", True) is not False,
            birth_date=datetime_to_date(doc["birthDate"]),
            created_at=as_utc(doc.get("createdAt")),
            updated_at=as_utc(doc.get("updatedAt")),
            tags=list(doc.get("tags") or []),
        )


class UserCreate(BaseModel):
    """Schema for user registration."""

    name: str
    email: EmailStr
    password: str
    birth_date: date
    tags: list[str] = Field(default_factory=list)


class UserUpdate(BaseModel):
    """Schema for a partial user update."""

    name: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    birth_date: date | None = None
    status: bool | None = None
    tags: list[str] | None = None


class UserLogin(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Schema for user response (no password)."""

    id: str
    name: str
    email: str
    status: bool
    birth_date: date
    created_at: datetime
    updated_at: datetime
    tags: list[str]

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Schema for authentication response."""

    token: str
    expires_at: datetime


def normalize_email(email: str) -> str:
    """Lower-case and trim an email address."""
    return email.strip().lower()
