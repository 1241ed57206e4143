"""Error taxonomy shared by the persistence, auth and HTTP layers."""


class TaskTrackError(Exception):
    """Base class for all application errors."""


class ConfigurationError(TaskTrackError):
    """Missing or invalid startup configuration. Fatal."""


class ValidationError(TaskTrackError):
    """Malformed or missing required input."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid input")


class AuthenticationError(TaskTrackError):
    """Credentials or bearer token rejected."""


class ConflictError(TaskTrackError):
    """A unique constraint rejected a write."""

    def __init__(self, field: str | None, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Duplicate value for field '{field}'")


class NotFoundError(TaskTrackError):
    """No document matched the lookup."""

    def __init__(self, entity: str, identifier: str) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class TransientStoreError(TaskTrackError):
    """Any other store failure. Never retried."""
