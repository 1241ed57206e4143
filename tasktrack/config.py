"""Environment configuration for the TaskTrack API.

Settings are read from (lowest to highest precedence) built-in defaults,
environment variables (a local ``.env`` is loaded first) and an optional
JSON config file named by ``TASKTRACK_CONFIG_FILE``.
"""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from tasktrack.errors import ConfigurationError

MIN_SECRET_LENGTH = 32

DEFAULT_COLLECTIONS = {
    "users": "Users",
    "tasks": "Tasks",
}


class Settings:
    """Application settings.

    Built once by the composition root and passed by reference to the
    components that need it.
    """

    def __init__(
        self,
        mongodb_uri: str = "",
        mongodb_database: str = "",
        collections: dict[str, str] | None = None,
        jwt_secret_key: str = "",
        log_level: str = "INFO",
    ) -> None:
        self.MONGODB_URI: str = mongodb_uri
        self.MONGODB_DATABASE: str = mongodb_database
        self.COLLECTIONS: dict[str, str] = dict(collections or {})
        self.JWT_SECRET_KEY: str = jwt_secret_key
        self.JWT_ALGORITHM: str = "HS256"
        self.JWT_EXPIRATION_HOURS: int = 10
        self.LOG_LEVEL: str = log_level

    def __repr__(self) -> str:
        return (
            f"Settings(database={self.MONGODB_DATABASE!r}, "
            f"collections={self.COLLECTIONS!r}, log_level={self.LOG_LEVEL!r})"
        )

    def validate(self) -> None:
        """Validate that required settings are present."""
        if not self.MONGODB_URI:
            raise ConfigurationError("MONGODB_URI is required")
        if not self.MONGODB_DATABASE:
            raise ConfigurationError("MONGODB_DATABASE is required")
        validate_secret_key(self.JWT_SECRET_KEY)


def validate_secret_key(secret_key: str | None) -> None:
    """Reject a signing secret that is absent or too short."""
    if not secret_key:
        raise ConfigurationError(
            "JWT secret key not configured. "
            "Set JWT_SECRET_KEY or JwtSettings.SecretKey in the config file."
        )
    if len(secret_key) < MIN_SECRET_LENGTH:
        raise ConfigurationError(
            f"JWT secret key must be at least {MIN_SECRET_LENGTH} characters long."
        )


def _read_config_file(path: str | Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return data


def load_settings(
    env: Mapping[str, str] | None = None,
    config_file: str | Path | None = None,
) -> Settings:
    """Build settings from the environment and an optional config file.

    Args:
        env: Variables to read instead of ``os.environ`` (skips ``.env``)
        config_file: JSON file overriding environment values; defaults to
            ``TASKTRACK_CONFIG_FILE`` when set

    Returns:
        Settings: Unvalidated settings; call ``validate()`` before use
    """
    if env is None:
        load_dotenv()
        env = os.environ

    collections: dict[str, str] = {}
    for logical_name in DEFAULT_COLLECTIONS:
        override = env.get(f"MONGODB_COLLECTION_{logical_name.upper()}")
        if override:
            collections[logical_name] = override

    settings = Settings(
        mongodb_uri=env.get("MONGODB_URI", ""),
        mongodb_database=env.get("MONGODB_DATABASE", ""),
        collections=collections,
        jwt_secret_key=env.get("JWT_SECRET_KEY", ""),
        log_level=env.get("LOG_LEVEL", "INFO"),
    )

    config_file = config_file or env.get("TASKTRACK_CONFIG_FILE")
    if config_file:
        _apply_config_file(settings, _read_config_file(config_file))

    return settings


def _apply_config_file(settings: Settings, data: dict[str, Any]) -> None:
    mongo = data.get("MongoDBSettings") or {}
    if mongo.get("ConnectionString"):
        settings.MONGODB_URI = mongo["ConnectionString"]
    if mongo.get("DatabaseName"):
        settings.MONGODB_DATABASE = mongo["DatabaseName"]
    for logical_name, physical_name in (mongo.get("Collections") or {}).items():
        if physical_name:
            settings.COLLECTIONS[logical_name.lower()] = physical_name

    jwt_section = data.get("JwtSettings") or {}
    if jwt_section.get("SecretKey"):
        settings.JWT_SECRET_KEY = jwt_section["SecretKey"]

    logging_section = data.get("Logging") or {}
    if logging_section.get("Level"):
        settings.LOG_LEVEL = logging_section["Level"]
