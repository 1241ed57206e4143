"""Bearer token issuance and decoding."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from tasktrack.config import Settings, validate_secret_key
from tasktrack.errors import AuthenticationError
from tasktrack.models.user import User

logger = logging.getLogger(__name__)

CLAIM_SUBJECT = "sub"
CLAIM_EMAIL = "email"
CLAIM_NAME = "name"
CLAIM_BIRTH_DATE = "birthDate"
CLAIM_EXPIRY = "exp"


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims embedded in every issued token."""

    user_id: str
    email: str
    name: str
    birth_date: date | str

    @classmethod
    def from_user(cls, user: User) -> "TokenClaims":
        return cls(
            user_id=user.id or "",
            email=user.email,
            name=user.name,
            birth_date=user.birth_date,
        )

    def to_payload(self) -> dict[str, str]:
        birth_date = self.birth_date
        if isinstance(birth_date, date):
            birth_date = birth_date.isoformat()
        return {
            CLAIM_SUBJECT: self.user_id,
            CLAIM_EMAIL: self.email,
            CLAIM_NAME: self.name,
            CLAIM_BIRTH_DATE: birth_date,
        }


@dataclass(frozen=True)
class IssuedToken:
    token: str
    issued_at: datetime
    expires_at: datetime


def _utc_seconds() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class TokenIssuer:
    """Builds and signs HS256 bearer tokens.

    Construction fails with ConfigurationError when the signing secret is
    missing or shorter than 32 characters, so a bad secret stops startup
    instead of surfacing on the first login.
    """

    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], datetime] = _utc_seconds,
    ) -> None:
        validate_secret_key(settings.JWT_SECRET_KEY)
        self._secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.lifetime = timedelta(hours=settings.JWT_EXPIRATION_HOURS)
        self._clock = clock

    def issue(self, claims: TokenClaims) -> IssuedToken:
        """Sign a token carrying exactly the identity claims plus expiry."""
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self.lifetime

        payload: dict[str, Any] = claims.to_payload()
        payload[CLAIM_EXPIRY] = expires_at

        token = jwt.encode(payload, self._secret_key, algorithm=self.algorithm)
        logger.info("Token issued for user %s", claims.user_id)
        return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def decode(self, token: str) -> dict[str, Any]:
        """Check signature and expiry and return the claims.

        Raises:
            AuthenticationError: If the token is expired, tampered with or
                not a token at all
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise AuthenticationError("Token has expired") from e
        except JWTError as e:
            raise AuthenticationError("Invalid token") from e

        if not payload.get(CLAIM_SUBJECT):
            raise AuthenticationError("Invalid token")
        return payload
