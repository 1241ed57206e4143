"""Password hashing with bcrypt."""

import asyncio
import re

import bcrypt

from tasktrack.errors import ValidationError

# $2b$12$ + 22 chars of salt + 31 chars of digest
BCRYPT_HASH_PATTERN = re.compile(r"^\$2[abxy]\$\d{2}\$[./A-Za-z0-9]{53}$")
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """One-way salted hashing and verification of credentials.

    Hashes are self-describing: the algorithm version, cost factor and salt
    are embedded in the output, so ``verify`` needs nothing but the hash.
    """

    WORK_FACTOR = 12

    def __init__(self, rounds: int = WORK_FACTOR) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_BYTES:
            raise ValidationError([f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes"])
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash.

        A malformed hash never raises; it simply does not match.
        """
        if not self.is_hash(hashed_password):
            return False
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError:
            return False

    @staticmethod
    def is_hash(value: str | None) -> bool:
        """Return True if value is structurally a bcrypt hash."""
        return bool(value) and BCRYPT_HASH_PATTERN.match(value) is not None

    async def hash_async(self, password: str) -> str:
        """Hash off the event loop."""
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, hashed_password: str) -> bool:
        """Verify off the event loop."""
        return await asyncio.to_thread(self.verify, password, hashed_password)
