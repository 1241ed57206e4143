"""Login flow: credential check and token issuance."""

import logging
import secrets

from tasktrack.errors import AuthenticationError, NotFoundError
from tasktrack.models.user import normalize_email
from tasktrack.repositories.users import UserRepository
from tasktrack.services.passwords import PasswordHasher
from tasktrack.services.tokens import IssuedToken, TokenClaims, TokenIssuer

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Authenticates users by email and password.

    Unknown email, wrong password and inactive account all end in the same
    AuthenticationError, and each costs exactly one bcrypt verification, so
    callers cannot tell them apart by message or timing.
    """

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._issuer = issuer
        # Verified against when the email is unknown; computed on first use
        self._dummy_hash: str | None = None

    async def _unknown_user_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await self._hasher.hash_async(secrets.token_urlsafe(16))
        return self._dummy_hash

    async def login(self, email: str, password: str) -> IssuedToken:
        """
        Authenticate a user and issue a bearer token.

        Raises:
            AuthenticationError: On any credential mismatch
            TransientStoreError: If the user lookup fails at the store
        """
        try:
            user = await self._users.get_by_email(normalize_email(email))
        except NotFoundError:
            user = None

        hashed = user.password if user is not None else await self._unknown_user_hash()
        password_ok = await self._hasher.verify_async(password, hashed)

        if user is None or not password_ok or not user.status:
            logger.info("Login rejected")
            raise AuthenticationError(INVALID_CREDENTIALS)

        issued = self._issuer.issue(TokenClaims.from_user(user))
        logger.info("User %s logged in", user.id)
        return issued
