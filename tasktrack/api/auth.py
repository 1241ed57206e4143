"""Authentication API endpoints."""

from fastapi import APIRouter

from tasktrack.api.deps import Auth
from tasktrack.models.user import AuthResponse, UserLogin

router = APIRouter(prefix="/api/v1/login", tags=["Auth"])


@router.post("", response_model=AuthResponse)
async def login_user(auth: Auth, credentials: UserLogin) -> AuthResponse:
    """Sign in with email and password."""
    issued = await auth.login(credentials.email, credentials.password)
    return AuthResponse(token=issued.token, expires_at=issued.expires_at)
