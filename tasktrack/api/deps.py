"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tasktrack.container import Services
from tasktrack.errors import AuthenticationError
from tasktrack.models.user import User
from tasktrack.repositories.tasks import TaskRepository
from tasktrack.repositories.users import UserRepository
from tasktrack.services.auth import AuthService

security = HTTPBearer()


def get_services(request: Request) -> Services:
    """Get the services built by the application lifespan."""
    return request.app.state.services


AppServices = Annotated[Services, Depends(get_services)]


def get_user_repository(services: AppServices) -> UserRepository:
    return services.users


def get_task_repository(services: AppServices) -> TaskRepository:
    return services.tasks


def get_auth_service(services: AppServices) -> AuthService:
    return services.auth


Users = Annotated[UserRepository, Depends(get_user_repository)]
Tasks = Annotated[TaskRepository, Depends(get_task_repository)]
Auth = Annotated[AuthService, Depends(get_auth_service)]


async def get_current_user(
    services: AppServices,
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> User:
    """Get current authenticated user from the bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = services.issuer.decode(credentials.credentials)
    except AuthenticationError:
        raise credentials_exception

    user = await services.users.get_by_id(payload["sub"])
    if user is None or not user.status:
        raise credentials_exception

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
