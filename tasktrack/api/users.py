"""User API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from tasktrack.api.deps import CurrentUser, Users
from tasktrack.models.user import User, UserCreate, UserResponse, UserUpdate
from tasktrack.validation import validate_user_create, validate_user_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(users: Users, user_data: UserCreate) -> UserResponse:
    """Register a new user account."""
    validate_user_create(user_data).raise_for_errors()

    user = User(
        name=user_data.name.strip(),
        email=user_data.email,
        password=user_data.password,
        birth_date=user_data.birth_date,
        tags=user_data.tags,
    )
    await users.create(user)
    return UserResponse.model_validate(user)


@router.get("", response_model=list[UserResponse])
async def list_users_endpoint(users: Users, current_user: CurrentUser) -> list[UserResponse]:
    """List all users."""
    return [UserResponse.model_validate(u) for u in await users.list_all()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_endpoint(users: Users, current_user: CurrentUser, user_id: str) -> UserResponse:
    """Get a specific user by ID."""
    user = await users.get_by_id(user_id)
    if user is None:
        raise _not_found()
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user_endpoint(
    users: Users,
    current_user: CurrentUser,
    user_id: str,
    user_data: UserUpdate,
) -> UserResponse:
    """Update a user with the provided fields."""
    validate_user_update(user_data).raise_for_errors()

    user = await users.get_by_id(user_id)
    if user is None:
        raise _not_found()

    for key, value in user_data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, key, value)

    updated = await users.update(user)
    return UserResponse.model_validate(updated)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_endpoint(users: Users, current_user: CurrentUser, user_id: str) -> Response:
    """Delete a user."""
    if not await users.delete(user_id):
        raise _not_found()
    logger.info("User %s deleted", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
