"""
Users endpoints.

Handles user CRUD, friendship links, and friend lookups by degree.
Domain errors raised by the services are rendered by the app-level handler.
"""

from typing import Optional, List

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, ConfigDict, Field

from friendship.graph import User

from ..deps import ServicesDep

router = APIRouter()

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


# Request/Response models

class CreateUserRequest(BaseModel):
    """User creation request."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=1, pattern=EMAIL_PATTERN, description="Email address (unique)")


class UpdateUserRequest(BaseModel):
    """Partial user update request."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, description="Display name")
    email: Optional[str] = Field(None, min_length=1, pattern=EMAIL_PATTERN, description="Email address (unique)")


class AddFriendRequest(BaseModel):
    """Friendship link request."""
    model_config = ConfigDict(extra="forbid")

    friend_id: str = Field(..., min_length=1, description="Id of the user to befriend")


class UserResponse(BaseModel):
    """User response."""
    id: str
    name: str
    email: str
    created_at: str
    updated_at: str


class FriendshipResponse(BaseModel):
    """Friendship link response."""
    user_id: str
    friend_id: str
    created: bool


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at
    )


# Endpoints

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: CreateUserRequest, services: ServicesDep):
    """
    Create a new user.

    Fails with 409 if the email is already in use.
    """
    user = services.users.create(name=request.name, email=request.email)
    return to_response(user)


@router.get("", response_model=List[UserResponse])
async def list_users(services: ServicesDep):
    """List all users ordered by id."""
    return [to_response(u) for u in services.users.find()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, services: ServicesDep):
    """Get a specific user."""
    return to_response(services.users.find_one(user_id))


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, request: UpdateUserRequest, services: ServicesDep):
    """
    Update a user's name and/or email.

    Omitted fields are left unchanged.
    """
    user = services.users.update(user_id, name=request.name, email=request.email)
    return to_response(user)


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(user_id: str, services: ServicesDep):
    """
    Delete a user.

    All friendships of the user are removed with it. Returns the deleted user.
    """
    return to_response(services.users.delete(user_id))


@router.get("/{user_id}/friends", response_model=List[UserResponse])
async def get_friends_by_degree(
    user_id: str,
    services: ServicesDep,
    degree: int = Query(..., ge=1, le=3, description="Degree of separation (1, 2 or 3)")
):
    """
    Get friends of a user at an exact degree of separation.

    - 1: direct friends
    - 2: friends of friends
    - 3: friends of friends of friends
    """
    friends = services.users.get_friends_by_degree(user_id, degree)
    return [to_response(u) for u in friends]


@router.post("/{user_id}/friends", response_model=FriendshipResponse, status_code=status.HTTP_201_CREATED)
async def add_friend(user_id: str, request: AddFriendRequest, services: ServicesDep):
    """
    Make two users friends.

    The friendship is stored in both directions.
    """
    created = services.users.add_friend(user_id, request.friend_id)
    return FriendshipResponse(user_id=user_id, friend_id=request.friend_id, created=created)


@router.delete("/{user_id}/friends/{friend_id}")
async def remove_friend(user_id: str, friend_id: str, services: ServicesDep):
    """Remove a friendship in both directions."""
    services.users.remove_friend(user_id, friend_id)
    return {"success": True, "user_id": user_id, "friend_id": friend_id}
