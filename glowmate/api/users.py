"""User profile API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from glowmate.api.dependencies import get_current_user, get_review_service, get_user_service
from glowmate.models.user import User
from glowmate.schemas.auth import UserResponse
from glowmate.schemas.base import MessageResponse
from glowmate.schemas.review import MyReviewResponse
from glowmate.schemas.user import SkincareRoutine, UserUpdate
from glowmate.services.reviews import ReviewService
from glowmate.services.users import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
def get_me(current_user: Annotated[User, Depends(get_current_user)]):
    """Get current user profile."""
    return UserResponse.from_user(current_user)


@router.put("/me", response_model=MessageResponse)
def update_me(
    update_data: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update name, age or skin profile."""
    user_service.update_profile(current_user, update_data)
    return MessageResponse(message="Profile updated.")


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Delete the current account (soft delete)."""
    user_service.delete_account(current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me/reviews", response_model=list[MyReviewResponse])
def get_my_reviews(
    current_user: Annotated[User, Depends(get_current_user)],
    review_service: Annotated[ReviewService, Depends(get_review_service)],
):
    """List the current user's reviews, newest first."""
    return [MyReviewResponse.from_review(r) for r in review_service.list_for_user(current_user)]


@router.get("/me/skincare-routine", response_model=SkincareRoutine)
def get_my_routine(
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    return user_service.get_routine(current_user)


@router.put("/me/skincare-routine", response_model=MessageResponse)
def update_my_routine(
    routine: SkincareRoutine,
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Replace the morning and evening routines (max 20 products each)."""
    user_service.replace_routine(current_user, routine)
    return MessageResponse(message="Routine updated.")
