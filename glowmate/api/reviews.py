"""Review API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from glowmate.api.dependencies import get_current_user, get_review_service
from glowmate.models.user import User
from glowmate.schemas.review import ReviewResponse, ReviewUpdate
from glowmate.services.reviews import ReviewService

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    update_data: ReviewUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    review_service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Edit one of your own reviews."""
    review = review_service.update(current_user, review_id, update_data)
    return ReviewResponse.from_review(review)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    review_service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Delete one of your own reviews."""
    review_service.delete(current_user, review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
