"""Premium subscription API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from glowmate.api.dependencies import get_current_user, get_user_service
from glowmate.models.user import User
from glowmate.schemas.premium import SubscribeRequest, SubscribeResponse
from glowmate.services.users import UserService

router = APIRouter(prefix="/api/v1/premium", tags=["premium"])


@router.post("/subscribe", response_model=SubscribeResponse)
def subscribe(
    subscription: SubscribeRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Subscribe to premium (mock payment)."""
    expires_at = user_service.subscribe_premium(current_user, subscription.tier)
    return SubscribeResponse(
        message="Successfully subscribed to premium",
        tier=subscription.tier,
        expires_at=expires_at,
    )
