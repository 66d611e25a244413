"""Waitlist API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from glowmate.api.dependencies import get_waitlist_service, rate_limit
from glowmate.schemas.base import MessageResponse
from glowmate.schemas.waitlist import (
    WaitlistJoin,
    WaitlistJoinResponse,
    WaitlistStatus,
    WaitlistVerify,
)
from glowmate.services.waitlist import WaitlistService

router = APIRouter(prefix="/api/v1/waitlist", tags=["waitlist"])


@router.post(
    "",
    response_model=WaitlistJoinResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("waitlist"))],
)
def join_waitlist(
    join_data: WaitlistJoin,
    response: Response,
    waitlist_service: Annotated[WaitlistService, Depends(get_waitlist_service)],
):
    """Join the waitlist, optionally with a friend's referral code.

    Returns 201 for a new entry and 200 when the email is already listed.
    """
    result = waitlist_service.join(join_data.email, join_data.referred_by)
    entry = result.entry

    if result.created:
        message = "Successfully joined the waitlist. Please check your email to verify."
    else:
        response.status_code = status.HTTP_200_OK
        if entry.is_verified:
            message = "You are already on the waitlist."
        else:
            message = "You are already on the waitlist. A new verification email has been sent."

    return WaitlistJoinResponse(
        message=message,
        data=WaitlistStatus(
            position=result.position,
            referral_code=entry.referral_code,
            points=entry.points,
            is_verified=entry.is_verified,
        ),
    )


@router.post("/verify", response_model=MessageResponse)
def verify_waitlist_email(
    verify_data: WaitlistVerify,
    waitlist_service: Annotated[WaitlistService, Depends(get_waitlist_service)],
):
    """Confirm a waitlist spot with the emailed token."""
    waitlist_service.verify(verify_data.token)
    return MessageResponse(message="Email verified successfully!")
