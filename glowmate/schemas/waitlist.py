"""Waitlist schemas."""

from pydantic import EmailStr, Field

from glowmate.schemas.base import CamelModel


class WaitlistJoin(CamelModel):
    email: EmailStr = Field(..., max_length=255)
    # Unbounded: a code that resolves to no entry is ignored, never rejected
    referred_by: str | None = None


class WaitlistVerify(CamelModel):
    token: str = Field(..., min_length=1, max_length=128)


class WaitlistStatus(CamelModel):
    """Current standing of a waitlist entry."""

    position: int
    referral_code: str
    points: int
    is_verified: bool


class WaitlistJoinResponse(CamelModel):
    message: str
    data: WaitlistStatus
