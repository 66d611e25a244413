"""Pydantic schemas for API requests and responses."""

from glowmate.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserLogin,
    UserRegister,
    UserResponse,
)
from glowmate.schemas.base import MessageResponse
from glowmate.schemas.premium import SubscribeRequest, SubscribeResponse
from glowmate.schemas.user import UserUpdate
from glowmate.schemas.waitlist import (
    WaitlistJoin,
    WaitlistJoinResponse,
    WaitlistStatus,
    WaitlistVerify,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
    "UserUpdate",
    "SubscribeRequest",
    "SubscribeResponse",
    "WaitlistJoin",
    "WaitlistVerify",
    "WaitlistStatus",
    "WaitlistJoinResponse",
]
