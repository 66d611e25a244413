"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from glowmate.api.dependencies import get_auth_service, rate_limit
from glowmate.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserLogin,
    UserRegister,
    UserResponse,
)
from glowmate.schemas.base import MessageResponse
from glowmate.services.auth import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("auth"))],
)
def register(
    user_data: UserRegister,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user and send the verification email."""
    user, token = auth_service.register(user_data)
    return AuthResponse(
        token=token,
        user=UserResponse.from_user(user),
        message="Registration successful. Please check your email to verify your account.",
    )


@router.get("/verify-email", response_model=MessageResponse)
def verify_email(
    token: Annotated[str, Query(min_length=1)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Verify an email address using the emailed token."""
    auth_service.verify_email(token)
    return MessageResponse(message="Email successfully verified. You can now login.")


@router.post(
    "/login",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(rate_limit("auth"))],
)
def login(
    credentials: UserLogin,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    user, token = auth_service.login(credentials.email, credentials.password)
    return AuthResponse(token=token, user=UserResponse.from_user(user))


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth"))],
)
def forgot_password(
    request_data: ForgotPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Request a password reset link."""
    auth_service.forgot_password(request_data.email)
    # Always the same response to prevent email enumeration
    return MessageResponse(
        message="If an account with this email exists, a password reset link has been sent."
    )


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth"))],
)
def reset_password(
    request_data: ResetPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Set a new password with a reset token."""
    auth_service.reset_password(request_data.token, request_data.password)
    return MessageResponse(message="Password has been successfully reset.")
