"""Authentication schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import EmailStr, Field, StrictInt

from glowmate.models.enums import SkinType
from glowmate.models.user import User
from glowmate.schemas.base import CamelModel

SkinCondition = Annotated[str, Field(max_length=50)]
Allergen = Annotated[str, Field(max_length=100)]


class UserRegister(CamelModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    age: StrictInt = Field(..., ge=13, le=120)
    skin_type: SkinType
    skin_conditions: list[SkinCondition] | None = Field(None, max_length=10)
    allergens: list[Allergen] | None = Field(None, max_length=20)


class UserLogin(CamelModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr = Field(..., max_length=255)


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=8, max_length=128)


class UserResponse(CamelModel):
    """Public projection of a user; never includes the password hash."""

    id: int
    email: str
    name: str
    age: int
    skin_type: str
    skin_conditions: list[str]
    allergens: list[str]
    is_premium: bool
    is_verified: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            age=user.age or 0,
            skin_type=user.skin_type,
            skin_conditions=user.skin_conditions,
            allergens=user.allergens,
            is_premium=user.has_active_premium,
            is_verified=bool(user.is_verified),
            created_at=user.created_at,
        )


class AuthResponse(CamelModel):
    """Session credential plus the authenticated user."""

    token: str
    user: UserResponse
    message: str | None = None
