"""User model."""

from datetime import UTC

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from glowmate.database import Base
from glowmate.models.mixins import SoftDeleteMixin, TimestampMixin, utcnow


class User(Base, TimestampMixin, SoftDeleteMixin):
    """User account with its skin profile."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Case-sensitive as stored
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=True)
    # {"skinType": str, "skinConditions": [str], "allergens": [str]}
    skin_profile = Column(JSON, nullable=False, default=dict)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_premium = Column(Boolean, nullable=False, default=False)
    premium_expires_at = Column(DateTime(timezone=True), nullable=True)

    verification_tokens = relationship(
        "VerificationToken", back_populates="user", cascade="all, delete-orphan"
    )
    password_reset_tokens = relationship(
        "PasswordResetToken", back_populates="user", cascade="all, delete-orphan"
    )
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
    routine_steps = relationship(
        "RoutineStep", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def skin_type(self) -> str:
        return (self.skin_profile or {}).get("skinType") or "normal"

    @property
    def skin_conditions(self) -> list[str]:
        return (self.skin_profile or {}).get("skinConditions") or []

    @property
    def allergens(self) -> list[str]:
        return (self.skin_profile or {}).get("allergens") or []

    @property
    def has_active_premium(self) -> bool:
        """Premium is active while the flag is set and the expiry has not passed."""
        if not self.is_premium:
            return False
        if self.premium_expires_at is None:
            return True
        expires_at = self.premium_expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return expires_at > utcnow()
