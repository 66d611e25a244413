"""Waitlist entry model."""

from sqlalchemy import Boolean, Column, Index, Integer, String

from glowmate.database import Base
from glowmate.models.mixins import TimestampMixin

REFERRAL_CODE_MAX_LENGTH = 20


class WaitlistEntry(Base, TimestampMixin):
    """A spot on the pre-launch waitlist.

    ``referred_by`` holds the referrer's referral code as a plain label, not a
    foreign key. Ranking position is derived from ``points`` and ``created_at``
    and never stored.
    """

    __tablename__ = "waitlist_entries"
    __table_args__ = (Index("ix_waitlist_entries_points_created_at", "points", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    referral_code = Column(
        String(REFERRAL_CODE_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    referred_by = Column(String(REFERRAL_CODE_MAX_LENGTH), nullable=True)
    points = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(64), unique=True, nullable=True)
