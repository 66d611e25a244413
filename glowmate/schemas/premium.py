"""Premium subscription schemas."""

from datetime import datetime

from pydantic import Field

from glowmate.models.enums import PremiumTier
from glowmate.schemas.base import CamelModel


class SubscribeRequest(CamelModel):
    tier: PremiumTier
    payment_method: str | None = Field(None, max_length=50)


class SubscribeResponse(CamelModel):
    message: str
    tier: PremiumTier
    expires_at: datetime
