"""SQLAlchemy models."""

from glowmate.models.enums import PremiumTier, ProductSort, SkinType, TagMatch, TimeOfDay
from glowmate.models.product import Ingredient, Product
from glowmate.models.review import Review
from glowmate.models.routine import RoutineStep
from glowmate.models.tokens import PasswordResetToken, VerificationToken
from glowmate.models.user import User
from glowmate.models.waitlist import WaitlistEntry

__all__ = [
    "User",
    "VerificationToken",
    "PasswordResetToken",
    "WaitlistEntry",
    "Product",
    "Ingredient",
    "Review",
    "RoutineStep",
    "SkinType",
    "PremiumTier",
    "TimeOfDay",
    "ProductSort",
    "TagMatch",
]
