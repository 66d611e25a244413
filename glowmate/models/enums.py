"""Enums for model fields."""

from enum import Enum


class SkinType(str, Enum):
    """Skin types a user can pick during registration."""

    NORMAL = "normal"
    DRY = "dry"
    OILY = "oily"
    COMBINATION = "combination"
    SENSITIVE = "sensitive"
    MATURE = "mature"


class PremiumTier(str, Enum):
    """Premium subscription billing periods."""

    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        """Number of calendar months one payment covers."""
        return 12 if self is PremiumTier.YEARLY else 1


class TimeOfDay(str, Enum):
    """Slot of a skincare routine step."""

    MORNING = "morning"
    EVENING = "evening"


class ProductSort(str, Enum):
    """Orderings offered by the product catalog."""

    RATING_DESC = "rating_desc"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"


class TagMatch(str, Enum):
    """How a multi-tag product filter combines its tags."""

    ANY = "any"
    ALL = "all"
