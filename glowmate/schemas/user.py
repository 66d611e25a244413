"""User profile schemas."""

from pydantic import Field, StrictInt

from glowmate.models.enums import SkinType
from glowmate.schemas.auth import Allergen, SkinCondition
from glowmate.schemas.base import CamelModel


class UserUpdate(CamelModel):
    """Partial profile update; omitted fields keep their stored value."""

    name: str | None = Field(None, min_length=1, max_length=100)
    age: StrictInt | None = Field(None, ge=13, le=120)
    skin_type: SkinType | None = None
    skin_conditions: list[SkinCondition] | None = Field(None, max_length=10)
    allergens: list[Allergen] | None = Field(None, max_length=20)


class SkincareRoutine(CamelModel):
    """Ordered product ids for each routine slot."""

    morning: list[StrictInt] = Field(..., max_length=20)
    evening: list[StrictInt] = Field(..., max_length=20)
