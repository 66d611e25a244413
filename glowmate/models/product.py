"""Product catalog and ingredient dictionary models."""

from sqlalchemy import JSON, Boolean, Column, Float, Integer, String, Text
from sqlalchemy.orm import relationship

from glowmate.database import Base
from glowmate.models.mixins import TimestampMixin


class Product(Base, TimestampMixin):
    """A skincare product.

    ``average_rating`` and ``review_count`` are denormalized from the product's
    reviews and rewritten whenever a review changes.
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    barcode = Column(String(64), unique=True, nullable=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    brand = Column(String(100), nullable=True, index=True)
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    # Ingredient names in label order
    ingredients = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500), nullable=True)
    price = Column(Float, nullable=True)
    average_rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    reviews = relationship("Review", back_populates="product", cascade="all, delete-orphan")

    def contains_ingredient(self, name: str) -> bool:
        """Case-insensitive membership test against the ingredient list."""
        wanted = name.strip().lower()
        return any(str(item).strip().lower() == wanted for item in self.ingredients or [])

    def has_tag(self, tag: str) -> bool:
        wanted = tag.strip().lower()
        return any(str(existing).strip().lower() == wanted for existing in self.tags or [])


class Ingredient(Base):
    """Reference entry used for ingredient autocomplete."""

    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    category = Column(String(100), nullable=True)
    is_common_allergen = Column(Boolean, nullable=False, default=False)
