"""Product catalog schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import Field

from glowmate.models.product import Ingredient, Product
from glowmate.schemas.base import CamelModel

IngredientName = Annotated[str, Field(min_length=1, max_length=200)]
Tag = Annotated[str, Field(min_length=1, max_length=100)]


class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    brand: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=5000)
    ingredients: list[IngredientName] = Field(default_factory=list, max_length=200)
    tags: list[Tag] = Field(default_factory=list, max_length=50)
    image_url: str | None = Field(None, max_length=500)
    price: float | None = Field(None, ge=0)
    barcode: str | None = Field(None, min_length=1, max_length=64)


class ProductResponse(CamelModel):
    id: int
    barcode: str | None
    name: str
    brand: str | None
    category: str | None
    description: str | None
    ingredients: list[str]
    tags: list[str]
    image_url: str | None
    price: float | None
    average_rating: float
    review_count: int
    created_at: datetime

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            barcode=product.barcode,
            name=product.name,
            brand=product.brand,
            category=product.category,
            description=product.description,
            ingredients=list(product.ingredients or []),
            tags=list(product.tags or []),
            image_url=product.image_url,
            price=product.price,
            average_rating=product.average_rating or 0.0,
            review_count=product.review_count or 0,
            created_at=product.created_at,
        )


class PageMeta(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class ProductListResponse(CamelModel):
    data: list[ProductResponse]
    meta: PageMeta


class IngredientSuggestion(CamelModel):
    id: int
    name: str
    category: str | None

    @classmethod
    def from_ingredient(cls, ingredient: Ingredient) -> "IngredientSuggestion":
        return cls(id=ingredient.id, name=ingredient.name, category=ingredient.category)
