"""Review schemas."""

from datetime import datetime

from pydantic import Field, StrictInt

from glowmate.models.review import Review
from glowmate.schemas.base import CamelModel


class ReviewCreate(CamelModel):
    rating: StrictInt = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)


class ReviewUpdate(CamelModel):
    """Partial update; omitted fields keep their stored value."""

    rating: StrictInt | None = Field(None, ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)


class ReviewResponse(CamelModel):
    id: int
    user_id: int
    product_id: int
    rating: int
    comment: str | None
    created_at: datetime
    updated_at: datetime | None

    @classmethod
    def from_review(cls, review: Review) -> "ReviewResponse":
        return cls(
            id=review.id,
            user_id=review.user_id,
            product_id=review.product_id,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )


class ReviewAuthor(CamelModel):
    id: int
    name: str


class ProductReviewResponse(ReviewResponse):
    """Review as listed under its product, with the author's public name."""

    user: ReviewAuthor

    @classmethod
    def from_review(cls, review: Review) -> "ProductReviewResponse":
        base = ReviewResponse.from_review(review).model_dump()
        return cls(**base, user=ReviewAuthor(id=review.user.id, name=review.user.name))


class ReviewedProduct(CamelModel):
    id: int
    barcode: str | None
    name: str
    brand: str | None


class MyReviewResponse(ReviewResponse):
    """Review as listed for its author, with a product summary."""

    product: ReviewedProduct

    @classmethod
    def from_review(cls, review: Review) -> "MyReviewResponse":
        base = ReviewResponse.from_review(review).model_dump()
        product = review.product
        return cls(
            **base,
            product=ReviewedProduct(
                id=product.id, barcode=product.barcode, name=product.name, brand=product.brand
            ),
        )


class ProductReviewsPage(CamelModel):
    reviews: list[ProductReviewResponse]
    total: int
