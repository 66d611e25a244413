"""Product reviews and the rating aggregates they maintain."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from glowmate.errors import DuplicateError, ForbiddenError, NotFoundError
from glowmate.models.product import Product
from glowmate.models.review import Review
from glowmate.models.user import User
from glowmate.schemas.review import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for review operations."""

    def __init__(self, db: Session):
        self.db = db

    def _get_product(self, barcode: str) -> Product:
        product = self.db.query(Product).filter(Product.barcode == barcode).first()
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def _get_owned_review(self, review_id: int, user: User, action: str) -> Review:
        """Get a review by ID, checking that ``user`` wrote it."""
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if review is None:
            raise NotFoundError("Review not found")
        if review.user_id != user.id:
            raise ForbiddenError(f"You can only {action} your own reviews")
        return review

    def _refresh_product_stats(self, product_id: int) -> None:
        """Recompute the product's average rating and review count.

        Runs inside the caller's transaction so the aggregates commit together
        with the review change.
        """
        self.db.flush()
        average, count = (
            self.db.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.product_id == product_id)
            .one()
        )
        product = self.db.query(Product).filter(Product.id == product_id).one()
        product.average_rating = float(average or 0)
        product.review_count = count

    def list_for_user(self, user: User) -> list[Review]:
        """The user's reviews, newest first."""
        return (
            self.db.query(Review)
            .options(joinedload(Review.product))
            .filter(Review.user_id == user.id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    def list_for_product(
        self, barcode: str, limit: int = 20, offset: int = 0
    ) -> tuple[list[Review], int]:
        """One page of a product's reviews, newest first, plus the total."""
        product = self._get_product(barcode)
        query = self.db.query(Review).filter(Review.product_id == product.id)
        total = query.count()
        reviews = (
            query.options(joinedload(Review.user))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return reviews, total

    def create(self, user: User, barcode: str, data: ReviewCreate) -> Review:
        """Review a product; each user may review a product once."""
        product = self._get_product(barcode)
        existing = (
            self.db.query(Review)
            .filter(Review.user_id == user.id, Review.product_id == product.id)
            .first()
        )
        if existing is not None:
            raise DuplicateError("You have already reviewed this product", code="DUPLICATE_REVIEW")

        review = Review(
            user_id=user.id, product_id=product.id, rating=data.rating, comment=data.comment
        )
        self.db.add(review)
        try:
            self._refresh_product_stats(product.id)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError(
                "You have already reviewed this product", code="DUPLICATE_REVIEW"
            ) from None

        self.db.refresh(review)
        logger.info(f"User {user.id} reviewed product {product.id}")
        return review

    def update(self, user: User, review_id: int, data: ReviewUpdate) -> Review:
        """Change rating or comment of one of the user's reviews."""
        review = self._get_owned_review(review_id, user, "edit")
        fields = data.model_fields_set
        if "rating" in fields and data.rating is not None:
            review.rating = data.rating
        if "comment" in fields:
            review.comment = data.comment
        self._refresh_product_stats(review.product_id)
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete(self, user: User, review_id: int) -> None:
        """Remove one of the user's reviews."""
        review = self._get_owned_review(review_id, user, "delete")
        product_id = review.product_id
        self.db.delete(review)
        self._refresh_product_stats(product_id)
        self.db.commit()
        logger.info(f"User {user.id} deleted review {review_id}")
