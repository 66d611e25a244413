"""User profile and premium subscription operations."""

import calendar
import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from glowmate.errors import ValidationError
from glowmate.models.enums import PremiumTier, TimeOfDay
from glowmate.models.product import Product
from glowmate.models.routine import RoutineStep
from glowmate.models.user import User
from glowmate.schemas.user import SkincareRoutine, UserUpdate

logger = logging.getLogger(__name__)


def add_months(moment: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class UserService:
    """Service for the authenticated user's own account."""

    def __init__(self, db: Session):
        self.db = db

    def get_active_user(self, user_id: int) -> User | None:
        """Get a user that has not been soft-deleted."""
        return (
            self.db.query(User)
            .filter(User.id == user_id, User.deleted_at.is_(None))
            .first()
        )

    def update_profile(self, user: User, data: UserUpdate) -> User:
        """Apply a partial profile update, merging the skin profile."""
        if data.name is not None:
            user.name = data.name
        if data.age is not None:
            user.age = data.age

        skin_fields = (data.skin_type, data.skin_conditions, data.allergens)
        if any(field is not None for field in skin_fields):
            current = dict(user.skin_profile or {})
            # Assign a new dict so the JSON column is flagged dirty
            user.skin_profile = {
                "skinType": data.skin_type.value if data.skin_type else current.get("skinType"),
                "skinConditions": (
                    data.skin_conditions
                    if data.skin_conditions is not None
                    else current.get("skinConditions", [])
                ),
                "allergens": (
                    data.allergens if data.allergens is not None else current.get("allergens", [])
                ),
            }

        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_account(self, user: User) -> None:
        """Soft delete the account; it can no longer log in or be looked up."""
        user.soft_delete()
        self.db.commit()
        logger.info(f"Soft-deleted user {user.id}")

    def subscribe_premium(self, user: User, tier: PremiumTier) -> datetime:
        """Activate premium for one billing period.

        Payment is mocked; the subscription simply starts now.
        """
        expires_at = add_months(datetime.now(UTC), tier.months)
        user.is_premium = True
        user.premium_expires_at = expires_at
        self.db.commit()
        logger.info(f"User {user.id} subscribed to {tier.value} premium")
        return expires_at

    def get_routine(self, user: User) -> SkincareRoutine:
        """Product ids of the morning and evening routines, in order."""
        steps = (
            self.db.query(RoutineStep)
            .filter(RoutineStep.user_id == user.id)
            .order_by(RoutineStep.position.asc(), RoutineStep.id.asc())
            .all()
        )
        return SkincareRoutine(
            morning=[s.product_id for s in steps if s.time_of_day == TimeOfDay.MORNING.value],
            evening=[s.product_id for s in steps if s.time_of_day == TimeOfDay.EVENING.value],
        )

    def replace_routine(self, user: User, routine: SkincareRoutine) -> None:
        """Replace both routine slots in one transaction."""
        wanted = set(routine.morning) | set(routine.evening)
        if wanted:
            found = self.db.query(Product.id).filter(Product.id.in_(wanted)).count()
            if found != len(wanted):
                raise ValidationError(details="One or more product IDs are invalid")

        self.db.query(RoutineStep).filter(RoutineStep.user_id == user.id).delete()
        for time_of_day, product_ids in (
            (TimeOfDay.MORNING, routine.morning),
            (TimeOfDay.EVENING, routine.evening),
        ):
            for position, product_id in enumerate(product_ids):
                self.db.add(
                    RoutineStep(
                        user_id=user.id,
                        product_id=product_id,
                        time_of_day=time_of_day.value,
                        position=position,
                    )
                )
        self.db.commit()
        logger.info(f"Updated skincare routine for user {user.id}")
