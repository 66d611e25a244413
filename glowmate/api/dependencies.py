"""FastAPI dependencies for authentication, services and rate limiting."""

from collections.abc import Callable
from functools import lru_cache
from typing import Annotated

import redis
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from glowmate.config import Settings, get_settings
from glowmate.database import get_db
from glowmate.errors import RateLimitExceededError, UnauthorizedError
from glowmate.models.user import User
from glowmate.services.auth import AuthService, decode_access_token
from glowmate.services.email import EmailNotifier
from glowmate.services.ingredients import IngredientService
from glowmate.services.product_lookup import ProductLookupClient
from glowmate.services.products import ProductService
from glowmate.services.rate_limit import RateLimiter
from glowmate.services.reviews import ReviewService
from glowmate.services.users import UserService
from glowmate.services.waitlist import WaitlistService

security = HTTPBearer(auto_error=False)


def get_email_notifier(settings: Annotated[Settings, Depends(get_settings)]) -> EmailNotifier:
    """Get email notifier instance."""
    return EmailNotifier(settings)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    notifier: Annotated[EmailNotifier, Depends(get_email_notifier)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, settings, notifier)


def get_waitlist_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    notifier: Annotated[EmailNotifier, Depends(get_email_notifier)],
) -> WaitlistService:
    """Get waitlist service with dependencies."""
    return WaitlistService(db, settings, notifier)


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    """Get user service with dependencies."""
    return UserService(db)


def get_product_lookup(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProductLookupClient:
    """Get external product lookup client."""
    return ProductLookupClient(settings)


def get_product_service(
    db: Annotated[Session, Depends(get_db)],
    lookup: Annotated[ProductLookupClient, Depends(get_product_lookup)],
) -> ProductService:
    """Get product service with dependencies."""
    return ProductService(db, lookup)


def get_review_service(db: Annotated[Session, Depends(get_db)]) -> ReviewService:
    """Get review service with dependencies."""
    return ReviewService(db)


def get_ingredient_service(db: Annotated[Session, Depends(get_db)]) -> IngredientService:
    return IngredientService(db)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Get the current authenticated user from the bearer token."""
    if credentials is None:
        raise UnauthorizedError()

    payload = decode_access_token(credentials.credentials, settings)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid or expired token") from None

    user = user_service.get_active_user(user_id)
    if user is None:
        raise UnauthorizedError("User not found")

    return user


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Get the shared rate limiter."""
    return RateLimiter(redis.from_url(get_settings().redis_url))


def rate_limit(scope: str) -> Callable[..., None]:
    """Build a dependency enforcing the configured limit for ``scope``.

    Scopes map onto ``<scope>_rate_limit`` / ``<scope>_rate_window_seconds``
    settings.
    """

    def check(
        request: Request,
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> None:
        if not settings.rate_limit_enabled:
            return
        limit = getattr(settings, f"{scope}_rate_limit")
        window = getattr(settings, f"{scope}_rate_window_seconds")
        client_ip = request.client.host if request.client else "unknown"
        if not get_rate_limiter().hit(scope, client_ip, limit, window):
            raise RateLimitExceededError()

    return check
