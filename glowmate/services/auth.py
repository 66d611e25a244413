"""Account lifecycle: registration, verification, login and password reset."""

import hashlib
import hmac
import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from glowmate.config import Settings
from glowmate.errors import (
    DuplicateError,
    EmailNotVerifiedError,
    ExpiredTokenError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from glowmate.models.tokens import PasswordResetToken, VerificationToken
from glowmate.models.user import User
from glowmate.schemas.auth import UserRegister
from glowmate.services.email import EmailNotifier
from glowmate.services.tokens import expiry_from, is_expired, issue_token

logger = logging.getLogger(__name__)

# Password hashing context (argon2id)
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def _apply_pepper(password: str, pepper: str | None) -> str:
    if not pepper:
        return password
    return hmac.new(pepper.encode(), password.encode(), hashlib.sha256).hexdigest()


def verify_password(plain_password: str, hashed_password: str, pepper: str | None = None) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(_apply_pepper(plain_password, pepper), hashed_password)


def get_password_hash(password: str, pepper: str | None = None) -> str:
    """Hash a password."""
    return pwd_context.hash(_apply_pepper(password, pepper))


def create_access_token(user_id: int, email: str, settings: Settings) -> str:
    """Create a JWT access token."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


class AuthService:
    """Service for account registration and credential management."""

    def __init__(self, db: Session, settings: Settings, notifier: EmailNotifier):
        self.db = db
        self.settings = settings
        self.notifier = notifier

    def get_user_by_email(self, email: str, include_deleted: bool = False) -> User | None:
        """Get a user by exact email match."""
        query = self.db.query(User).filter(User.email == email)
        if not include_deleted:
            query = query.filter(User.deleted_at.is_(None))
        return query.first()

    def register(self, data: UserRegister) -> tuple[User, str]:
        """Create a user with a pending verification token.

        The user row and its verification token are committed together. The
        verification email is sent afterwards and a delivery failure does not
        undo the registration.

        Returns:
            The new user and a session credential for it.
        """
        # Soft-deleted accounts still own their email address
        if self.get_user_by_email(data.email, include_deleted=True):
            raise DuplicateError()

        user = User(
            email=data.email,
            password_hash=get_password_hash(data.password, self.settings.password_pepper),
            name=data.name,
            age=data.age,
            skin_profile={
                "skinType": data.skin_type.value,
                "skinConditions": data.skin_conditions or [],
                "allergens": data.allergens or [],
            },
            is_verified=False,
        )
        try:
            self.db.add(user)
            self.db.flush()
            verification_token = self._add_verification_token(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError() from None
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to create user account")
            raise InternalError("Unable to create account. Please try again later.") from e

        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")

        outcome = self.notifier.send_verification_email(user.email, verification_token)
        if not outcome.delivered:
            logger.warning(f"Verification email for user {user.id} not delivered: {outcome.error}")

        return user, create_access_token(user.id, user.email, self.settings)

    def _add_verification_token(self, user: User) -> str:
        """Stage a verification token for ``user`` in the current transaction."""
        token = issue_token()
        expires_at = expiry_from(
            datetime.now(UTC), timedelta(hours=self.settings.verification_token_ttl_hours)
        )
        self.db.add(VerificationToken(user_id=user.id, token=token, expires_at=expires_at))
        self.db.flush()
        return token

    def verify_email(self, token: str) -> None:
        """Consume a verification token and mark its user verified.

        Expired tokens are rejected but left in place.
        """
        record = self.db.query(VerificationToken).filter(VerificationToken.token == token).first()
        if record is None:
            raise InvalidTokenError()
        if is_expired(record.expires_at):
            raise ExpiredTokenError()

        user_id = record.user_id
        # A concurrent submit of the same token deletes nothing here
        deleted = (
            self.db.query(VerificationToken)
            .filter(VerificationToken.id == record.id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            self.db.rollback()
            raise InvalidTokenError()

        self.db.query(User).filter(User.id == user_id).update(
            {User.is_verified: True}, synchronize_session=False
        )
        self.db.commit()
        self.db.expire_all()
        logger.info(f"Verified email for user {user_id}")

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and issue a session credential.

        Unknown, soft-deleted and wrong-password logins fail identically.
        """
        user = self.get_user_by_email(email)
        if user is None:
            # Keep timing close to a real verification
            pwd_context.dummy_verify()
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash, self.settings.password_pepper):
            raise InvalidCredentialsError()

        if self.settings.require_verified_login and not user.is_verified:
            raise EmailNotVerifiedError()

        return user, create_access_token(user.id, user.email, self.settings)

    def forgot_password(self, email: str) -> None:
        """Issue a reset token and email it if an active account matches.

        Never reports whether the account exists.
        """
        user = self.get_user_by_email(email)
        if user is None:
            return

        token = issue_token()
        expires_at = expiry_from(
            datetime.now(UTC), timedelta(minutes=self.settings.password_reset_token_ttl_minutes)
        )
        self.db.add(PasswordResetToken(user_id=user.id, token=token, expires_at=expires_at))
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to create password reset token for user {user.id}")
            return

        outcome = self.notifier.send_password_reset_email(user.email, token)
        if not outcome.delivered:
            logger.warning(
                f"Password reset email for user {user.id} not delivered: {outcome.error}"
            )

    def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using an unused, unexpired reset token.

        The password change and the token consumption commit together.
        """
        now = datetime.now(UTC)
        record = (
            self.db.query(PasswordResetToken)
            .filter(
                PasswordResetToken.token == token,
                PasswordResetToken.used_at.is_(None),
                PasswordResetToken.expires_at > now,
            )
            .first()
        )
        if record is None:
            raise InvalidTokenError()

        user_id = record.user_id
        password_hash = get_password_hash(new_password, self.settings.password_pepper)
        try:
            claimed = (
                self.db.query(PasswordResetToken)
                .filter(PasswordResetToken.id == record.id, PasswordResetToken.used_at.is_(None))
                .update({PasswordResetToken.used_at: now}, synchronize_session=False)
            )
            if not claimed:
                self.db.rollback()
                raise InvalidTokenError()
            self.db.query(User).filter(User.id == user_id).update(
                {User.password_hash: password_hash}, synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to reset password for user {user_id}")
            raise InternalError("Unable to reset password. Please try again later.") from e

        self.db.expire_all()
        logger.info(f"Password reset for user {user_id}")
