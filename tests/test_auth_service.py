"""Tests for AuthService behaviour not visible through the API."""

from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from glowmate.errors import DuplicateError, InternalError, InvalidCredentialsError
from glowmate.models import User, VerificationToken
from glowmate.models.enums import SkinType
from glowmate.schemas.auth import UserRegister
from glowmate.services.auth import (
    AuthService,
    get_password_hash,
    verify_password,
)


@pytest.fixture
def auth_service(db, settings, notifier):
    return AuthService(db, settings, notifier)


def _registration(email="service@example.com", password="servicepass"):
    return UserRegister(
        email=email,
        password=password,
        name="Service User",
        age=35,
        skin_type=SkinType.SENSITIVE,
    )


class TestRegister:
    def test_token_failure_leaves_no_user(self, auth_service, db, notifier):
        """A user is never stored without its verification token."""
        with patch.object(
            AuthService, "_add_verification_token", side_effect=SQLAlchemyError("boom")
        ):
            with pytest.raises(InternalError):
                auth_service.register(_registration())

        assert db.query(User).count() == 0
        assert db.query(VerificationToken).count() == 0
        notifier.send_verification_email.assert_not_called()

    def test_duplicate_of_soft_deleted_account(self, auth_service, make_user):
        make_user(email="service@example.com", deleted_at=datetime.now(UTC))
        with pytest.raises(DuplicateError):
            auth_service.register(_registration())

    def test_skin_profile_stored_as_document(self, auth_service):
        user, _ = auth_service.register(_registration())
        assert user.skin_profile == {
            "skinType": "sensitive",
            "skinConditions": [],
            "allergens": [],
        }
        assert user.skin_type == "sensitive"


class TestPasswords:
    def test_hash_is_salted(self):
        assert get_password_hash("samepassword") != get_password_hash("samepassword")

    def test_pepper_changes_verification(self):
        hashed = get_password_hash("pepperedpass", pepper="secret-pepper")
        assert verify_password("pepperedpass", hashed, pepper="secret-pepper")
        assert not verify_password("pepperedpass", hashed)
        assert not verify_password("pepperedpass", hashed, pepper="other-pepper")

    def test_login_with_pepper(self, db, settings, notifier):
        peppered = settings.model_copy(update={"password_pepper": "secret-pepper"})
        service = AuthService(db, peppered, notifier)
        service.register(_registration())

        user, token = service.login("service@example.com", "servicepass")
        assert user.email == "service@example.com"
        assert token

        unpeppered = AuthService(db, settings, notifier)
        with pytest.raises(InvalidCredentialsError):
            unpeppered.login("service@example.com", "servicepass")
