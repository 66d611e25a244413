"""Pytest configuration and fixtures."""

import os

# Settings are cached on first import, so the test environment goes first
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RESEND_API_KEY"] = ""
os.environ["PRODUCT_LOOKUP_ENABLED"] = "false"
os.environ.setdefault("ENVIRONMENT", "development")

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from glowmate.api.dependencies import get_email_notifier, get_product_lookup  # noqa: E402
from glowmate.config import get_settings  # noqa: E402
from glowmate.database import Base, get_db  # noqa: E402
from glowmate.main import app  # noqa: E402
from glowmate.models.product import Ingredient, Product  # noqa: E402
from glowmate.models.user import User  # noqa: E402
from glowmate.services.auth import create_access_token, get_password_hash  # noqa: E402
from glowmate.services.email import EmailNotifier, NotificationOutcome  # noqa: E402
from glowmate.services.product_lookup import ProductLookupClient  # noqa: E402

REGISTER_PAYLOAD = {
    "email": "test@example.com",
    "password": "testpass123",
    "name": "Test User",
    "age": 28,
    "skinType": "combination",
    "skinConditions": ["acne"],
    "allergens": ["fragrance"],
}


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/glowmate", "/glowmate_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def notifier(client):
    """Replace the email gateway with a mock that reports delivery."""
    mock = MagicMock(spec=EmailNotifier)
    delivered = NotificationOutcome(delivered=True)
    mock.send_verification_email.return_value = delivered
    mock.send_password_reset_email.return_value = delivered
    mock.send_waitlist_verification_email.return_value = delivered
    app.dependency_overrides[get_email_notifier] = lambda: mock
    return mock


@pytest.fixture
def make_user(db):
    """Factory inserting a user directly into the database."""

    def _make_user(
        email: str = "user@example.com",
        password: str = "password123",
        **kwargs,
    ) -> User:
        user = User(
            email=email,
            password_hash=get_password_hash(password),
            name=kwargs.pop("name", "Existing User"),
            age=kwargs.pop("age", 30),
            skin_profile=kwargs.pop(
                "skin_profile", {"skinType": "dry", "skinConditions": [], "allergens": []}
            ),
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers(client, notifier):
    """Create a user and return auth headers with user info."""
    response = client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    data = response.json()
    token = data["token"]
    user_id = data["user"]["id"]

    return AuthHeaders(
        {"Authorization": f"Bearer {token}"}, user_id=user_id, email=REGISTER_PAYLOAD["email"]
    )


@pytest.fixture
def user_headers(make_user, settings):
    """Factory returning auth headers for a directly inserted user."""

    def _user_headers(email: str = "other@example.com", **kwargs) -> AuthHeaders:
        user = make_user(email=email, **kwargs)
        token = create_access_token(user.id, user.email, settings)
        return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user.id, email=email)

    return _user_headers


@pytest.fixture
def product_lookup(client):
    """Replace the external product database with a mock that finds nothing."""
    mock = MagicMock(spec=ProductLookupClient)
    mock.fetch.return_value = None
    app.dependency_overrides[get_product_lookup] = lambda: mock
    return mock


@pytest.fixture
def make_product(db):
    """Factory inserting a catalog product directly into the database."""

    def _make_product(name: str = "Gentle Cleanser", **kwargs) -> Product:
        product = Product(
            name=name,
            brand=kwargs.pop("brand", "CeraVe"),
            category=kwargs.pop("category", "Cleanser"),
            ingredients=kwargs.pop("ingredients", ["Water", "Glycerin"]),
            tags=kwargs.pop("tags", []),
            price=kwargs.pop("price", 12.5),
            **kwargs,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make_product


@pytest.fixture
def make_ingredient(db):
    def _make_ingredient(name: str, category: str | None = None) -> Ingredient:
        ingredient = Ingredient(name=name, category=category)
        db.add(ingredient)
        db.commit()
        db.refresh(ingredient)
        return ingredient

    return _make_ingredient
