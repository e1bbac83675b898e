"""
Shared test fixtures.

Sets up an isolated SQLite test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import os

# Must be set before the application modules build their engine.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from finance_tracker.main import app
from finance_tracker.events import EventBus
from finance_tracker.models.base import Base, get_db
from finance_tracker.models.enums import AccountKind, CategoryType
from finance_tracker.schemas.account import AccountCreate
from finance_tracker.schemas.category import CategoryCreate
from finance_tracker.schemas.profile import ProfileCreate
from finance_tracker.services.account_service import AccountService
from finance_tracker.services.category_service import CategoryService
from finance_tracker.services.profile_service import ProfileService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Data helpers ---

@pytest.fixture
def owner(db_session):
    """A committed profile to own test data."""
    profile = ProfileService(db_session).create_profile(
        ProfileCreate(email="owner@example.com", first_name="Test")
    )
    db_session.commit()
    return profile


@pytest.fixture
def make_account(db_session, owner):
    def _make(name="Wallet", balance="100.00", account_type=AccountKind.CASH):
        account = AccountService(db_session).create_account(
            owner.id,
            AccountCreate(
                name=name,
                account_type=account_type,
                balance=Decimal(balance),
            ),
        )
        db_session.commit()
        return account
    return _make


@pytest.fixture
def make_category(db_session, owner):
    def _make(name="Groceries", category_type=CategoryType.EXPENSE):
        category = CategoryService(db_session).create_category(
            owner.id,
            CategoryCreate(name=name, category_type=category_type),
        )
        db_session.commit()
        return category
    return _make


@pytest.fixture
def expense_category(make_category):
    return make_category("Groceries", CategoryType.EXPENSE)


@pytest.fixture
def income_category(make_category):
    return make_category("Salary", CategoryType.INCOME)


@pytest.fixture
def override_dependency():
    """Swap one app dependency for the duration of a test."""
    overridden = []

    def _override(dependency, value):
        app.dependency_overrides[dependency] = lambda: value
        overridden.append(dependency)

    yield _override
    for dependency in overridden:
        app.dependency_overrides.pop(dependency, None)

