"""
Pytest configuration and fixtures for user profile service tests.

This module provides:
- In-memory SQLite database fixtures
- A recording event sink
- Repository and service fixtures with a fixed "today"
- Factory helpers for accounts and entries
- API test client with gateway identity headers
"""

import uuid
from datetime import date
from typing import Any, Callable, Optional

import pytest
from sqlalchemy import StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from user_service.main import app
from user_service.api.deps import get_publisher
from user_service.config.settings import Settings, set_settings, reset_settings
from user_service.repositories.sqlalchemy.database import (
    Base,
    build_engine,
    get_db,
    reset_database,
)
# Import ORM models to register them with Base before creating tables
from user_service.repositories.sqlalchemy import orm_models  # noqa: F401
from user_service.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyEntryRepository,
)
from user_service.domain.models import Account, Collection
from user_service.core.timezone import now_utc
from user_service.services import AccountService, EntryService


# Fixed "today" for expiry rules in service tests
TODAY = date(2025, 6, 15)


# =============================================================================
# EVENT SINK
# =============================================================================


class RecordingEventSink:
    """Event sink that keeps every published event in memory."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any], Optional[str]]] = []

    def publish(self, topic: str, data: dict[str, Any], correlation_id: Optional[str] = None) -> bool:
        self.events.append((topic, data, correlation_id))
        return True

    def topics(self) -> list[str]:
        return [topic for topic, _, _ in self.events]


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at throwaway storage with events off."""
    settings = Settings(
        database_url="sqlite:///:memory:",
        data_dir=tmp_path,
        events_enabled=False,
    )
    set_settings(settings)
    reset_database()
    yield settings
    reset_database()
    reset_settings()


@pytest.fixture(scope="function")
def test_engine(test_settings):
    """Create test database engine with shared in-memory SQLite."""
    engine = build_engine("sqlite:///:memory:", timeout_seconds=5.0, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def account_repo(test_session) -> SqlAlchemyAccountRepository:
    """Provide test AccountRepository."""
    return SqlAlchemyAccountRepository(test_session)


@pytest.fixture
def payment_repo(test_session) -> SqlAlchemyEntryRepository:
    return SqlAlchemyEntryRepository(test_session, Collection.PAYMENT_METHODS)


@pytest.fixture
def address_repo(test_session) -> SqlAlchemyEntryRepository:
    return SqlAlchemyEntryRepository(test_session, Collection.ADDRESSES)


@pytest.fixture
def wishlist_repo(test_session) -> SqlAlchemyEntryRepository:
    return SqlAlchemyEntryRepository(test_session, Collection.WISHLIST)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


def _entry_service(collection, repo, account_repo, sink, settings) -> EntryService:
    return EntryService(
        collection=collection,
        entry_repo=repo,
        account_repo=account_repo,
        publisher=sink,
        settings=settings,
        today=lambda: TODAY,
    )


@pytest.fixture
def payment_service(payment_repo, account_repo, event_sink, test_settings) -> EntryService:
    """Provide payment method EntryService with today fixed to TODAY."""
    return _entry_service(Collection.PAYMENT_METHODS, payment_repo, account_repo, event_sink, test_settings)


@pytest.fixture
def address_service(address_repo, account_repo, event_sink, test_settings) -> EntryService:
    return _entry_service(Collection.ADDRESSES, address_repo, account_repo, event_sink, test_settings)


@pytest.fixture
def wishlist_service(wishlist_repo, account_repo, event_sink, test_settings) -> EntryService:
    return _entry_service(Collection.WISHLIST, wishlist_repo, account_repo, event_sink, test_settings)


@pytest.fixture
def account_service(account_repo, payment_repo, address_repo, wishlist_repo, event_sink) -> AccountService:
    """Provide test AccountService."""
    return AccountService(
        account_repo=account_repo,
        publisher=event_sink,
        entry_repos={
            Collection.ADDRESSES: address_repo,
            Collection.PAYMENT_METHODS: payment_repo,
            Collection.WISHLIST: wishlist_repo,
        },
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def account_factory(account_repo) -> Callable[..., Account]:
    """Factory for creating accounts directly in storage (no password hashing)."""

    def _create_account(
        email: Optional[str] = None,
        roles: Optional[list[str]] = None,
        password_hash: Optional[str] = None,
    ) -> Account:
        now = now_utc()
        return account_repo.create(
            Account(
                account_id=str(uuid.uuid4()),
                email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
                password_hash=password_hash,
                first_name="Test",
                last_name="User",
                roles=roles or ["customer"],
                created_at=now,
                updated_at=now,
            )
        )

    return _create_account


@pytest.fixture
def sample_account(account_factory) -> Account:
    return account_factory(email="jane@example.com")


def card_fields(**overrides) -> dict[str, Any]:
    """Stored fields of a visa credit card valid relative to TODAY."""
    fields = {
        "type": "credit_card",
        "provider": "visa",
        "last4": "4242",
        "expiry_month": 12,
        "expiry_year": TODAY.year + 2,
        "cardholder_name": "Jane Doe",
        "is_default": False,
        "is_active": True,
        "nickname": None,
    }
    fields.update(overrides)
    return fields


def address_fields(**overrides) -> dict[str, Any]:
    fields = {
        "type": "home",
        "address_line1": "1 Main St",
        "address_line2": None,
        "city": "Springfield",
        "state": "Illinois",
        "zip_code": "62701",
        "country": "United States",
        "phone": None,
        "is_default": False,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def legacy_expired_card(payment_repo, sample_account):
    """A default card stored under older rules, now expired."""
    return payment_repo.append(
        sample_account.account_id,
        card_fields(last4="1111", expiry_month=1, expiry_year=2020, cardholder_name="Old Card", is_default=True),
    )


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


def auth_headers(user_id: str, roles: str = "customer") -> dict[str, str]:
    """Identity headers as forwarded by the gateway."""
    return {"X-User-Id": user_id, "X-User-Roles": roles}


@pytest.fixture
def client(test_engine, event_sink) -> TestClient:
    """Provide FastAPI test client with test database and recording event sink."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_publisher] = lambda: event_sink
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def api_user(client) -> dict[str, Any]:
    """Register a customer through the API; returns the response body."""
    response = client.post(
        "/users",
        json={"email": "api.user@example.com", "password": "secret123", "firstName": "Api", "lastName": "User"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def user_headers(api_user) -> dict[str, str]:
    return auth_headers(api_user["id"])


@pytest.fixture
def admin_headers(account_factory) -> dict[str, str]:
    admin = account_factory(email="admin@example.com", roles=["admin"])
    return auth_headers(admin.account_id, roles="admin,customer")
