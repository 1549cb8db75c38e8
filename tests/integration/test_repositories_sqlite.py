"""
Integration tests for SQLAlchemy repositories with SQLite.

Tests cover:
- Account repository CRUD and cascade delete
- Entry repository scoped writes (append, update_fields, pull)
- Sibling default clearing touches only is_default
- Database-level single-default and unique-product constraints
- No column for raw card numbers or CVV
"""

import pytest
from sqlalchemy import inspect, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from user_service.core.exceptions import ConflictError, NotFoundError, StorageError
from user_service.domain.models import Account, Collection
from user_service.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyEntryRepository,
)
from user_service.repositories.sqlalchemy.database import Base, build_engine
from user_service.repositories.sqlalchemy.orm_models import PaymentMethodORM
from user_service.core.timezone import now_utc

from tests.conftest import address_fields, card_fields


# =============================================================================
# ACCOUNT REPOSITORY TESTS
# =============================================================================


class TestAccountRepository:
    """Tests for SqlAlchemyAccountRepository."""

    def test_create_account_persists(self, account_repo: SqlAlchemyAccountRepository):
        """
        GIVEN an in-memory SQLite database
        WHEN I create an account
        THEN the account can be retrieved by ID and by email
        """
        account_repo.create(Account(account_id="acc-001", email="jane@example.com", first_name="Jane"))

        by_id = account_repo.get_by_id("acc-001")
        by_email = account_repo.get_by_email("Jane@Example.com")

        assert by_id is not None
        assert by_id.first_name == "Jane"
        assert by_id.roles == ["customer"]
        assert by_email.account_id == "acc-001"
        assert account_repo.exists("acc-001")
        assert not account_repo.exists("acc-002")

    def test_duplicate_email_is_conflict(self, account_repo: SqlAlchemyAccountRepository):
        account_repo.create(Account(account_id="acc-001", email="jane@example.com"))

        with pytest.raises(ConflictError) as exc_info:
            account_repo.create(Account(account_id="acc-002", email="jane@example.com"))

        assert exc_info.value.code == "EMAIL_EXISTS"
        # Session is usable after the rollback
        assert account_repo.get_by_id("acc-001") is not None

    def test_update_fields_writes_only_given_columns(self, account_repo: SqlAlchemyAccountRepository):
        account_repo.create(Account(account_id="acc-001", email="jane@example.com", first_name="Jane", last_name="Doe"))

        updated = account_repo.update_fields("acc-001", {"first_name": "Janet"})

        assert updated.first_name == "Janet"
        assert updated.last_name == "Doe"
        assert account_repo.update_fields("missing", {"first_name": "X"}) is None

    def test_delete_cascades_to_owned_collections(
        self,
        account_repo: SqlAlchemyAccountRepository,
        payment_repo: SqlAlchemyEntryRepository,
        address_repo: SqlAlchemyEntryRepository,
    ):
        account_repo.create(Account(account_id="acc-001", email="jane@example.com"))
        payment_repo.append("acc-001", card_fields())
        address_repo.append("acc-001", address_fields())

        assert account_repo.delete("acc-001") is True

        assert account_repo.get_by_id("acc-001") is None
        assert payment_repo.list_by_account("acc-001") == []
        assert address_repo.list_by_account("acc-001") == []
        assert account_repo.delete("acc-001") is False

    def test_list_all_paginates(self, account_factory, account_repo: SqlAlchemyAccountRepository):
        for _ in range(5):
            account_factory()

        assert len(account_repo.list_all(limit=3)) == 3
        assert len(account_repo.list_all(limit=3, offset=3)) == 2


# =============================================================================
# ENTRY REPOSITORY TESTS
# =============================================================================


class TestEntryRepository:
    """Tests for SqlAlchemyEntryRepository."""

    def test_append_assigns_id_position_and_timestamps(self, payment_repo, sample_account):
        entry = payment_repo.append(sample_account.account_id, card_fields())

        assert entry.entry_id
        assert entry.account_id == sample_account.account_id
        assert entry.created_at is not None
        assert entry.stored_fields() == card_fields()

    def test_append_default_clears_siblings(self, payment_repo, sample_account):
        """
        GIVEN a default payment method
        WHEN another is appended with clear_other_defaults
        THEN exactly one default remains
        """
        account_id = sample_account.account_id
        first = payment_repo.append(account_id, card_fields(is_default=True))
        second = payment_repo.append(account_id, card_fields(is_default=True), clear_other_defaults=True)

        assert payment_repo.count_defaults(account_id) == 1
        assert payment_repo.get(account_id, first.entry_id).is_default is False
        assert payment_repo.get(account_id, second.entry_id).is_default is True

    def test_second_default_without_clearing_is_rejected(self, payment_repo, sample_account):
        """
        GIVEN a default payment method
        WHEN a second default is written without clearing siblings
        THEN the partial unique index rejects it as a conflict
        """
        account_id = sample_account.account_id
        payment_repo.append(account_id, card_fields(is_default=True))

        with pytest.raises(ConflictError) as exc_info:
            payment_repo.append(account_id, card_fields(is_default=True))

        assert exc_info.value.code == "DEFAULT_CONFLICT"
        assert len(payment_repo.list_by_account(account_id)) == 1

    def test_sibling_clear_touches_only_is_default(self, payment_repo, sample_account):
        """
        GIVEN a stored default entry with a stale updated_at
        WHEN another entry becomes the default
        THEN the sibling's other columns, including updated_at, are unchanged
        """
        account_id = sample_account.account_id
        sibling = payment_repo.append(account_id, card_fields(is_default=True, nickname="Old"))
        target = payment_repo.append(account_id, card_fields())
        stale = sibling.updated_at

        payment_repo.update_fields(account_id, target.entry_id, {"is_default": True}, clear_other_defaults=True)

        after = payment_repo.get(account_id, sibling.entry_id)
        assert after.is_default is False
        assert after.updated_at == stale
        assert after.nickname == "Old"
        assert {k: v for k, v in after.stored_fields().items() if k != "is_default"} == {
            k: v for k, v in sibling.stored_fields().items() if k != "is_default"
        }

    def test_update_fields_leaves_other_columns(self, address_repo, sample_account):
        entry = address_repo.append(sample_account.account_id, address_fields())

        updated = address_repo.update_fields(sample_account.account_id, entry.entry_id, {"city": "Chicago"})

        assert updated.city == "Chicago"
        assert updated.address_line1 == entry.address_line1

    def test_update_fields_ignores_unknown_columns(self, address_repo, sample_account):
        entry = address_repo.append(sample_account.account_id, address_fields())

        updated = address_repo.update_fields(
            sample_account.account_id, entry.entry_id, {"city": "Chicago", "card_number": "4111"}
        )

        assert updated.city == "Chicago"

    def test_update_missing_returns_none(self, address_repo, sample_account):
        assert address_repo.update_fields(sample_account.account_id, "nope", {"city": "Chicago"}) is None

    def test_pull_does_not_promote(self, payment_repo, sample_account):
        account_id = sample_account.account_id
        remaining = payment_repo.append(account_id, card_fields())
        default = payment_repo.append(account_id, card_fields(is_default=True))

        assert payment_repo.pull(account_id, default.entry_id) is True

        assert payment_repo.count_defaults(account_id) == 0
        assert payment_repo.get(account_id, remaining.entry_id).is_default is False
        assert payment_repo.pull(account_id, default.entry_id) is False

    def test_pull_is_scoped_to_account(self, payment_repo, account_factory):
        owner = account_factory()
        other = account_factory()
        entry = payment_repo.append(owner.account_id, card_fields())

        assert payment_repo.pull(other.account_id, entry.entry_id) is False
        assert payment_repo.get(owner.account_id, entry.entry_id) is not None

    def test_legacy_rows_are_read_as_stored(self, payment_repo, sample_account, test_session: Session):
        """
        GIVEN a row that breaks current rules (expired, digits in the cardholder name)
        WHEN it is read
        THEN it is returned as stored without validation
        """
        entry = payment_repo.append(sample_account.account_id, card_fields(expiry_month=1, expiry_year=2019))
        test_session.execute(
            update(PaymentMethodORM)
            .where(PaymentMethodORM.entry_id == entry.entry_id)
            .values(cardholder_name="J0hn 3rd", updated_at=now_utc())
        )
        test_session.commit()

        [stored] = payment_repo.list_by_account(sample_account.account_id)
        assert stored.cardholder_name == "J0hn 3rd"
        assert stored.expiry_year == 2019

    def test_wishlist_product_unique_per_account(self, wishlist_repo, sample_account):
        item = {"product_id": "p-1", "product_name": "Lamp", "product_price": 10.0}
        wishlist_repo.append(sample_account.account_id, item)

        with pytest.raises(ConflictError) as exc_info:
            wishlist_repo.append(sample_account.account_id, item)

        assert exc_info.value.code == "PRODUCT_ALREADY_IN_WISHLIST"
        assert wishlist_repo.find_by(sample_account.account_id, "product_id", "p-1") is not None

    def test_wishlist_has_no_default_count(self, wishlist_repo, sample_account):
        assert wishlist_repo.count_defaults(sample_account.account_id) == 0
        assert wishlist_repo.collection == Collection.WISHLIST


def test_payment_table_has_no_sensitive_columns(test_engine):
    """
    GIVEN the created schema
    WHEN the payment_methods columns are inspected
    THEN no column can hold a card number or CVV
    """
    columns = {c["name"] for c in inspect(test_engine).get_columns("payment_methods")}

    assert "last4" in columns
    assert not columns & {"card_number", "cvv", "cvc"}


# =============================================================================
# CONSTRAINT AND FAILURE MAPPING
# =============================================================================


class TestWriteFailures:
    """Constraint violations and storage failures surface as service errors."""

    def test_append_for_missing_account_is_not_found(self, payment_repo):
        """
        GIVEN no account with the given id
        WHEN an entry is appended for it
        THEN the foreign key violation is reported as USER_NOT_FOUND, not as a default conflict
        """
        with pytest.raises(NotFoundError) as exc_info:
            payment_repo.append("no-such-account", card_fields())

        assert exc_info.value.code == "USER_NOT_FOUND"

    def test_failed_commit_rolls_back_sibling_clear(
        self, payment_repo, sample_account, test_session: Session, monkeypatch
    ):
        """
        GIVEN a stored default card
        WHEN a new default is appended and the commit fails with a storage error
        THEN StorageError is raised, the old default keeps its flag and no row is added
        """
        account_id = sample_account.account_id
        existing = payment_repo.append(account_id, card_fields(is_default=True))

        def failing_commit():
            raise OperationalError("INSERT INTO payment_methods", {}, Exception("disk I/O error"))

        monkeypatch.setattr(test_session, "commit", failing_commit)

        with pytest.raises(StorageError) as exc_info:
            payment_repo.append(account_id, card_fields(is_default=True), clear_other_defaults=True)

        assert exc_info.value.message == "A storage error occurred"
        assert payment_repo.get(account_id, existing.entry_id).is_default is True
        assert [e.entry_id for e in payment_repo.list_by_account(account_id)] == [existing.entry_id]


class TestConcurrentDefaults:
    """Two writers racing to set a default on a file-backed database."""

    @pytest.fixture
    def file_engine(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}", timeout_seconds=5)
        Base.metadata.create_all(bind=engine)
        yield engine
        engine.dispose()

    def test_lost_race_is_default_conflict(self, file_engine, monkeypatch):
        """
        GIVEN two sessions appending a default card for the same account
        WHEN the second writer's sibling clear runs before the first writer's insert commits
        THEN the second insert is rejected with DEFAULT_CONFLICT and one default remains
        """
        Sessions = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
        session_a, session_b = Sessions(), Sessions()
        try:
            SqlAlchemyAccountRepository(session_a).create(Account(account_id="acc-race", email="race@example.com"))
            repo_a = SqlAlchemyEntryRepository(session_a, Collection.PAYMENT_METHODS)
            repo_b = SqlAlchemyEntryRepository(session_b, Collection.PAYMENT_METHODS)

            def clear_then_lose_race(account_id, keep_entry_id):
                # B's clear found nothing; A commits its default before B inserts
                repo_a.append(account_id, card_fields(is_default=True, nickname="A"), clear_other_defaults=True)

            monkeypatch.setattr(repo_b, "_clear_defaults", clear_then_lose_race)

            with pytest.raises(ConflictError) as exc_info:
                repo_b.append("acc-race", card_fields(is_default=True, nickname="B"), clear_other_defaults=True)

            assert exc_info.value.code == "DEFAULT_CONFLICT"
            assert repo_a.count_defaults("acc-race") == 1
            [winner] = repo_a.list_by_account("acc-race")
            assert winner.nickname == "A"
        finally:
            session_a.close()
            session_b.close()
