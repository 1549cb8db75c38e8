"""SQLAlchemy implementation of EntryRepository (the aggregate store).

Every write addresses rows by primary key or by ``account_id``; no method
loads a collection to mutate it in memory. Setting a default issues, inside
one transaction:

    UPDATE <table> SET is_default = false
     WHERE account_id = :account AND entry_id != :target AND is_default
    INSERT / UPDATE <table> ... WHERE entry_id = :target

so sibling rows only ever have their ``is_default`` column touched and are
never validated. The partial unique index on ``is_default`` turns a lost race
into an IntegrityError instead of a second default.
"""

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import func, select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from user_service.core.exceptions import AppError, ConflictError, NotFoundError, StorageError
from user_service.core.timezone import now_utc
from user_service.domain.models import (
    Address,
    Collection,
    Entry,
    PaymentMethod,
    WishlistItem,
)
from user_service.repositories.sqlalchemy.orm_models import (
    AddressORM,
    PaymentMethodORM,
    WishlistItemORM,
)

logger = logging.getLogger(__name__)

_MODELS = {
    Collection.ADDRESSES: (AddressORM, Address),
    Collection.PAYMENT_METHODS: (PaymentMethodORM, PaymentMethod),
    Collection.WISHLIST: (WishlistItemORM, WishlistItem),
}


class SqlAlchemyEntryRepository:
    """SQLAlchemy-backed repository for one owned collection."""

    def __init__(self, db: Session, collection: Collection):
        self._db = db
        self._collection = collection
        self._model, self._domain = _MODELS[collection]

    @property
    def collection(self) -> Collection:
        return self._collection

    def list_by_account(self, account_id: str) -> list[Entry]:
        """List entries in insertion order."""
        rows = self._read_all(
            select(self._model)
            .where(self._model.account_id == account_id)
            .order_by(self._model.position)
        )
        return [self._to_domain(r) for r in rows]

    def get(self, account_id: str, entry_id: str) -> Optional[Entry]:
        rows = self._read_all(
            select(self._model).where(
                self._model.account_id == account_id,
                self._model.entry_id == entry_id,
            )
        )
        return self._to_domain(rows[0]) if rows else None

    def find_by(self, account_id: str, field: str, value: Any) -> Optional[Entry]:
        rows = self._read_all(
            select(self._model)
            .where(self._model.account_id == account_id, getattr(self._model, field) == value)
            .order_by(self._model.position)
            .limit(1)
        )
        return self._to_domain(rows[0]) if rows else None

    def count_defaults(self, account_id: str) -> int:
        if not self._collection.has_exclusive_default:
            return 0
        try:
            return self._db.execute(
                select(func.count())
                .select_from(self._model)
                .where(self._model.account_id == account_id, self._model.is_default.is_(True))
            ).scalar_one()
        except SQLAlchemyError as exc:
            logger.error("Default count failed for %s: %s", self._collection.value, exc)
            raise StorageError()

    def append(
        self,
        account_id: str,
        fields: dict[str, Any],
        clear_other_defaults: bool = False,
    ) -> Entry:
        """Insert a new entry at the end of the collection."""
        entry_id = str(uuid.uuid4())
        now = now_utc()
        try:
            if clear_other_defaults:
                self._clear_defaults(account_id, keep_entry_id=entry_id)
            position = self._db.execute(
                select(func.coalesce(func.max(self._model.position), 0)).where(
                    self._model.account_id == account_id
                )
            ).scalar_one() + 1
            self._db.add(
                self._model(
                    entry_id=entry_id,
                    account_id=account_id,
                    position=position,
                    created_at=now,
                    updated_at=now,
                    **self._columns(fields),
                )
            )
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise self._conflict(exc, account_id)
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Append to %s failed for account %s: %s", self._collection.value, account_id, exc)
            raise StorageError()
        return self._reload(account_id, entry_id)

    def update_fields(
        self,
        account_id: str,
        entry_id: str,
        fields: dict[str, Any],
        clear_other_defaults: bool = False,
    ) -> Optional[Entry]:
        """Write only ``fields`` on one entry."""
        values = self._columns(fields)
        values["updated_at"] = now_utc()
        try:
            if clear_other_defaults:
                self._clear_defaults(account_id, keep_entry_id=entry_id)
            result = self._db.execute(
                update(self._model)
                .where(
                    self._model.account_id == account_id,
                    self._model.entry_id == entry_id,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self._db.rollback()
                return None
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise self._conflict(exc, account_id)
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Update of %s/%s failed: %s", self._collection.value, entry_id, exc)
            raise StorageError()
        return self._reload(account_id, entry_id)

    def pull(self, account_id: str, entry_id: str) -> bool:
        """Delete one entry. Remaining entries are neither read nor promoted."""
        try:
            result = self._db.execute(
                delete(self._model)
                .where(
                    self._model.account_id == account_id,
                    self._model.entry_id == entry_id,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self._db.rollback()
                return False
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Pull of %s/%s failed: %s", self._collection.value, entry_id, exc)
            raise StorageError()
        return True

    def _clear_defaults(self, account_id: str, keep_entry_id: str) -> None:
        # Only the is_default column of siblings is written
        self._db.execute(
            update(self._model)
            .where(
                self._model.account_id == account_id,
                self._model.entry_id != keep_entry_id,
                self._model.is_default.is_(True),
            )
            .values(is_default=False)
            .execution_options(synchronize_session=False)
        )

    def _columns(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in fields.items() if k in self._domain.FIELDS}

    def _conflict(self, exc: IntegrityError, account_id: str) -> AppError:
        logger.warning("Write to %s rejected by constraint: %s", self._collection.value, exc.orig)
        if "foreign key" in str(exc.orig).lower():
            return NotFoundError("User", account_id, code="USER_NOT_FOUND")
        if self._collection == Collection.WISHLIST:
            return ConflictError("Product already in wishlist", code="PRODUCT_ALREADY_IN_WISHLIST")
        return ConflictError(
            "Concurrent update changed the default entry; retry the request",
            code="DEFAULT_CONFLICT",
        )

    def _reload(self, account_id: str, entry_id: str) -> Entry:
        self._db.expire_all()
        entry = self.get(account_id, entry_id)
        if entry is None:
            raise StorageError()
        return entry

    def _read_all(self, statement) -> list:
        try:
            return list(self._db.execute(statement).scalars().all())
        except SQLAlchemyError as exc:
            logger.error("Read from %s failed: %s", self._collection.value, exc)
            raise StorageError()

    def _to_domain(self, orm) -> Entry:
        """Convert ORM row to domain entry."""
        values = {name: getattr(orm, name) for name in self._domain.FIELDS}
        return self._domain(
            entry_id=orm.entry_id,
            account_id=orm.account_id,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
            **values,
        )
