"""SQLAlchemy implementation of AccountRepository."""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from user_service.core.exceptions import ConflictError, StorageError
from user_service.core.timezone import now_utc
from user_service.domain.models import Account
from user_service.domain.models.account import default_preferences
from user_service.repositories.sqlalchemy.orm_models import (
    AccountORM,
    AddressORM,
    PaymentMethodORM,
    WishlistItemORM,
)

logger = logging.getLogger(__name__)

_OWNED_TABLES = (AddressORM, PaymentMethodORM, WishlistItemORM)


class SqlAlchemyAccountRepository:
    """SQLAlchemy-backed account repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        orm_account = AccountORM(
            account_id=account.account_id,
            email=account.email,
            password_hash=account.password_hash,
            first_name=account.first_name,
            last_name=account.last_name,
            display_name=account.display_name,
            roles=list(account.roles),
            tier=account.tier.value,
            is_active=account.is_active,
            is_email_verified=account.is_email_verified,
            preferences=dict(account.preferences),
            created_at=account.created_at or now_utc(),
            updated_at=account.updated_at or account.created_at or now_utc(),
        )
        try:
            self._db.add(orm_account)
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            raise ConflictError("Email already exists", code="EMAIL_EXISTS")
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Account insert failed: %s", exc)
            raise StorageError()
        self._db.refresh(orm_account)
        return self._to_domain(orm_account)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        orm_account = self._read(select(AccountORM).where(AccountORM.account_id == account_id))
        return self._to_domain(orm_account) if orm_account else None

    def get_by_email(self, email: str) -> Optional[Account]:
        """Retrieve account by email."""
        orm_account = self._read(select(AccountORM).where(AccountORM.email == email.strip().lower()))
        return self._to_domain(orm_account) if orm_account else None

    def exists(self, account_id: str) -> bool:
        return self._read(
            select(AccountORM.account_id).where(AccountORM.account_id == account_id)
        ) is not None

    def list_all(self, limit: int = 100, offset: int = 0) -> list[Account]:
        """List accounts ordered by creation time."""
        try:
            rows = self._db.execute(
                select(AccountORM).order_by(AccountORM.created_at).limit(limit).offset(offset)
            ).scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Account list failed: %s", exc)
            raise StorageError()
        return [self._to_domain(a) for a in rows]

    def count(
        self,
        is_active: Optional[bool] = None,
        created_from: Optional[datetime] = None,
        created_before: Optional[datetime] = None,
    ) -> int:
        """Count accounts; ``created_from`` is inclusive and ``created_before`` exclusive."""
        statement = select(func.count()).select_from(AccountORM)
        if is_active is not None:
            statement = statement.where(AccountORM.is_active == is_active)
        if created_from is not None:
            statement = statement.where(AccountORM.created_at >= created_from)
        if created_before is not None:
            statement = statement.where(AccountORM.created_at < created_before)
        try:
            return self._db.execute(statement).scalar_one()
        except SQLAlchemyError as exc:
            logger.error("Account count failed: %s", exc)
            raise StorageError()

    def list_recent(self, limit: int = 5) -> list[Account]:
        """Active accounts, newest first."""
        try:
            rows = self._db.execute(
                select(AccountORM)
                .where(AccountORM.is_active.is_(True))
                .order_by(AccountORM.created_at.desc())
                .limit(limit)
            ).scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Recent account list failed: %s", exc)
            raise StorageError()
        return [self._to_domain(a) for a in rows]

    def update_fields(self, account_id: str, fields: dict[str, Any]) -> Optional[Account]:
        """Write only the given columns."""
        values = dict(fields)
        values["updated_at"] = now_utc()
        try:
            result = self._db.execute(
                update(AccountORM)
                .where(AccountORM.account_id == account_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self._db.rollback()
                return None
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            raise ConflictError("Email already exists", code="EMAIL_EXISTS")
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Account update failed for %s: %s", account_id, exc)
            raise StorageError()
        self._db.expire_all()
        return self.get_by_id(account_id)

    def delete(self, account_id: str) -> bool:
        """Delete the account and its owned collections in one transaction."""
        try:
            for model in _OWNED_TABLES:
                self._db.execute(
                    delete(model)
                    .where(model.account_id == account_id)
                    .execution_options(synchronize_session=False)
                )
            result = self._db.execute(
                delete(AccountORM)
                .where(AccountORM.account_id == account_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self._db.rollback()
                return False
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Account delete failed for %s: %s", account_id, exc)
            raise StorageError()
        return True

    def _read(self, statement):
        try:
            return self._db.execute(statement).scalars().first()
        except SQLAlchemyError as exc:
            logger.error("Account read failed: %s", exc)
            raise StorageError()

    @staticmethod
    def _to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            account_id=orm.account_id,
            email=orm.email,
            password_hash=orm.password_hash,
            first_name=orm.first_name,
            last_name=orm.last_name,
            display_name=orm.display_name,
            roles=list(orm.roles or []),
            tier=orm.tier,
            is_active=orm.is_active,
            is_email_verified=orm.is_email_verified,
            preferences=dict(orm.preferences or default_preferences()),
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )
