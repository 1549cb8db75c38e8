"""Account service: registration, profile management and admin operations."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from user_service.core.exceptions import ConflictError, NotFoundError, ValidationError
from user_service.core.security import hash_password, verify_password
from user_service.core.timezone import month_start, now_utc, previous_month_start
from user_service.domain.models import Account, Address, Collection, PaymentMethod, WishlistItem
from user_service.events import (
    EventSink,
    publish_user_created,
    publish_user_deleted,
    publish_user_updated,
)
from user_service.repositories.protocols import AccountRepository, EntryRepository
from user_service.validation import (
    ADMIN_UPDATABLE_FIELDS,
    SELF_UPDATABLE_FIELDS,
    check_password,
    is_valid_email,
    validate_admin_create,
    validate_profile_update,
    validate_registration,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass
class AccountProfile:
    """Account together with its owned collections."""

    account: Account
    addresses: list[Address] = field(default_factory=list)
    payment_methods: list[PaymentMethod] = field(default_factory=list)
    wishlist: list[WishlistItem] = field(default_factory=list)


@dataclass(frozen=True)
class AccountStats:
    """Headline account numbers for the admin dashboard."""

    total: int
    active: int
    new_this_month: int
    new_last_month: int
    growth: float


class AccountService:
    """
    Service for the account root of the user aggregate.

    Owned collections are read here for the full profile view; mutating them
    goes through EntryService.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        publisher: EventSink,
        entry_repos: Optional[Mapping[Collection, EntryRepository]] = None,
    ):
        self._account_repo = account_repo
        self._publisher = publisher
        self._entry_repos = dict(entry_repos or {})

    def register(self, candidate: Mapping[str, Any], correlation_id: Optional[str] = None) -> Account:
        """
        Create a new customer account.

        Args:
            candidate: email, password and optional names (snake_case)

        Returns:
            Created Account

        Raises:
            ValidationError: invalid email, password or names
            ConflictError: email already registered
        """
        data = validate_registration(candidate).raise_for_errors()

        if self._account_repo.get_by_email(data["email"]) is not None:
            raise ConflictError("Email already exists", code="EMAIL_EXISTS")

        now = now_utc()
        account = Account(
            account_id=str(uuid.uuid4()),
            email=data["email"],
            password_hash=hash_password(data["password"]),
            first_name=data["first_name"],
            last_name=data["last_name"],
            display_name=data["display_name"],
            created_at=now,
            updated_at=now,
        )
        created = self._account_repo.create(account)
        logger.info("Registered account %s", created.account_id)
        publish_user_created(self._publisher, created, correlation_id)
        return created

    def admin_create(
        self,
        candidate: Mapping[str, Any],
        admin_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Account:
        """
        Create an account on behalf of an admin.

        Unlike self-registration, first and last name are required and the
        admin may set roles (default customer), tier and the active flag.

        Raises:
            ValidationError: invalid fields, every error reported
            ConflictError: email already registered
        """
        data = validate_admin_create(candidate).raise_for_errors()

        if self._account_repo.get_by_email(data["email"]) is not None:
            raise ConflictError("Email already exists", code="EMAIL_EXISTS")

        now = now_utc()
        account = Account(
            account_id=str(uuid.uuid4()),
            email=data["email"],
            password_hash=hash_password(data["password"]),
            first_name=data["first_name"],
            last_name=data["last_name"],
            display_name=data["display_name"],
            roles=data["roles"],
            tier=data["tier"],
            is_active=data["is_active"],
            created_at=now,
            updated_at=now,
        )
        created = self._account_repo.create(account)
        logger.info("Admin %s created account %s", admin_id, created.account_id)
        publish_user_created(self._publisher, created, correlation_id)
        return created

    def get_account(self, account_id: str) -> Account:
        """Get account by ID."""
        account = self._account_repo.get_by_id(account_id)
        if not account:
            raise NotFoundError("User", account_id, code="USER_NOT_FOUND")
        return account

    def get_profile(self, account_id: str) -> AccountProfile:
        """Get the account with its addresses, payment methods and wishlist."""
        account = self.get_account(account_id)
        profile = AccountProfile(account=account)
        for collection, repo in self._entry_repos.items():
            setattr(profile, collection.value, repo.list_by_account(account_id))
        return profile

    def find_by_email(self, email: str) -> Account:
        if is_blank_email(email):
            raise ValidationError("Email is required", code="EMAIL_REQUIRED")
        if not is_valid_email(email):
            raise ValidationError("Invalid email", code="INVALID_EMAIL")
        account = self._account_repo.get_by_email(email)
        if not account:
            raise NotFoundError("User", email, code="USER_NOT_FOUND")
        return account

    def list_accounts(self, limit: int = 50, offset: int = 0) -> list[Account]:
        """List accounts for administration, oldest first."""
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("offset must not be negative")
        return self._account_repo.list_all(limit=limit, offset=offset)

    def user_stats(self, now: Optional[datetime] = None) -> AccountStats:
        """
        Account totals and month-over-month signups.

        Growth is the percent change of this month's signups over last
        month's, rounded to one decimal. With no signups last month it is 100
        when there are signups this month and 0 otherwise.
        """
        now = now or now_utc()
        this_month = month_start(now)
        last_month = previous_month_start(now)

        new_this_month = self._account_repo.count(created_from=this_month)
        new_last_month = self._account_repo.count(created_from=last_month, created_before=this_month)
        if new_last_month > 0:
            growth = round((new_this_month - new_last_month) / new_last_month * 100, 1)
        else:
            growth = 100.0 if new_this_month > 0 else 0.0

        return AccountStats(
            total=self._account_repo.count(),
            active=self._account_repo.count(is_active=True),
            new_this_month=new_this_month,
            new_last_month=new_last_month,
            growth=growth,
        )

    def recent_accounts(self, limit: int = 5) -> list[Account]:
        """Newest active accounts."""
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        return self._account_repo.list_recent(limit)

    def update_profile(
        self,
        account_id: str,
        candidate: Mapping[str, Any],
        correlation_id: Optional[str] = None,
    ) -> Account:
        """Self-service update of names and preferences."""
        return self._apply_update(account_id, candidate, SELF_UPDATABLE_FIELDS, account_id, correlation_id)

    def admin_update(
        self,
        account_id: str,
        candidate: Mapping[str, Any],
        admin_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Account:
        """Admin update; may also change roles, tier and status flags."""
        account = self._apply_update(account_id, candidate, ADMIN_UPDATABLE_FIELDS, admin_id, correlation_id)
        logger.info("Admin %s updated account %s", admin_id, account_id)
        return account

    def change_password(
        self,
        account_id: str,
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """
        Replace the local password.

        Accounts without a local password (external sign-in) cannot set one
        here.
        """
        if not new_password:
            raise ValidationError("New password is required", code="PASSWORD_REQUIRED")
        error = check_password(new_password)
        if error:
            raise ValidationError(error, code="INVALID_PASSWORD")

        account = self.get_account(account_id)
        if not account.has_local_password:
            raise ValidationError(
                "Password update not allowed for social login accounts",
                code="NO_LOCAL_PASSWORD",
            )
        if not verify_password(current_password or "", account.password_hash):
            raise ValidationError("Current password is incorrect", code="INVALID_CURRENT_PASSWORD")

        self._account_repo.update_fields(account_id, {"password_hash": hash_password(new_password)})
        logger.info("Password changed for account %s", account_id)

    def reset_password(self, account_id: str, new_password: Optional[str], admin_id: Optional[str] = None) -> None:
        """Admin override of the local password; the current one is not needed."""
        if not new_password:
            raise ValidationError("New password is required", code="PASSWORD_REQUIRED")
        error = check_password(new_password)
        if error:
            raise ValidationError(error, code="INVALID_PASSWORD")

        account = self._account_repo.update_fields(account_id, {"password_hash": hash_password(new_password)})
        if account is None:
            raise NotFoundError("User", account_id, code="USER_NOT_FOUND")
        logger.info("Admin %s reset the password of account %s", admin_id, account_id)

    def deactivate(self, account_id: str, correlation_id: Optional[str] = None) -> Account:
        account = self._account_repo.update_fields(account_id, {"is_active": False})
        if account is None:
            raise NotFoundError("User", account_id, code="USER_NOT_FOUND")
        logger.info("Account %s deactivated", account_id)
        publish_user_updated(self._publisher, account, correlation_id, updated_by=account_id)
        return account

    def delete_account(
        self,
        account_id: str,
        actor_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Delete the account and every owned collection."""
        if not self._account_repo.delete(account_id):
            raise NotFoundError("User", account_id, code="USER_NOT_FOUND")
        logger.info("Account %s deleted by %s", account_id, actor_id or account_id)
        publish_user_deleted(self._publisher, account_id, correlation_id)

    def _apply_update(
        self,
        account_id: str,
        candidate: Mapping[str, Any],
        allowed_fields: frozenset,
        actor_id: Optional[str],
        correlation_id: Optional[str],
    ) -> Account:
        if not any(k in allowed_fields for k in candidate):
            raise ValidationError("No updatable fields provided", code="NO_UPDATABLE_FIELDS")
        fields = validate_profile_update(candidate, allowed_fields).raise_for_errors()
        if "preferences" in fields:
            fields["preferences"] = merge_preferences(
                self.get_account(account_id).preferences, fields["preferences"]
            )

        account = self._account_repo.update_fields(account_id, fields)
        if account is None:
            raise NotFoundError("User", account_id, code="USER_NOT_FOUND")
        publish_user_updated(self._publisher, account, correlation_id, updated_by=actor_id)
        return account


def is_blank_email(email: Optional[str]) -> bool:
    return email is None or not email.strip()


def merge_preferences(stored: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay a partial preferences patch; nested mappings merge key by key."""
    merged = dict(stored)
    for key, value in patch.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_preferences(merged[key], value)
        else:
            merged[key] = value
    return merged
