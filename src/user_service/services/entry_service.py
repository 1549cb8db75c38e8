"""Aggregate store operations for the owned collections."""

import logging
from datetime import date
from typing import Any, Callable, Mapping, Optional

from user_service.config.settings import Settings
from user_service.core.exceptions import ConflictError, NotFoundError, ValidationError
from user_service.domain.models import (
    Address,
    ChangeAction,
    Collection,
    Entry,
    PaymentMethod,
    WishlistItem,
)
from user_service.events import EventSink, publish_collection_changed
from user_service.repositories.protocols import AccountRepository, EntryRepository
from user_service.services.dispatcher import WritePlan, plan_add, plan_remove, plan_update
from user_service.validation import (
    ValidationResult,
    validate_address,
    validate_payment_method,
    validate_wishlist_item,
)
from user_service.validation.result import is_blank

logger = logging.getLogger(__name__)

_ENTRY_TYPES = {
    Collection.ADDRESSES: Address,
    Collection.PAYMENT_METHODS: PaymentMethod,
    Collection.WISHLIST: WishlistItem,
}

_ENTRY_LABELS = {
    Collection.ADDRESSES: ("Address", "ADDRESS_NOT_FOUND"),
    Collection.PAYMENT_METHODS: ("Payment method", "PAYMENT_METHOD_NOT_FOUND"),
    Collection.WISHLIST: ("Wishlist item", "WISHLIST_ITEM_NOT_FOUND"),
}

# Input-only keys accepted on top of the stored fields
_INPUT_ONLY_FIELDS = {
    Collection.PAYMENT_METHODS: ("card_number",),
}


class EntryService:
    """
    Add, update, remove and list entries of one owned collection.

    Candidates are validated on their own (adds) or merged with the stored
    entry and validated as a whole (updates). Other entries of the collection
    are never loaded or re-validated; the dispatcher decides whether the write
    also clears sibling defaults.
    """

    def __init__(
        self,
        collection: Collection,
        entry_repo: EntryRepository,
        account_repo: AccountRepository,
        publisher: EventSink,
        settings: Settings,
        today: Optional[Callable[[], date]] = None,
    ):
        self._collection = collection
        self._entry_repo = entry_repo
        self._account_repo = account_repo
        self._publisher = publisher
        self._settings = settings
        self._today = today

    @property
    def collection(self) -> Collection:
        return self._collection

    def list_entries(self, account_id: str) -> list[Entry]:
        self._require_account(account_id)
        return self._entry_repo.list_by_account(account_id)

    def get_entry(self, account_id: str, entry_id: str) -> Entry:
        self._require_account(account_id)
        return self._require_entry(account_id, entry_id)

    def add_entry(
        self,
        account_id: str,
        candidate: Mapping[str, Any],
        correlation_id: Optional[str] = None,
    ) -> Entry:
        """
        Validate and append a new entry.

        Args:
            account_id: Owning account
            candidate: Raw snake_case field mapping

        Returns:
            The persisted, normalized entry

        Raises:
            ValidationError: candidate rejected, nothing written
            ConflictError: duplicate wishlist product or lost default race
        """
        self._require_account(account_id)
        normalized = self._validate(candidate).raise_for_errors()

        if self._collection == Collection.WISHLIST:
            self._check_unique_product(account_id, normalized["product_id"])

        plan = plan_add(self._collection, normalized)
        entry = self._execute_add(account_id, plan)
        logger.info(
            "Added %s entry %s for account %s (path=%s)",
            self._collection.value,
            entry.entry_id,
            account_id,
            plan.path.value,
        )
        publish_collection_changed(
            self._publisher, account_id, self._collection, ChangeAction.ADDED, entry.entry_id, correlation_id
        )
        return entry

    def update_entry(
        self,
        account_id: str,
        entry_id: str,
        partial: Mapping[str, Any],
        correlation_id: Optional[str] = None,
    ) -> Entry:
        """
        Merge ``partial`` into the stored entry, validate, write only the changes.
        """
        self._require_account(account_id)
        existing = self._require_entry(account_id, entry_id)

        supplied = self._recognized(partial)
        if is_blank(supplied.get("card_number")):
            # A blank card number is not a replacement; the stored last4 stays
            supplied.pop("card_number", None)
        if not supplied:
            raise ValidationError("No updatable fields provided")

        merged = {**existing.stored_fields(), **supplied}
        if "card_number" in supplied:
            merged.pop("last4", None)
        normalized = self._validate(merged).raise_for_errors()

        if self._collection == Collection.WISHLIST and "product_id" in supplied:
            self._check_unique_product(account_id, normalized["product_id"], exclude_entry_id=entry_id)

        plan = plan_update(self._collection, supplied, normalized)
        entry = self._entry_repo.update_fields(
            account_id,
            entry_id,
            plan.fields,
            clear_other_defaults=plan.clears_sibling_defaults,
        )
        if entry is None:
            raise self._entry_not_found(entry_id)

        logger.info(
            "Updated %s entry %s for account %s (path=%s, fields=%s)",
            self._collection.value,
            entry_id,
            account_id,
            plan.path.value,
            sorted(plan.fields),
        )
        publish_collection_changed(
            self._publisher, account_id, self._collection, ChangeAction.UPDATED, entry_id, correlation_id
        )
        return entry

    def set_default(
        self,
        account_id: str,
        entry_id: str,
        correlation_id: Optional[str] = None,
    ) -> Entry:
        """Make one entry the collection default."""
        if not self._collection.has_exclusive_default:
            raise ValidationError(f"{self._collection.value} entries have no default")
        return self.update_entry(account_id, entry_id, {"is_default": True}, correlation_id)

    def remove_entry(
        self,
        account_id: str,
        entry_id: str,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Delete one entry. A removed default is not replaced."""
        self._require_account(account_id)
        plan = plan_remove()
        if not self._entry_repo.pull(account_id, entry_id):
            raise self._entry_not_found(entry_id)

        logger.info(
            "Removed %s entry %s for account %s (path=%s)",
            self._collection.value,
            entry_id,
            account_id,
            plan.path.value,
        )
        publish_collection_changed(
            self._publisher, account_id, self._collection, ChangeAction.REMOVED, entry_id, correlation_id
        )

    def _execute_add(self, account_id: str, plan: WritePlan) -> Entry:
        return self._entry_repo.append(
            account_id,
            plan.fields,
            clear_other_defaults=plan.clears_sibling_defaults,
        )

    def _validate(self, candidate: Mapping[str, Any]) -> ValidationResult:
        if self._collection == Collection.PAYMENT_METHODS:
            return validate_payment_method(
                candidate,
                today=self._today() if self._today else None,
                horizon_years=self._settings.expiry_horizon_years,
            )
        if self._collection == Collection.ADDRESSES:
            return validate_address(candidate)
        return validate_wishlist_item(candidate)

    def _recognized(self, partial: Mapping[str, Any]) -> dict[str, Any]:
        allowed = set(_ENTRY_TYPES[self._collection].FIELDS)
        allowed.update(_INPUT_ONLY_FIELDS.get(self._collection, ()))
        return {k: v for k, v in partial.items() if k in allowed}

    def _check_unique_product(
        self,
        account_id: str,
        product_id: str,
        exclude_entry_id: Optional[str] = None,
    ) -> None:
        existing = self._entry_repo.find_by(account_id, "product_id", product_id)
        if existing is not None and existing.entry_id != exclude_entry_id:
            raise ConflictError("Product already in wishlist", code="PRODUCT_ALREADY_IN_WISHLIST")

    def _require_account(self, account_id: str) -> None:
        if not self._account_repo.exists(account_id):
            raise NotFoundError("User", account_id, code="USER_NOT_FOUND")

    def _require_entry(self, account_id: str, entry_id: str) -> Entry:
        entry = self._entry_repo.get(account_id, entry_id)
        if entry is None:
            raise self._entry_not_found(entry_id)
        return entry

    def _entry_not_found(self, entry_id: str) -> NotFoundError:
        label, code = _ENTRY_LABELS[self._collection]
        return NotFoundError(label, entry_id, code=code)
