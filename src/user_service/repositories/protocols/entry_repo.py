"""Owned-collection (aggregate store) repository protocol."""

from typing import Any, Protocol, Optional

from user_service.domain.models import Entry


class EntryRepository(Protocol):
    """
    Interface for one owned collection of an account.

    Writes are field-scoped: implementations never load, validate or rewrite
    entries other than the target, except for clearing ``is_default`` on
    siblings when asked to.
    """

    def list_by_account(self, account_id: str) -> list[Entry]:
        """List entries in insertion order."""
        ...

    def get(self, account_id: str, entry_id: str) -> Optional[Entry]:
        """Retrieve one entry."""
        ...

    def find_by(self, account_id: str, field: str, value: Any) -> Optional[Entry]:
        """First entry whose ``field`` equals ``value``."""
        ...

    def append(
        self,
        account_id: str,
        fields: dict[str, Any],
        clear_other_defaults: bool = False,
    ) -> Entry:
        """Insert a new entry, optionally clearing sibling defaults in the same transaction."""
        ...

    def update_fields(
        self,
        account_id: str,
        entry_id: str,
        fields: dict[str, Any],
        clear_other_defaults: bool = False,
    ) -> Optional[Entry]:
        """Write only ``fields`` on one entry; None when the entry is missing."""
        ...

    def pull(self, account_id: str, entry_id: str) -> bool:
        """Delete one entry; False when missing."""
        ...

    def count_defaults(self, account_id: str) -> int:
        """Number of entries flagged as default."""
        ...
