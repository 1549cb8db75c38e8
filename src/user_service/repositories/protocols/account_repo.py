"""Account repository protocol."""

from datetime import datetime
from typing import Any, Protocol, Optional

from user_service.domain.models import Account


class AccountRepository(Protocol):
    """Interface for account data access."""

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        ...

    def get_by_email(self, email: str) -> Optional[Account]:
        """Retrieve account by email."""
        ...

    def exists(self, account_id: str) -> bool:
        """True when the account exists."""
        ...

    def list_all(self, limit: int = 100, offset: int = 0) -> list[Account]:
        """List accounts ordered by creation time."""
        ...

    def count(
        self,
        is_active: Optional[bool] = None,
        created_from: Optional[datetime] = None,
        created_before: Optional[datetime] = None,
    ) -> int:
        """Count accounts matching the filters."""
        ...

    def list_recent(self, limit: int = 5) -> list[Account]:
        """Active accounts, newest first."""
        ...

    def update_fields(self, account_id: str, fields: dict[str, Any]) -> Optional[Account]:
        """Write only the given columns; None when the account is missing."""
        ...

    def delete(self, account_id: str) -> bool:
        """Delete the account and every owned collection; False when missing."""
        ...
