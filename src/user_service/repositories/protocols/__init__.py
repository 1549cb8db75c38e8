"""Repository protocol definitions (interfaces)."""

from user_service.repositories.protocols.account_repo import AccountRepository
from user_service.repositories.protocols.entry_repo import EntryRepository

__all__ = [
    "AccountRepository",
    "EntryRepository",
]
