"""Repository layer - data access abstractions and implementations."""

from user_service.repositories.protocols import (
    AccountRepository,
    EntryRepository,
)

__all__ = [
    "AccountRepository",
    "EntryRepository",
]
