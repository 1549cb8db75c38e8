"""Service layer - business logic orchestration."""

from user_service.services.dispatcher import (
    WritePath,
    WritePlan,
    plan_add,
    plan_update,
    plan_remove,
)
from user_service.services.entry_service import EntryService
from user_service.services.account_service import AccountService, AccountProfile, AccountStats

__all__ = [
    "WritePath",
    "WritePlan",
    "plan_add",
    "plan_update",
    "plan_remove",
    "EntryService",
    "AccountService",
    "AccountProfile",
    "AccountStats",
]
