"""Dependency injection for FastAPI."""

from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from user_service.config.settings import Settings, get_settings
from user_service.domain.models import Collection
from user_service.events import DaprEventPublisher, EventSink
from user_service.repositories.sqlalchemy.database import get_db
from user_service.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyEntryRepository,
)
from user_service.services import AccountService, EntryService


def get_app_settings() -> Settings:
    """Provide the active Settings."""
    return get_settings()


def get_publisher(settings: Settings = Depends(get_app_settings)) -> EventSink:
    """Provide the event sink (Dapr pub/sub over HTTP)."""
    return DaprEventPublisher(settings)


def get_correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or ""


def get_account_repo(db: Session = Depends(get_db)) -> SqlAlchemyAccountRepository:
    """Provide AccountRepository instance."""
    return SqlAlchemyAccountRepository(db)


def get_account_service(
    db: Session = Depends(get_db),
    account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
    publisher: EventSink = Depends(get_publisher),
) -> AccountService:
    """Provide AccountService instance."""
    return AccountService(
        account_repo=account_repo,
        publisher=publisher,
        entry_repos={c: SqlAlchemyEntryRepository(db, c) for c in Collection},
    )


def _entry_service_provider(collection: Collection) -> Callable[..., EntryService]:
    def provide(
        db: Session = Depends(get_db),
        account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
        publisher: EventSink = Depends(get_publisher),
        settings: Settings = Depends(get_app_settings),
    ) -> EntryService:
        return EntryService(
            collection=collection,
            entry_repo=SqlAlchemyEntryRepository(db, collection),
            account_repo=account_repo,
            publisher=publisher,
            settings=settings,
        )

    provide.__name__ = f"get_{collection.value}_service"
    return provide


get_address_service = _entry_service_provider(Collection.ADDRESSES)
get_payment_method_service = _entry_service_provider(Collection.PAYMENT_METHODS)
get_wishlist_service = _entry_service_provider(Collection.WISHLIST)
