#!/usr/bin/env python3
"""
Seed the local database with demo accounts.

Creates a customer with addresses, cards and a wishlist, an admin, and one
card stored under older rules (already expired) to exercise legacy reads.
Safe to run twice: existing demo accounts are skipped.
"""

import logging
import random

from user_service.config.logging_config import setup_logging
from user_service.config.settings import get_settings
from user_service.core.exceptions import ConflictError
from user_service.core.timezone import today_utc
from user_service.domain.models import Collection
from user_service.events import NullEventSink
from user_service.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyEntryRepository,
)
from user_service.repositories.sqlalchemy.database import get_session, init_db
from user_service.services import AccountService, EntryService

logger = logging.getLogger("seed_data")

DEMO_PASSWORD = "demo1234"

PRODUCTS = [
    ("sku-1001", "Desk Lamp", 49.90, "Home & Garden"),
    ("sku-1002", "Noise Cancelling Headphones", 199.00, "Electronics"),
    ("sku-1003", "Trail Running Shoes", 129.50, "Sports"),
    ("sku-1004", "Espresso Grinder", 89.99, "Kitchen"),
]


def seed_customer(
    accounts: AccountService,
    services: dict[Collection, EntryService],
    legacy_repo: SqlAlchemyEntryRepository,
) -> None:
    try:
        account = accounts.register({
            "email": "jane.doe@example.com",
            "password": DEMO_PASSWORD,
            "first_name": "Jane",
            "last_name": "Doe",
        })
    except ConflictError:
        logger.info("Demo customer already exists, skipping")
        return
    account_id = account.account_id
    year = today_utc().year

    services[Collection.ADDRESSES].add_entry(account_id, {
        "address_line1": "1 Main St",
        "city": "Springfield",
        "state": "Illinois",
        "zip_code": "62701",
        "is_default": True,
    })
    services[Collection.ADDRESSES].add_entry(account_id, {
        "type": "work",
        "address_line1": "200 Market Ave",
        "address_line2": "Suite 4",
        "city": "Chicago",
        "state": "Illinois",
        "zip_code": "60601",
        "phone": "+1 (312) 555-0100",
    })

    services[Collection.PAYMENT_METHODS].add_entry(account_id, {
        "type": "credit_card",
        "provider": "visa",
        "card_number": "4242 4242 4242 4242",
        "expiry_month": 12,
        "expiry_year": year + 3,
        "cardholder_name": "Jane Doe",
        "is_default": True,
        "nickname": "Everyday",
    })
    services[Collection.PAYMENT_METHODS].add_entry(account_id, {
        "type": "paypal",
        "provider": "paypal",
        "last4": "0000",
        "cardholder_name": "Jane Doe",
    })

    for product_id, name, price, category in random.sample(PRODUCTS, k=3):
        services[Collection.WISHLIST].add_entry(account_id, {
            "product_id": product_id,
            "product_name": name,
            "product_price": price,
            "product_category": category,
        })

    # Written straight through the repository: current rules would reject it
    legacy_repo.append(account_id, {
        "type": "credit_card",
        "provider": "mastercard",
        "last4": "1111",
        "expiry_month": 1,
        "expiry_year": 2020,
        "cardholder_name": "J. Doe 2nd",
        "is_default": False,
        "is_active": True,
        "nickname": "Old card",
    })
    logger.info("Seeded customer %s", account.email)


def seed_admin(accounts: AccountService) -> None:
    try:
        admin = accounts.register({
            "email": "admin@example.com",
            "password": DEMO_PASSWORD,
            "first_name": "Site",
            "last_name": "Admin",
        })
    except ConflictError:
        logger.info("Demo admin already exists, skipping")
        return
    accounts.admin_update(admin.account_id, {"roles": ["admin", "customer"], "tier": "platinum"})
    logger.info("Seeded admin %s", admin.email)


def main() -> None:
    setup_logging()
    settings = get_settings()
    init_db()
    sink = NullEventSink()
    db = get_session()
    try:
        account_repo = SqlAlchemyAccountRepository(db)
        entry_repos = {c: SqlAlchemyEntryRepository(db, c) for c in Collection}
        accounts = AccountService(account_repo, sink, entry_repos=entry_repos)
        services = {
            c: EntryService(c, repo, account_repo, sink, settings)
            for c, repo in entry_repos.items()
        }
        seed_customer(accounts, services, entry_repos[Collection.PAYMENT_METHODS])
        seed_admin(accounts)
    finally:
        db.close()
    print(f"Demo data ready in {settings.get_database_url()} (password: {DEMO_PASSWORD})")


if __name__ == "__main__":
    main()
