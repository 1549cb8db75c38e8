"""API routers package."""

from user_service.api.routers.users import router as users_router
from user_service.api.routers.addresses import router as addresses_router
from user_service.api.routers.payment_methods import router as payment_methods_router
from user_service.api.routers.wishlist import router as wishlist_router
from user_service.api.routers.admin import router as admin_router
from user_service.api.routers.operational import router as operational_router

__all__ = [
    "users_router",
    "addresses_router",
    "payment_methods_router",
    "wishlist_router",
    "admin_router",
    "operational_router",
]
