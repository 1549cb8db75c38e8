"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from user_service.config.settings import get_settings
from user_service.config.logging_config import setup_logging
from user_service.repositories.sqlalchemy.database import init_db
from user_service.api.middleware import CorrelationIdMiddleware
from user_service.api.routers import (
    users_router,
    addresses_router,
    payment_methods_router,
    wishlist_router,
    admin_router,
    operational_router,
)
from user_service.core.exceptions import AppError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    yield
    # Shutdown (nothing to clean up)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="User profiles, addresses, payment methods and wishlists",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(CorrelationIdMiddleware)

# Include routers
app.include_router(operational_router)
app.include_router(users_router)
app.include_router(addresses_router)
app.include_router(payment_methods_router)
app.include_router(wishlist_router)
app.include_router(admin_router)


def error_body(code: str, message: str, details=None) -> dict:
    return {"code": code, "message": message, "details": details}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.code)
    else:
        logger.warning("%s %s rejected: %s %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, exc.details),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies or query parameters (not a JSON object, wrong query type)."""
    errors = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    return JSONResponse(
        status_code=400,
        content=error_body("VALIDATION_ERROR", "; ".join(errors), errors),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body("INTERNAL_ERROR", "Internal server error"),
    )
