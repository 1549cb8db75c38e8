"""Liveness, readiness and service info endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from user_service.config.settings import Settings
from user_service.api.deps import get_app_settings
from user_service.core.timezone import now_utc
from user_service.repositories.sqlalchemy.database import get_db, ping

router = APIRouter(tags=["operational"])


@router.get("/")
def root(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "docs": "/docs",
    }


@router.get("/health")
def health_check(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    """Liveness check."""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "timestamp": now_utc().isoformat(),
    }


@router.get("/health/ready")
def readiness_check(db: Session = Depends(get_db)):
    """Readiness check; 503 when the database does not answer."""
    if not ping(db):
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "checks": {"database": "unavailable"}},
        )
    return {"status": "ready", "checks": {"database": "ok"}}
