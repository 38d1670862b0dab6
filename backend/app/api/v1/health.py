"""
Health check and status endpoints.
"""
from fastapi import APIRouter, Request

from app.core import settings
from app.core.datetime_utils import utc_now

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Report service status with the size of the loaded test catalog and the
    number of sessions currently in progress.
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENV,
        "catalog_tests": len(request.app.state.catalog),
        "active_sessions": len(request.app.state.session_registry),
    }


@router.get("/ping")
async def ping():
    """Connectivity check."""
    return {"message": "pong"}
