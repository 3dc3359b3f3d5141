"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/geocoding", status_code=status.HTTP_200_OK)
def health_geocoding() -> dict:
    """Check geocoding provider health."""
    from ...services.geocoding.client import check_health

    if not settings.geocoding_api_key:
        return {"service": "geocoding", "configured": False, "healthy": False}
    try:
        return {"service": "geocoding", "configured": True, "healthy": check_health()}
    except Exception as e:
        return {"service": "geocoding", "configured": True, "healthy": False, "error": str(e)}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection status."""
    from ...db.supabase import client_from_settings
    from ...persistence.database import RouteRepository

    client = client_from_settings(settings)
    if not client:
        return {
            "configured": False,
            "message": "Supabase not configured. Set RP_SUPABASE_URL and RP_SUPABASE_KEY environment variables.",
        }

    try:
        RouteRepository(client).ping()
        return {"configured": True, "connected": True, "message": "Database connected."}
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
