"""FastAPI dependencies that build collaborators from configuration."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..config import settings
from ..db.supabase import client_from_settings
from ..errors import PersistenceError
from ..persistence.database import RouteRepository
from ..services.geocoding.client import GeocodingClient


def get_repository() -> RouteRepository:
    try:
        return RouteRepository(client_from_settings(settings))
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def get_optional_repository() -> RouteRepository | None:
    client = client_from_settings(settings)
    return RouteRepository(client) if client is not None else None


def get_geocoder() -> GeocodingClient:
    try:
        return GeocodingClient()
    except ValueError as exc:
        logging.error(f"Geocoding client initialization failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Geocoding service is not configured. Please check the RP_GEOCODING_API_KEY setting.",
        ) from exc
