"""Address book and geocoding endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...config import settings
from ...errors import GeocodingError, PersistenceError
from ...persistence.database import RouteRepository
from ...schemas.addresses import (
    AddressCreateRequest,
    AddressModel,
    FrequentAddressModel,
    GeocodeRequest,
    GeocodeResponse,
)
from ...services.addresses.service import add_address
from ...services.geocoding.client import GeocodingClient
from ..dependencies import get_geocoder, get_repository

router = APIRouter(prefix="/addresses", tags=["addresses"])
geocode_router = APIRouter(tags=["geocoding"])


def _address_model(address) -> AddressModel:
    return AddressModel(
        id=address.id,
        user_id=address.user_id,
        address=address.address,
        lat=address.lat,
        lng=address.lng,
        notes=address.notes,
        time_spent=address.time_spent,
        created_at=address.created_at,
        usage_count=address.usage_count,
    )


@router.post("", response_model=AddressModel, status_code=status.HTTP_201_CREATED)
def create_address(
    payload: AddressCreateRequest,
    geocoder: GeocodingClient = Depends(get_geocoder),
    repository: RouteRepository = Depends(get_repository),
) -> AddressModel:
    try:
        return _address_model(add_address(payload, geocoder, repository))
    except GeocodingError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error adding address: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to add address: {str(exc)}",
        ) from exc


@router.get("", response_model=list[AddressModel], status_code=status.HTTP_200_OK)
def list_addresses(
    user_id: str = Query(..., min_length=1),
    repository: RouteRepository = Depends(get_repository),
) -> list[AddressModel]:
    try:
        return [_address_model(address) for address in repository.list_addresses(user_id)]
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.delete("/{address_id}", status_code=status.HTTP_200_OK)
def delete_address(address_id: str, repository: RouteRepository = Depends(get_repository)) -> dict:
    try:
        deleted = repository.delete_address(address_id)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Address {address_id} not found")
    return {"success": True, "message": f"Address {address_id} removed"}


@router.get("/frequent", response_model=list[FrequentAddressModel], status_code=status.HTTP_200_OK)
def frequent_addresses(
    user_id: str = Query(..., min_length=1),
    limit: int = Query(default=settings.frequent_addresses_limit, ge=1, le=100),
    repository: RouteRepository = Depends(get_repository),
) -> list[FrequentAddressModel]:
    try:
        rows = repository.get_frequent_addresses(user_id, limit=limit)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return [
        FrequentAddressModel(
            id=str(row["id"]),
            address=row.get("address") or "",
            lat=row.get("lat"),
            lng=row.get("lng"),
            notes=row.get("notes"),
            usage_count=row.get("usage_count") or 0,
        )
        for row in rows
    ]


@router.delete("/frequent/{address_id}", status_code=status.HTTP_200_OK)
def delete_frequent_address(address_id: str, repository: RouteRepository = Depends(get_repository)) -> dict:
    try:
        deleted = repository.delete_frequent_address(address_id)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Frequent address {address_id} not found")
    return {"success": True, "message": f"Frequent address {address_id} removed"}


@geocode_router.post("/geocode", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
def geocode(payload: GeocodeRequest, geocoder: GeocodingClient = Depends(get_geocoder)) -> GeocodeResponse:
    try:
        result = geocoder.geocode(payload.address)
    except GeocodingError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return GeocodeResponse(lat=result.lat, lng=result.lng, formatted_address=result.formatted_address)
