"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...errors import PersistenceError
from ...persistence.database import RouteRepository
from ...schemas.routing import (
    CostBreakdownModel,
    CostEstimateRequest,
    GenerateRouteRequest,
    OptimizeRequest,
    OptimizeResponse,
    PaidStatusRequest,
    StoredRouteModel,
)
from ...services.routing.service import estimate_trip_costs, generate_route_for_user, optimize_points
from ..dependencies import get_optional_repository, get_repository

router = APIRouter(prefix="/routes", tags=["routes"])
costs_router = APIRouter(prefix="/costs", tags=["costs"])


def _stored_route(row: dict) -> StoredRouteModel:
    try:
        return StoredRouteModel(**row)
    except Exception as exc:
        logging.exception(f"Malformed stored route {row.get('id')}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to read stored route: {str(exc)}",
        ) from exc


@router.post("/optimize", response_model=OptimizeResponse, status_code=status.HTTP_200_OK)
def optimize(
    payload: OptimizeRequest,
    repository: RouteRepository | None = Depends(get_optional_repository),
) -> OptimizeResponse:
    try:
        return optimize_points(payload, repository=repository)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc


@router.post("/generate", response_model=OptimizeResponse, status_code=status.HTTP_201_CREATED)
def generate(
    payload: GenerateRouteRequest,
    repository: RouteRepository = Depends(get_repository),
) -> OptimizeResponse:
    """Build and save a route over all of the user's saved addresses."""
    try:
        return generate_route_for_user(payload, repository)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.get("", response_model=list[StoredRouteModel], status_code=status.HTTP_200_OK)
def list_routes(
    user_id: str = Query(..., min_length=1, description="Owner of the routes"),
    repository: RouteRepository = Depends(get_repository),
) -> list[StoredRouteModel]:
    try:
        rows = repository.list_routes(user_id)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return [_stored_route(row) for row in rows]


@router.get("/{route_id}", response_model=StoredRouteModel, status_code=status.HTTP_200_OK)
def get_route(route_id: str, repository: RouteRepository = Depends(get_repository)) -> StoredRouteModel:
    try:
        row = repository.get_route(route_id)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Route {route_id} not found")
    return _stored_route(row)


@router.patch("/{route_id}/paid", response_model=StoredRouteModel, status_code=status.HTTP_200_OK)
def set_paid_status(
    route_id: str,
    payload: PaidStatusRequest,
    repository: RouteRepository = Depends(get_repository),
) -> StoredRouteModel:
    try:
        row = repository.update_route_paid_status(route_id, payload.is_paid)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Route {route_id} not found")
    return _stored_route(row)


@costs_router.post("/estimate", response_model=CostBreakdownModel, status_code=status.HTTP_200_OK)
def estimate(payload: CostEstimateRequest) -> CostBreakdownModel:
    try:
        return estimate_trip_costs(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
