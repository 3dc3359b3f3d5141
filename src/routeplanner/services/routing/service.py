"""Routing orchestration service."""

from __future__ import annotations

import logging
from itertools import accumulate
from typing import Sequence

from ...config import settings
from ...errors import PersistenceError, ValidationError
from ...models.domain import Address, CostBreakdown, CostParameters, OptimizationResult, Point
from ...persistence.database import RouteRepository
from ...schemas.routing import (
    CostBreakdownModel,
    CostEstimateRequest,
    CostParametersModel,
    GenerateRouteRequest,
    OptimizeRequest,
    OptimizeResponse,
    RouteStopModel,
)
from .optimizer import RouteOptimizer, default_cost_parameters

logger = logging.getLogger(__name__)


def _build_cost_parameters(overrides: CostParametersModel | None) -> CostParameters:
    base = default_cost_parameters()
    if overrides is None:
        return base
    return CostParameters(
        fuel_consumption_l_per_100km=overrides.fuel_consumption_l_per_100km
        if overrides.fuel_consumption_l_per_100km is not None
        else base.fuel_consumption_l_per_100km,
        fuel_price_per_l=overrides.fuel_price_per_l
        if overrides.fuel_price_per_l is not None
        else base.fuel_price_per_l,
        hourly_rate=overrides.hourly_rate
        if overrides.hourly_rate is not None
        else base.hourly_rate,
        maintenance_rate_per_km=overrides.maintenance_rate_per_km
        if overrides.maintenance_rate_per_km is not None
        else base.maintenance_rate_per_km,
    )


def _cost_model(costs: CostBreakdown) -> CostBreakdownModel:
    return CostBreakdownModel(
        fuel_cost=costs.fuel_cost,
        time_cost=costs.time_cost,
        maintenance_cost=costs.maintenance_cost,
        total=costs.total,
        currency=settings.currency,
    )


def build_stops(result: OptimizationResult, optimizer: RouteOptimizer) -> list[RouteStopModel]:
    """Expand an optimizer result into numbered stops with cumulative arrival times."""
    if not result.order:
        return []
    legs = (0.0, *result.legs_km) if result.legs_km else (0.0,) * len(result.order)
    arrivals = accumulate(optimizer.duration_minutes(leg) for leg in legs)
    return [
        RouteStopModel(
            id=point_id,
            sequence=sequence,
            distance_from_prev_km=leg,
            arrival_min=arrival,
        )
        for sequence, (point_id, leg, arrival) in enumerate(zip(result.order, legs, arrivals), start=1)
    ]


def _response(
    result: OptimizationResult,
    optimizer: RouteOptimizer,
    parameters: CostParameters,
    route_id: str | None = None,
) -> OptimizeResponse:
    costs = optimizer.estimate_costs(result.total_distance_km, result.total_duration_min, parameters)
    return OptimizeResponse(
        order=list(result.order),
        total_distance_km=result.total_distance_km,
        total_duration_min=result.total_duration_min,
        stops=build_stops(result, optimizer),
        costs=_cost_model(costs),
        route_id=route_id,
    )


def _addresses_for_payload(payload: OptimizeRequest) -> list[Address]:
    if payload.addresses:
        return [
            Address(
                id=item.id,
                user_id=payload.user_id or "",
                address=item.address,
                lat=item.lat,
                lng=item.lng,
                notes=item.notes,
                time_spent=item.time_spent,
            )
            for item in payload.addresses
        ]
    return [
        Address(id=point.id, user_id=payload.user_id or "", address=point.id, lat=point.lat, lng=point.lng)
        for point in payload.points
    ]


def optimize_points(payload: OptimizeRequest, repository: RouteRepository | None = None) -> OptimizeResponse:
    """Order the requested points, price the trip and optionally save it."""
    points = [Point(id=item.id, lat=item.lat, lng=item.lng) for item in payload.points]
    parameters = _build_cost_parameters(payload.cost_parameters)
    optimizer = RouteOptimizer(cost_parameters=parameters)
    result = optimizer.optimize(points, start_id=payload.start_id)

    route_id = None
    if payload.persist:
        if repository is None:
            raise PersistenceError("Route persistence requested but no database is configured.")
        row = repository.create_route(
            user_id=payload.user_id or "",
            name=payload.name or "",
            addresses=_addresses_for_payload(payload),
            result=result,
        )
        route_id = str(row.get("id")) if row.get("id") is not None else None

    return _response(result, optimizer, parameters, route_id=route_id)


def generate_route_for_user(payload: GenerateRouteRequest, repository: RouteRepository) -> OptimizeResponse:
    """Optimize every saved address of a user and store the result as a new route."""
    addresses = repository.list_addresses(payload.user_id)
    if len(addresses) < 2:
        raise ValidationError("You need at least 2 addresses to generate a route.")

    optimizer = RouteOptimizer()
    result = optimizer.optimize([address.to_point() for address in addresses], start_id=payload.start_id)
    row = repository.create_route(
        user_id=payload.user_id,
        name=payload.name,
        addresses=_order_addresses(addresses, result.order),
        result=result,
    )
    logger.info(f"Generated route '{payload.name}' for user {payload.user_id} over {len(addresses)} addresses")
    route_id = str(row.get("id")) if row.get("id") is not None else None
    return _response(result, optimizer, optimizer.cost_parameters, route_id=route_id)


def _order_addresses(addresses: Sequence[Address], order: Sequence[str]) -> list[Address]:
    by_id = {address.id: address for address in addresses}
    return [by_id[address_id] for address_id in order]


def estimate_trip_costs(payload: CostEstimateRequest) -> CostBreakdownModel:
    parameters = _build_cost_parameters(payload.parameters)
    optimizer = RouteOptimizer(cost_parameters=parameters)
    return _cost_model(optimizer.estimate_costs(payload.distance_km, payload.duration_min))
