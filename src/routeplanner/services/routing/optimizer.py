"""Greedy nearest-neighbor route ordering and trip cost estimation.

The optimizer visits the closest unvisited stop at every step, starting from
the requested stop (or the first one). It does not return to the start and
performs no local-search refinement, so a stop far from the others tends to
end up as a long final leg. That behaviour is accepted: the result is a fast
approximation for coarse trip planning, not an optimal tour.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...errors import ValidationError
from ...models.domain import CostBreakdown, CostParameters, OptimizationResult, Point
from ..geospatial import haversine_km, validate_coordinates

logger = logging.getLogger(__name__)

DEFAULT_AVERAGE_SPEED_KMH = 50.0


def default_cost_parameters() -> CostParameters:
    return CostParameters(
        fuel_consumption_l_per_100km=settings.fuel_consumption_l_per_100km,
        fuel_price_per_l=settings.fuel_price_per_l,
        hourly_rate=settings.hourly_rate,
        maintenance_rate_per_km=settings.maintenance_rate_per_km,
    )


def _validate_points(points: Sequence[Point]) -> None:
    seen: set[str] = set()
    for point in points:
        validate_coordinates(point.lat, point.lng, label=f"point '{point.id}'")
        if point.id in seen:
            raise ValidationError(f"Duplicate point id '{point.id}'; ids must be unique.")
        seen.add(point.id)


class RouteOptimizer:
    """Orders stops with a nearest-neighbor heuristic and prices the trip."""

    def __init__(
        self,
        average_speed_kmh: float | None = None,
        cost_parameters: CostParameters | None = None,
    ) -> None:
        self.average_speed_kmh = (
            average_speed_kmh if average_speed_kmh is not None else settings.average_speed_kmh
        )
        if self.average_speed_kmh <= 0:
            raise ValueError("Average speed must be positive.")
        self.cost_parameters = cost_parameters or default_cost_parameters()

    def duration_minutes(self, distance_km: float) -> float:
        return distance_km / self.average_speed_kmh * 60

    def optimize(self, points: Sequence[Point], start_id: str | None = None) -> OptimizationResult:
        """Return a greedy visiting order for ``points``.

        Args:
            points: Stops to visit. Ids must be unique and coordinates valid.
            start_id: Id of the stop to start from. Defaults to the first point.

        Raises:
            ValidationError: On invalid coordinates, duplicate ids or an unknown start id.
        """
        points = list(points)
        _validate_points(points)
        if start_id is not None and all(point.id != start_id for point in points):
            raise ValidationError(f"Start point '{start_id}' is not among the points to visit.")

        if len(points) < 2:
            return OptimizationResult(
                order=tuple(point.id for point in points),
                total_distance_km=0.0,
                total_duration_min=0.0,
            )

        start = points[0] if start_id is None else next(p for p in points if p.id == start_id)
        remaining = [point for point in points if point.id != start.id]
        order = [start.id]
        legs: list[float] = []
        current = start

        while remaining:
            nearest_index = 0
            nearest_distance = haversine_km(current.lat, current.lng, remaining[0].lat, remaining[0].lng)
            for index in range(1, len(remaining)):
                candidate = remaining[index]
                distance = haversine_km(current.lat, current.lng, candidate.lat, candidate.lng)
                # strict comparison keeps the earliest point on ties
                if distance < nearest_distance:
                    nearest_distance = distance
                    nearest_index = index
            current = remaining.pop(nearest_index)
            order.append(current.id)
            legs.append(nearest_distance)

        total_distance = sum(legs)
        total_duration = sum(self.duration_minutes(leg) for leg in legs)
        logger.info(
            f"Ordered {len(order)} stops starting at '{start.id}': "
            f"{total_distance:.1f} km, {total_duration:.0f} min"
        )
        return OptimizationResult(
            order=tuple(order),
            total_distance_km=total_distance,
            total_duration_min=total_duration,
            legs_km=tuple(legs),
        )

    def estimate_costs(
        self,
        distance_km: float,
        duration_min: float,
        parameters: CostParameters | None = None,
    ) -> CostBreakdown:
        """Split the cost of a trip into fuel, driver time and vehicle wear."""
        # also rejects NaN
        if not (distance_km >= 0 and duration_min >= 0):
            raise ValidationError("Distance and duration must be non-negative.")
        params = parameters or self.cost_parameters
        return CostBreakdown(
            fuel_cost=distance_km * params.fuel_consumption_l_per_100km / 100 * params.fuel_price_per_l,
            time_cost=duration_min / 60 * params.hourly_rate,
            maintenance_cost=distance_km * params.maintenance_rate_per_km,
        )
