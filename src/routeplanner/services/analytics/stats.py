"""Route history analytics helpers."""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime
from typing import Any, Iterable, Optional

from ...config import settings
from ...models.domain import CostParameters
from ..routing.optimizer import RouteOptimizer

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _as_float(value: Any) -> float:
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


def summarize_routes(
    routes: Iterable[dict[str, Any]],
    parameters: CostParameters | None = None,
) -> dict:
    """Aggregate stored route rows into dashboard totals.

    Costs are recomputed from each route's distance and duration so that
    history and fresh estimates share one cost model.
    """
    optimizer = RouteOptimizer(cost_parameters=parameters)
    weekly: "OrderedDict[str, dict]" = OrderedDict(
        (day, {"name": day, "routes": 0, "distance": 0.0, "time": 0.0, "cost": 0.0}) for day in WEEKDAYS
    )

    total_routes = 0
    paid_routes = 0
    total_stops = 0
    total_distance = 0.0
    total_duration = 0.0
    fuel = time_cost = maintenance = 0.0

    for route in routes:
        distance = max(_as_float(route.get("total_distance")), 0.0)
        duration = max(_as_float(route.get("total_duration")), 0.0)
        costs = optimizer.estimate_costs(distance, duration)

        total_routes += 1
        if route.get("is_paid"):
            paid_routes += 1
        total_stops += len(route.get("optimized_order") or [])
        total_distance += distance
        total_duration += duration
        fuel += costs.fuel_cost
        time_cost += costs.time_cost
        maintenance += costs.maintenance_cost

        created = _parse_timestamp(route.get("created_at"))
        if created is not None:
            bucket = weekly[WEEKDAYS[created.weekday()]]
            bucket["routes"] += 1
            bucket["distance"] += distance
            bucket["time"] += duration
            bucket["cost"] += costs.total

    for bucket in weekly.values():
        bucket["distance"] = round(bucket["distance"], 1)
        bucket["time"] = round(bucket["time"], 1)
        bucket["cost"] = round(bucket["cost"], 2)

    average_stops = round(total_stops / total_routes, 1) if total_routes else 0.0
    return {
        "totalRoutes": total_routes,
        "paidRoutes": paid_routes,
        "unpaidRoutes": total_routes - paid_routes,
        "totalDistanceKm": round(total_distance, 1),
        "totalDurationMin": round(total_duration, 1),
        "averageStops": average_stops,
        "fuelCost": round(fuel, 2),
        "timeCost": round(time_cost, 2),
        "maintenanceCost": round(maintenance, 2),
        "totalCost": round(fuel + time_cost + maintenance, 2),
        "currency": settings.currency,
        "weekly": list(weekly.values()),
    }
