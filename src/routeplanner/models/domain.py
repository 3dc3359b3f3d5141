"""Domain models for route stops, optimizer results and cost estimates."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class Point:
    """A geocoded location used as a route stop."""

    id: str
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class OptimizationResult:
    """Visiting order and totals produced by a single optimizer run."""

    order: tuple[str, ...]
    total_distance_km: float
    total_duration_min: float
    legs_km: tuple[float, ...] = ()


@dataclass(frozen=True, slots=True)
class CostParameters:
    """Rates used to turn distance and duration into money."""

    fuel_consumption_l_per_100km: float = 8.0
    fuel_price_per_l: float = 1.80
    hourly_rate: float = 30.0
    maintenance_rate_per_km: float = 0.05


@dataclass(frozen=True, slots=True)
class CostBreakdown:
    fuel_cost: float
    time_cost: float
    maintenance_cost: float

    @property
    def total(self) -> float:
        return self.fuel_cost + self.time_cost + self.maintenance_cost


@dataclass(slots=True)
class Address:
    """Represents a stored customer address with its coordinates."""

    id: str
    user_id: str
    address: str
    lat: float
    lng: float
    notes: Optional[str] = None
    time_spent: Optional[float] = None
    created_at: Optional[str] = None
    usage_count: Optional[int] = None
    raw: dict = field(default_factory=dict)

    def to_point(self) -> Point:
        return Point(id=self.id, lat=self.lat, lng=self.lng)
