"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class PointModel(BaseModel):
    id: str = Field(..., min_length=1)
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False)


class AddressPayload(BaseModel):
    """Address details stored with a persisted route."""
    id: str = Field(..., min_length=1)
    address: str
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    notes: Optional[str] = None
    time_spent: Optional[float] = None


class CostParametersModel(BaseModel):
    fuel_consumption_l_per_100km: Optional[float] = Field(None, ge=0)
    fuel_price_per_l: Optional[float] = Field(None, ge=0)
    hourly_rate: Optional[float] = Field(None, ge=0)
    maintenance_rate_per_km: Optional[float] = Field(None, ge=0)


class OptimizeRequest(BaseModel):
    points: List[PointModel] = Field(default_factory=list)
    start_id: Optional[str] = Field(default=None, description="Id of the stop to start from. Defaults to the first point.")
    cost_parameters: Optional[CostParametersModel] = None
    persist: bool = False
    name: Optional[str] = Field(default=None, description="Route name used when persisting.")
    user_id: Optional[str] = Field(default=None, description="Owner of the persisted route.")
    addresses: Optional[List[AddressPayload]] = Field(
        default=None,
        description="Address details to store alongside the route. Defaults to the bare points.",
    )

    @model_validator(mode="after")
    def _require_owner_when_persisting(self) -> "OptimizeRequest":
        if self.persist and (not self.user_id or not self.name):
            raise ValueError("user_id and name are required when persist is true.")
        return self

    @model_validator(mode="after")
    def _addresses_match_points(self) -> "OptimizeRequest":
        if self.addresses is None:
            return self
        address_ids = [address.id for address in self.addresses]
        point_ids = [point.id for point in self.points]
        if len(address_ids) != len(set(address_ids)) or set(address_ids) != set(point_ids):
            raise ValueError("addresses must contain exactly one entry per point id.")
        return self


class GenerateRouteRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    start_id: Optional[str] = None


class RouteStopModel(BaseModel):
    id: str
    sequence: int
    distance_from_prev_km: float
    arrival_min: float


class CostBreakdownModel(BaseModel):
    fuel_cost: float
    time_cost: float
    maintenance_cost: float
    total: float
    currency: str


class OptimizeResponse(BaseModel):
    order: List[str]
    total_distance_km: float
    total_duration_min: float
    stops: List[RouteStopModel]
    costs: CostBreakdownModel
    route_id: Optional[str] = None


class CostEstimateRequest(BaseModel):
    distance_km: float = Field(..., ge=0, allow_inf_nan=False)
    duration_min: float = Field(..., ge=0, allow_inf_nan=False)
    parameters: Optional[CostParametersModel] = None


class PaidStatusRequest(BaseModel):
    is_paid: bool


class StoredRouteModel(BaseModel):
    id: str
    user_id: str
    name: str
    addresses: list = Field(default_factory=list)
    optimized_order: List[str] = Field(default_factory=list)
    total_distance: float
    total_duration: float
    is_paid: bool = False
    created_at: Optional[str] = None
