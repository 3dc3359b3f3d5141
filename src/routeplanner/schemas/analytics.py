"""Analytics API schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel


class WeekdayTotalsModel(BaseModel):
    name: str
    routes: int
    distance: float
    time: float
    cost: float


class AnalyticsSummaryResponse(BaseModel):
    totalRoutes: int
    paidRoutes: int
    unpaidRoutes: int
    totalDistanceKm: float
    totalDurationMin: float
    averageStops: float
    fuelCost: float
    timeCost: float
    maintenanceCost: float
    totalCost: float
    currency: str
    weekly: List[WeekdayTotalsModel]
