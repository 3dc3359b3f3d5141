"""Address and geocoding API schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class AddressCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    notes: Optional[str] = None
    time_spent: Optional[float] = Field(default=None, ge=0, description="Minutes spent on site.")


class AddressModel(BaseModel):
    id: str
    user_id: str
    address: str
    lat: float
    lng: float
    notes: Optional[str] = None
    time_spent: Optional[float] = None
    created_at: Optional[str] = None
    usage_count: Optional[int] = None


class FrequentAddressModel(BaseModel):
    id: str
    address: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    notes: Optional[str] = None
    usage_count: int = 0


class GeocodeRequest(BaseModel):
    address: str = Field(..., min_length=1)


class GeocodeResponse(BaseModel):
    lat: float
    lng: float
    formatted_address: Optional[str] = None
