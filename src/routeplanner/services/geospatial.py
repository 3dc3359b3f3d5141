"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..errors import ValidationError

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) * math.sin(d_phi / 2)
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) * math.sin(d_lambda / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def validate_coordinates(lat: float, lng: float, *, label: str = "point") -> None:
    """Raise ValidationError unless (lat, lng) is a finite, in-range coordinate."""

    if isinstance(lat, bool) or isinstance(lng, bool):
        raise ValidationError(f"Coordinates for {label} must be numeric.")
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        raise ValidationError(f"Coordinates for {label} must be numeric.")
    if not math.isfinite(lat) or not math.isfinite(lng):
        raise ValidationError(f"Coordinates for {label} must be finite numbers.")
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude {lat} for {label} is outside -90..90.")
    if not -180.0 <= lng <= 180.0:
        raise ValidationError(f"Longitude {lng} for {label} is outside -180..180.")
