"""Address book operations: geocode on entry, then store."""

from __future__ import annotations

import logging

from ...errors import PersistenceError
from ...models.domain import Address
from ...persistence.database import RouteRepository
from ...schemas.addresses import AddressCreateRequest
from ..geocoding.client import GeocodingClient

logger = logging.getLogger(__name__)


def add_address(
    payload: AddressCreateRequest,
    geocoder: GeocodingClient,
    repository: RouteRepository,
) -> Address:
    """Geocode ``payload.address`` and store it for the user.

    The address is also counted in the user's frequent addresses. A failure
    there is logged and does not undo the stored address.
    """
    location = geocoder.geocode(payload.address)
    stored = repository.add_address(
        user_id=payload.user_id,
        address=payload.address.strip(),
        lat=location.lat,
        lng=location.lng,
        notes=payload.notes,
        time_spent=payload.time_spent,
    )
    try:
        repository.record_frequent_address(stored)
    except PersistenceError as exc:
        logger.warning(f"Could not update frequent addresses for {stored.id}: {exc}")
    return stored
