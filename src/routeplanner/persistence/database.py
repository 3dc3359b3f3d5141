"""Database persistence for addresses, routes and frequent addresses."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from supabase import Client

from ..errors import PersistenceError
from ..models.domain import Address, OptimizationResult

logger = logging.getLogger(__name__)

ADDRESSES_TABLE = "addresses"
ROUTES_TABLE = "routes"
FREQUENT_ADDRESSES_TABLE = "frequent_addresses"


def address_from_row(row: dict[str, Any]) -> Address:
    return Address(
        id=str(row["id"]),
        user_id=str(row.get("user_id") or ""),
        address=str(row.get("address") or ""),
        lat=float(row["lat"]),
        lng=float(row["lng"]),
        notes=row.get("notes"),
        time_spent=row.get("time_spent"),
        created_at=row.get("created_at"),
        usage_count=row.get("usage_count"),
        raw=row,
    )


def address_to_row(address: Address) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": address.id,
        "user_id": address.user_id,
        "address": address.address,
        "lat": address.lat,
        "lng": address.lng,
        "notes": address.notes,
        "time_spent": address.time_spent,
    }
    if address.created_at:
        row["created_at"] = address.created_at
    return row


class RouteRepository:
    """Supabase-backed storage for a user's addresses and route history.

    The client is passed in explicitly; build one with
    :func:`routeplanner.db.client_from_settings`.
    """

    def __init__(self, client: Client | None) -> None:
        if client is None:
            raise PersistenceError(
                "Supabase not configured. Set RP_SUPABASE_URL and RP_SUPABASE_KEY environment variables."
            )
        self.client = client

    def _execute(self, description: str, query: Any) -> list[dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as exc:
            logger.error(f"Failed to {description}: {exc}")
            raise PersistenceError(f"Failed to {description}: {exc}") from exc
        data = getattr(response, "data", None)
        # scalar RPC results carry no rows
        return list(data) if isinstance(data, list) else []

    # Addresses

    def add_address(
        self,
        user_id: str,
        address: str,
        lat: float,
        lng: float,
        notes: str | None = None,
        time_spent: float | None = None,
    ) -> Address:
        payload = {
            "user_id": user_id,
            "address": address,
            "lat": lat,
            "lng": lng,
            "notes": notes,
            "time_spent": time_spent,
        }
        rows = self._execute("insert address", self.client.table(ADDRESSES_TABLE).insert(payload))
        if not rows:
            raise PersistenceError("Address insert returned no rows.")
        logger.info(f"Stored address {rows[0].get('id')} for user {user_id}")
        return address_from_row(rows[0])

    def list_addresses(self, user_id: str) -> list[Address]:
        rows = self._execute(
            "list addresses",
            self.client.table(ADDRESSES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True),
        )
        return [address_from_row(row) for row in rows]

    def delete_address(self, address_id: str) -> bool:
        rows = self._execute(
            "delete address",
            self.client.table(ADDRESSES_TABLE).delete().eq("id", address_id),
        )
        return bool(rows)

    # Routes

    def create_route(
        self,
        user_id: str,
        name: str,
        addresses: Sequence[Address],
        result: OptimizationResult,
    ) -> dict[str, Any]:
        """Persist an optimized route and return the stored row."""
        payload = {
            "user_id": user_id,
            "name": name,
            "addresses": [address_to_row(address) for address in addresses],
            "optimized_order": list(result.order),
            "total_distance": round(result.total_distance_km, 1),
            "total_duration": round(result.total_duration_min),
            "is_paid": False,
        }
        rows = self._execute("create route", self.client.table(ROUTES_TABLE).insert(payload))
        if not rows:
            raise PersistenceError("Route insert returned no rows.")
        logger.info(f"Saved route '{name}' ({rows[0].get('id')}) with {len(result.order)} stops")
        return rows[0]

    def list_routes(self, user_id: str) -> list[dict[str, Any]]:
        return self._execute(
            "list routes",
            self.client.table(ROUTES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True),
        )

    def get_route(self, route_id: str) -> dict[str, Any] | None:
        rows = self._execute(
            "get route",
            self.client.table(ROUTES_TABLE).select("*").eq("id", route_id).limit(1),
        )
        return rows[0] if rows else None

    def update_route_paid_status(self, route_id: str, is_paid: bool) -> dict[str, Any] | None:
        rows = self._execute(
            "update route paid status",
            self.client.table(ROUTES_TABLE).update({"is_paid": is_paid}).eq("id", route_id),
        )
        return rows[0] if rows else None

    # Frequent addresses

    def get_frequent_addresses(self, user_id: str, limit: int = 5) -> list[dict[str, Any]]:
        return self._execute(
            "get frequent addresses",
            self.client.table(FREQUENT_ADDRESSES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("usage_count", desc=True)
            .limit(limit),
        )

    def record_frequent_address(self, address: Address) -> dict[str, Any]:
        """Insert the address with a usage count of 1, or bump the count if it is already known."""
        existing = self._execute(
            "look up frequent address",
            self.client.table(FREQUENT_ADDRESSES_TABLE)
            .select("id")
            .eq("user_id", address.user_id)
            .eq("address", address.address)
            .limit(1),
        )
        if existing:
            self.increment_address_usage(str(existing[0]["id"]))
            return existing[0]

        payload = address_to_row(address)
        payload.pop("id", None)
        payload["usage_count"] = 1
        rows = self._execute(
            "insert frequent address",
            self.client.table(FREQUENT_ADDRESSES_TABLE).insert(payload),
        )
        if not rows:
            raise PersistenceError("Frequent address insert returned no rows.")
        return rows[0]

    def increment_address_usage(self, address_id: str) -> None:
        self._execute(
            "increment address usage",
            self.client.rpc("increment_address_usage", {"address_id": address_id}),
        )

    def delete_frequent_address(self, address_id: str) -> bool:
        rows = self._execute(
            "delete frequent address",
            self.client.table(FREQUENT_ADDRESSES_TABLE).delete().eq("id", address_id),
        )
        return bool(rows)

    def ping(self) -> bool:
        """Return True when the routes table answers a trivial query."""
        self._execute("reach database", self.client.table(ROUTES_TABLE).select("id").limit(1))
        return True
