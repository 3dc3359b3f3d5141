"""Route group exports."""

from . import addresses, analytics, health, routes

__all__ = ["addresses", "analytics", "health", "routes"]
