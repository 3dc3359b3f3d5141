"""Exceptions raised by the route planner services."""


class ValidationError(ValueError):
    """Optimizer input was rejected (bad coordinates, duplicate ids, unknown start)."""


class GeocodingError(ValueError):
    """An address could not be resolved to coordinates."""


class PersistenceError(RuntimeError):
    """The database collaborator is unavailable or a query failed."""
