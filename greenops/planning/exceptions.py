"""
Exceptions raised by the planning and deployment layers.
"""


class GreenOpsError(Exception):
    """Base class for all planner errors."""


class InvalidPlanningRequest(GreenOpsError):
    """A planning request failed validation before any scoring ran."""


class InvalidDeploymentRequest(GreenOpsError):
    """A deployment request is missing required fields."""


class CatalogError(GreenOpsError):
    """A region catalog was constructed with inconsistent entries."""
