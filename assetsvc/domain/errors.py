"""Exception hierarchy for the chart asset service.

Every lookup failure is one of these classes, so callers can tell a missing
chart from a missing chart version without inspecting messages.
"""

from typing import Optional


class AssetServiceError(Exception):
    """Base exception for all asset service errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(AssetServiceError):
    """
    No chart (or chart files record) exists for the given identifier.

    Raised by both chart lookups when the store reports no matching row.
    """

    status_code = 404

    def __init__(self, chart_id: str, namespace: Optional[str] = None) -> None:
        if namespace:
            message = f"chart {chart_id!r} not found in namespace {namespace!r}"
        else:
            message = f"chart {chart_id!r} not found"
        super().__init__(message)
        self.chart_id = chart_id
        self.namespace = namespace


class ChartVersionNotFound(AssetServiceError):
    """The chart exists, but not at the requested version."""

    status_code = 404

    def __init__(self, chart_id: str, version: str) -> None:
        super().__init__(f"chart {chart_id!r} has no version {version!r}")
        self.chart_id = chart_id
        self.version = version


class SeedError(AssetServiceError):
    """Raised when a seed document cannot be parsed into repos and charts."""

    status_code = 400
