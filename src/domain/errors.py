"""Error taxonomy for elevation lookups.

``ConfigurationError`` aborts a whole batch. ``UnresolvableCoordinate`` and
``UnsupportedRegionSpan`` fail a single query and are tallied per item by
the batch runner. "No data" is not an error: queries return ``None``.
"""

from __future__ import annotations


class ElevationError(Exception):
    """Base class for all elevation lookup errors."""


class ConfigurationError(ElevationError):
    """Dataset, catalog or settings are unusable; nothing can be computed."""


class QueryError(ElevationError):
    """A single query cannot be answered."""


class UnresolvableCoordinate(QueryError):
    """A point or region corner lies outside every catalog tile."""

    def __init__(self, lat: float, lng: float) -> None:
        self.lat = lat
        self.lng = lng
        super().__init__(f'invalid coordinates provided: lat: {lat}, lng: {lng}')


class UnsupportedRegionSpan(QueryError):
    """A sampling region crosses more than one tile boundary along an axis."""
