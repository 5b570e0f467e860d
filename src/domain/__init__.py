"""Domain layer - value types, settings, errors and profiles."""
from domain.errors import (
    ConfigurationError,
    ElevationError,
    QueryError,
    UnresolvableCoordinate,
    UnsupportedRegionSpan,
)
from domain.models import (
    Coordinate,
    CoordinateDocument,
    ElevationResult,
    EnrichmentSettings,
    GeoPoint,
    Tile,
)
from domain.profiles import build_settings, load_profile, save_profile

__all__ = [
    'ConfigurationError',
    'Coordinate',
    'CoordinateDocument',
    'ElevationError',
    'ElevationResult',
    'EnrichmentSettings',
    'GeoPoint',
    'QueryError',
    'Tile',
    'UnresolvableCoordinate',
    'UnsupportedRegionSpan',
    'build_settings',
    'load_profile',
    'save_profile',
]
