"""Metre offsets on a spherical Earth with cyclic coordinate wrapping."""

from __future__ import annotations

import math

from domain.models import GeoPoint
from shared.constants import EARTH_RADIUS_KM, LAT_WRAP_BOUND, LNG_WRAP_BOUND

# Degrees of arc per metre along a great circle
METRE_IN_DEGREES = (1 / ((2 * math.pi / 360) * EARTH_RADIUS_KM)) / 1000


def wrap_coordinate(value: float, bound: float) -> float:
    """
    Map ``value`` onto ``[-bound, bound)`` cyclically.

    Values past the range re-enter from the opposite side, any number of
    periods away: ``wrap_coordinate(271, 90) == -89``,
    ``wrap_coordinate(-271, 90) == 89``, ``wrap_coordinate(90, 90) == -90``.
    """
    span = 2 * bound
    wrapped = ((value + bound) % span) - bound
    # float modulo can land exactly on the open end
    if wrapped >= bound:
        wrapped -= span
    return wrapped


def offset_point(point: GeoPoint, metres_lat: float, metres_lng: float) -> GeoPoint:
    """
    Move ``point`` by a north/east displacement in metres.

    The longitude step is widened by ``1 / cos(lat)`` to account for meridian
    convergence. Results are wrapped, not clamped, so crossing a pole or the
    antimeridian continues on the other side.

    Args:
        point: Origin.
        metres_lat: Northward displacement (negative = south).
        metres_lng: Eastward displacement (negative = west).

    Returns:
        Displaced point.
    """
    lat = point.lat + metres_lat * METRE_IN_DEGREES
    lng = point.lng + (metres_lng * METRE_IN_DEGREES) / math.cos(math.radians(point.lat))
    return GeoPoint(
        lat=wrap_coordinate(lat, LAT_WRAP_BOUND),
        lng=wrap_coordinate(lng, LNG_WRAP_BOUND),
    )


def metres_to_degrees(metres: float, lat: float | None = None) -> float:
    """Angular size of ``metres``; with ``lat`` given, measured along that parallel."""
    degrees = metres * METRE_IN_DEGREES
    if lat is None:
        return degrees
    return degrees / math.cos(math.radians(lat))
